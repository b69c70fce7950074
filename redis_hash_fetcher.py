# redis_hash_fetcher.py
#
# Read one field out of one Redis hash. This is the diagnostic we use to
# look at what a workflow run left behind in the state store: the key is
# whatever the store wrote (we never pick it apart), the field is usually
# 'data'.
#
# The fetcher returns the value or raises. The caller decides what to do
# with an error; hget_data.py just lets it take the process down.

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import redis  # conda env or pip install

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "localhost:6379"
DEFAULT_PORT = 6379
DEFAULT_KEY = (
    "helloworldworkflow-app"
    "||dapr.internal.dapr-tests.helloworldworkflow-app.workflow"
    "||51d33015-7f97-4208-b2ed-19338e591aef"
    "||history-000005"
)
DEFAULT_FIELD = "data"


class FetchError(Exception):
    """Base class for errors raised by the fetcher itself (not by redis-py)."""
    pass


class FieldNotFoundError(FetchError):
    """Raised when HGET replies nil: the key or the field does not exist."""

    def __init__(self, key: str, field: str):
        self.key = key
        self.field = field
        super().__init__(f"Field '{field}' not found in hash '{key}' (key or field missing).")


@dataclass(frozen=True)
class FetchConfig:
    """
    Everything needed for one read.
    - address is host:port; the port may be left off. IPv6 hosts go in
      brackets when a port is given ('[::1]:6379'); a bare '::1' is a host.
    - An empty password means no AUTH is sent.
    - key is opaque.
    """
    address: str = DEFAULT_ADDRESS
    password: str = ""
    db: int = 0
    key: str = DEFAULT_KEY
    field: str = DEFAULT_FIELD

    def _split_address(self) -> Tuple[str, int]:
        address = self.address
        if address.startswith("["):
            host, _, rest = address[1:].partition("]")
            if rest.startswith(":") and rest[1:].isdigit():
                return host, int(rest[1:])
            return host, DEFAULT_PORT

        if address.count(":") > 1:
            # unbracketed IPv6, no port
            return address, DEFAULT_PORT

        host, _, port = address.rpartition(":")
        if not host or not port.isdigit():
            # no port given, e.g. 'localhost'
            return address, DEFAULT_PORT
        return host, int(port)

    @property
    def host(self) -> str:
        return self._split_address()[0]

    @property
    def port(self) -> int:
        return self._split_address()[1]


def make_client(config: FetchConfig) -> redis.Redis:
    # No socket timeout: a dead network blocks.
    # Replies stay bytes so values that are not UTF-8 come through untouched.
    return redis.Redis(
        host=config.host,
        port=config.port,
        db=config.db,
        password=config.password or None,
    )


def fetch_field(config: FetchConfig, client: Optional[redis.Redis] = None) -> bytes:
    """
    Issue one HGET for config.key/config.field and return the value as stored,
    as raw bytes. Raises FieldNotFoundError on a nil reply; redis-py errors
    (ConnectionError, ResponseError, ...) are not caught here.
    """
    if client is None:
        client = make_client(config)

    logger.debug("HGET %r %r on %s db=%d", config.key, config.field, config.address, config.db)
    value = client.hget(config.key, config.field)
    if value is None:
        logger.debug("HGET returned nil for %r %r", config.key, config.field)
        raise FieldNotFoundError(config.key, config.field)

    return value


def format_result(value: bytes) -> bytes:
    return b"key " + value
