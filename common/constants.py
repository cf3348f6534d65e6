"""Project-wide constants (path syntax, sentinels, default ports)."""

OVERLAY_SCHEME: str = "tachyon"
ENTRY_ID_SEPARATOR: str = "%"

NO_ENTRY: int = -1  # registry sentinel for "no entry" / failed creation

UNBOUNDED_BLOCK_SIZE: int = 2 ** 31 - 1  # block size reported for every overlay status
WHOLE_FILE_LENGTH: int = 2 ** 63 - 1  # length of a synthetic cache block location

# Backing-store fallback only ever resolves the first block
FALLBACK_RANGE_START: int = 0
FALLBACK_RANGE_LENGTH: int = 1

DEFAULT_STAGING_PREFIX: str = "/tmp/staging"
DEFAULT_REGISTRY_PORT: int = 19998
DEFAULT_WEBHDFS_PORT: int = 9870
DEFAULT_BUFFER_SIZE: int = 4096
DEFAULT_REPLICATION: int = 3
DEFAULT_TIMEOUT_SECONDS: float = 30.0

LOCAL_BLOCK_SIZE_BYTES: int = 64 * 1024 * 1024  # 64 MiB blocks for the local store
LOCAL_HOST: str = "localhost"

REQUEST_ID_HEADER: str = "X-Request-ID"
ENTRY_REFUSED_STATUS: int = 422  # registry declines to cache a path
