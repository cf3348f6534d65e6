"""Custom exception classes for the overlay filesystem."""


class OverlayException(Exception):
    """
    Base exception class for all overlay errors.
    """
    pass


class UnsupportedOperation(OverlayException):
    """
    Raised for operations the overlay never performs (append, legacy delete,
    create outside the staging prefix).
    """
    pass


class PolicyViolation(OverlayException):
    """
    Raised when a path breaks overlay policy, e.g. a mutating call given a
    path that carries a cache entry id. Also recorded (not raised) for
    directories met while listing.
    """

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class ParseError(OverlayException):
    """
    Raised when a logical path carries a malformed entry id suffix.
    """
    pass


class InvalidPathError(ParseError):
    """
    Raised when a raw path cannot be encoded because it contains the
    reserved separator.
    """
    pass


class NotInitializedError(OverlayException):
    """
    Raised when the filesystem is used before initialize() bound a registry.
    """
    pass


class PassthroughFailure(OverlayException):
    """
    Base class for failures raised by the backing store or cache registry.
    These propagate to the caller unchanged.
    """
    pass


class BackingStoreError(PassthroughFailure):
    """
    Raised when the backing store rejects a request or is unreachable.
    """

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class PathNotFoundError(BackingStoreError):
    """
    Raised when the backing store has no file or directory at the path.
    """
    pass


class PathExistsError(BackingStoreError):
    """
    Raised when the backing store refuses to overwrite an existing path.
    """
    pass


class CacheRegistryError(PassthroughFailure):
    """
    Raised when the cache registry is unreachable or answers with a server error.
    """

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code
