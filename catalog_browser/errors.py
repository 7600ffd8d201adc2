# catalog_browser/errors.py

"""Exception hierarchy shared by the transport, cache and sync layers."""


class CatalogError(Exception):
    """Base class for every catalog_browser failure."""


class TransportError(CatalogError):
    """A failed API call, normalised to a message and an HTTP status.

    ``status`` defaults to 500 when no response was received at all.
    """

    def __init__(self, message: str, status: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status={self.status})"
        )


class TransientNetworkError(TransportError):
    """Timeout, connection failure or 5xx; retried once before surfacing."""


class ClientError(TransportError):
    """4xx, unexpected status or malformed body; never retried."""


class CacheReadError(CatalogError):
    """A persisted cache payload or timestamp could not be decoded."""
