"""
Service-layer exceptions for consistent error handling across docvault.

Infrastructure failures (rendering, storage) are errors. Business data is
coerced instead of rejected; only strict totals mode refuses a request.
"""


class ServiceError(Exception):
    """Base exception for all service-related errors."""
    pass


class ServiceUnavailable(ServiceError):
    """
    Raised when a dependency the service needs cannot be reached.

    Example:
        The database backing the artifact store is not connected yet.
        Callers answer with 503 and do not retry.
    """
    pass


class RenderError(ServiceError):
    """
    Raised when the rendering engine fails or times out.

    No partial document is ever returned or stored when this is raised.
    """
    pass
