# personprovider/exceptions.py

class ProviderError(Exception):
    """Base exception for person provider operations"""
    pass

class SchemaError(ProviderError):
    """Raised when resource or provider values do not match the declared schema"""
    pass

class RollbackError(ProviderError):
    """Raised when rollback operations fail"""
    pass

class PersonError(ProviderError):
    """
    Raised when a request against the Person REST API fails.

    Carries the HTTP verb and URL of the failed request.  Server errors
    (non-2xx responses) also carry the HTTP status and, when the server sent
    one, a human-readable message and its error code.  Failures that never
    produced a response (bad payload, socket errors, timeouts, malformed JSON)
    carry the underlying exception as ``cause``.
    """
    def __init__(self, verb: str, url: str, http_status: int = None, message: str = None,
                 code: int = None, cause: Exception = None):
        self.verb = verb
        self.url = url
        self.http_status = http_status
        self.message = message
        self.code = code
        self.cause = cause
        super().__init__(self._render())

    def _render(self) -> str:
        if self.cause is not None:
            msg = f"error: {self.cause}"
        elif self.message is not None:
            msg = f"HTTP code: {self.http_status}; error from Person: {self.message}"
        else:
            msg = f"HTTP code: {self.http_status}."
        return f"Encountered an error on {self.verb} request to URL {self.url}: {msg}"

class PersonDecodeError(PersonError):
    """Raised when a successful response cannot be decoded into the expected shape"""
    pass

class ResourceNotFoundError(PersonError):
    """Raised when the server reports that a resource does not exist (HTTP 404)"""
    pass
