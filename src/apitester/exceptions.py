from typing import Any, Dict, Optional


class ApiTesterError(Exception):
    """Base class for exceptions in the apitester package."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TemplateError(ApiTesterError):
    """Exception raised when a template cannot be loaded or is invalid."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class RequestError(ApiTesterError):
    """Exception raised for errors in the request preparation or transmission."""

    def __init__(self, message: str, request_info: Optional[Dict[str, Any]] = None):
        self.request_info = request_info
        super().__init__(message)


class TransportError(RequestError):
    """Exception raised when no HTTP response could be obtained."""

    pass


class NetworkError(TransportError):
    """Exception raised for network connectivity issues (DNS, refused connection)."""

    pass


class TimeoutError(TransportError):
    """Exception raised when a request times out."""

    pass


class SSLError(TransportError):
    """Exception raised for SSL/TLS related errors."""

    pass


class ValidationError(ApiTesterError):
    """Exception raised for malformed user input such as auth or header values."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class ConfigurationError(ApiTesterError):
    """Exception raised for configuration issues."""

    pass
