"""Custom exceptions for the application.

Every failure a usecase raises belongs to exactly one of these kinds. The
status code carried by each kind is what the error handlers send back.
"""


class AppException(Exception):
    """Base application exception."""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class CredentialsException(AppException):
    """Raised when credentials are wrong or missing."""
    def __init__(self, message: str = "wrong credentials"):
        super().__init__(message, status_code=401)


class TokenExpiredException(AppException):
    """Raised when token has expired."""
    def __init__(self, message: str = "token expired"):
        super().__init__(message, status_code=401)


class FormatException(AppException):
    """Raised when input is malformed or has the wrong type."""
    def __init__(self, message: str = "invalid format"):
        super().__init__(message, status_code=400)


class InvalidTokenException(AppException):
    """Raised when a token's signature, format, claims or type are wrong."""
    def __init__(self, message: str = "invalid token"):
        super().__init__(message, status_code=400)


class NotFoundException(AppException):
    """Raised when resource is not found."""
    def __init__(self, message: str = "not found"):
        super().__init__(message, status_code=404)


class ConflictException(AppException):
    """Raised when a uniqueness constraint is violated."""
    def __init__(self, message: str = "conflict"):
        super().__init__(message, status_code=409)


class ServiceUnavailableException(AppException):
    """Raised when service is temporarily unavailable (e.g., database connection failure)."""
    def __init__(self, message: str = "service temporarily unavailable"):
        super().__init__(message, status_code=503)


class InternalServerException(AppException):
    """Raised when an internal server error occurs."""
    def __init__(self, message: str = "internal server error"):
        super().__init__(message, status_code=500)


class PasswordHashError(InternalServerException):
    """Raised when a stored password hash cannot be parsed."""
    def __init__(self, message: str = "stored password hash is malformed"):
        super().__init__(message)
