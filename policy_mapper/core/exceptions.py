class AppError(Exception):
    """Base exception for policy mapping errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error

class ValidationError(AppError):
    """Raised when a pipeline component receives invalid arguments."""
    pass

class ConfigurationError(AppError):
    """Raised when settings or rule tables are invalid."""
    pass

class MatchingError(AppError):
    """Raised when reference matching is misconfigured."""
    pass