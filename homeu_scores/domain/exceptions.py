"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """A required field is missing or a value is outside its domain"""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class CalculationFallbackError(DomainException):
    """Native backend failed; the Python implementation takes over"""

    pass


class DoubleFailureError(DomainException):
    """Both the native backend and the Python implementation failed"""

    pass
