"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class BackendError(DomainException):
    """Row store returned an error or is unavailable"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RecordNotFoundError(DomainException):
    """Requested row does not exist or is not visible to the caller"""

    pass


class NotAuthenticatedError(DomainException):
    """Operation requires an owning user"""

    pass


class InvalidOperationError(DomainException):
    """Operation is not valid for the current state of the data"""

    pass


class ExtractionError(DomainException):
    """Bill image could not be turned into structured data"""

    pass


class ImportFormatError(DomainException):
    """Statement file is empty or its columns cannot be identified"""

    pass
