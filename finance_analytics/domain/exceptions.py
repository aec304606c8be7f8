"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Caller supplied records that break the engine's input contract"""

    pass


class RecordStoreError(DomainException):
    """Record store returned an error or is unavailable"""

    pass


class RecordNotFoundError(RecordStoreError):
    """Requested budget, goal or user does not exist in the record store"""

    pass
