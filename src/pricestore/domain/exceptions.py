"""Domain-level exceptions.

Every failure a store or handler can report is a subclass of DomainException,
so the HTTP layer can map each one to exactly one status code.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Request input failed validation."""


class MissingParameterError(ValidationError):
    """A required request parameter was absent or empty."""

    def __init__(self, parameter: str) -> None:
        super().__init__(f"missing {parameter}")
        self.parameter = parameter


class PriceParseError(ValidationError):
    """Text could not be read as a decimal price."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid money amount: {text!r}")
        self.text = text


class NegativePriceError(ValidationError):
    """A price parsed but is below zero."""

    def __init__(self, name: str) -> None:
        super().__init__(f"price cannot be negative: {name!r}")
        self.name = name


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ItemNotFoundError(EntityNotFoundError):

    def __init__(self, name: str) -> None:
        super().__init__(f"no such item: {name!r}")
        self.name = name


class EntityAlreadyExistsError(DomainException):
    """An entity with the same key is already stored."""


class ItemAlreadyExistsError(EntityAlreadyExistsError):

    def __init__(self, name: str) -> None:
        super().__init__(f"item already exists: {name!r}")
        self.name = name


class StorageError(DomainException):
    """The storage backend failed to carry out an operation.

    The message carries the underlying driver error text.
    """
