"""Exception taxonomy for catalog operations."""


class CatalogError(Exception):
    """Base class for errors raised by catalog services."""


class NotFoundError(CatalogError):
    """A record addressed by id does not exist."""

    def __init__(self, resource: str, identifier: object) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")


class ValidationError(CatalogError):
    """Submitted input failed one or more field rules."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__(f"Validation failed for: {', '.join(errors)}")


class StorageError(CatalogError):
    """Writing an uploaded file to blob storage failed."""
