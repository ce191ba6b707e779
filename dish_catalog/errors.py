from __future__ import annotations


class DishCatalogError(Exception):
    """Base error; carries the HTTP status it maps to."""

    status_code: int = 500
    public_message: str | None = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def response_message(self) -> str:
        return self.public_message or self.message


class ValidationError(DishCatalogError):
    """Bad or missing request input."""

    status_code = 400


class NotFoundError(DishCatalogError):
    status_code = 404


class StoreError(DishCatalogError):
    """The catalog could not be read."""

    status_code = 500
    public_message = "Internal server error"


class InternalError(DishCatalogError):
    status_code = 500
    public_message = "Internal server error"
