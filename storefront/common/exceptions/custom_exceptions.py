"""Custom application-wide exceptions."""


class ApplicationError(Exception):
    """Base class for application-specific errors."""

    def __init__(
        self, message: str = "An application error occurred", original_exception: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original error: {self.original_exception})"
        return self.message


class APIError(ApplicationError):
    """Exception raised for errors during catalog API calls."""

    def __init__(
        self,
        message: str = "API call failed",
        original_exception: Exception | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, original_exception)
        self.status_code = status_code
        self.message = f"API Error: {message}"
        if status_code:
            self.message += f" (Status Code: {status_code})"


class TransientFetchError(APIError):
    """A catalog list, detail or image fetch failed. Recovered in-band, never fatal."""


class ProductNotFoundError(TransientFetchError):
    """The requested product id has no corresponding record."""

    def __init__(self, product_id, original_exception: Exception | None = None) -> None:
        super().__init__(f"Product {product_id} not found", original_exception, status_code=404)
        self.product_id = product_id


class PersistenceError(ApplicationError):
    """Exception raised when durable storage cannot be read or written."""

    def __init__(self, message: str = "Storage operation failed", original_exception: Exception | None = None) -> None:
        super().__init__(message, original_exception)
        self.message = f"Persistence Error: {message}"


class ImageHandleReleasedError(ApplicationError):
    """Raised when an image handle is read after it has been released."""


class SessionClosedError(ApplicationError):
    """Raised when a storefront session is used after teardown."""
