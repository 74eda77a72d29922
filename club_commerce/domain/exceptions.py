"""Domain-specific exceptions"""

from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class PlanNotFoundError(DomainException):
    """Product has no installment plan with the requested month count"""

    def __init__(self, product_id: str, months: int):
        super().__init__(f"Product {product_id!r} has no {months}-month installment plan")
        self.product_id = product_id
        self.months = months


class EmptyCartError(DomainException):
    """Checkout attempted with no items in the cart"""

    pass


class MissingContextError(DomainException):
    """Club name, age group or division is missing"""

    pass


class InvalidDateRangeError(DomainException):
    """Report start date falls after the end date"""

    pass


class ProductValidationError(DomainException):
    """One or more product drafts failed validation"""

    def __init__(
        self,
        field_errors: Dict[int, Dict[str, str]],
        message: str = "Please fix the errors in the form.",
    ):
        super().__init__(message)
        self.field_errors = field_errors


class AuthenticationError(DomainException):
    """Identity token could not be obtained for a remote call"""

    pass


class RemoteServiceError(DomainException):
    """Club services returned an error or are unavailable"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProcessorRequestError(RemoteServiceError):
    """Checkout session creation was rejected by the payment processor"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Any] = None,
    ):
        super().__init__(message, status_code)
        self.payload = payload


class InvalidResponseShapeError(RemoteServiceError):
    """Remote response is malformed or missing required fields"""

    pass
