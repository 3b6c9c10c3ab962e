"""
Payment Flow Exceptions

Small exception hierarchy used by the checkout and verification services.
Every exception carries the HTTP status code it maps to, so the API views
can turn any of them into an explicit `{"error": ...}` response without
having to know which step failed.

Hierarchy:
- PaymentError (500)
  - Unauthorized (401)
  - InvalidRequest (400)
  - MissingParameter (400)
  - PaymentIncomplete (400, carries the gateway payment status)
  - NotFound (404)
  - UpstreamFailure (502)
"""

from typing import Any, Dict, Optional


class PaymentError(Exception):
    """
    Base exception for the payment-to-enrollment flow.

    Attributes:
        message (str): Human-readable error message, returned to the client
        status_code (int): HTTP status code of the error response
        error_code (str): Stable machine-readable identifier
        details (Dict[str, Any]): Extra fields merged into the error response

    Example:
        >>> try:
        ...     verifier.verify(identity, session_id)
        ... except PaymentError as e:
        ...     return Response(e.to_response(), status=e.status_code)
    """

    default_message = "Payment processing failed"
    default_status_code = 500
    default_error_code = "payment_error"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.status_code = status_code or self.default_status_code
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for logging and debugging.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "message": self.message,
            "status_code": self.status_code,
            "error_code": self.error_code,
            "details": self.details,
            "exception_type": self.__class__.__name__,
        }

    def to_response(self) -> Dict[str, Any]:
        """Body of the API error response: `{"error": message, **details}`."""
        return {"error": self.message, **self.details}


class Unauthorized(PaymentError):
    """The caller could not be authenticated from the supplied credential."""

    default_message = "Unauthorized"
    default_status_code = 401
    default_error_code = "unauthorized"


class InvalidRequest(PaymentError):
    """Empty or malformed item list."""

    default_message = "Invalid items provided"
    default_status_code = 400
    default_error_code = "invalid_request"


class MissingParameter(PaymentError):
    """A required request parameter is absent."""

    default_message = "No session ID provided"
    default_status_code = 400
    default_error_code = "missing_parameter"


class PaymentIncomplete(PaymentError):
    """
    The gateway reports the checkout session as not paid.

    The gateway's payment status is kept in `payment_status` and surfaced to
    the client as `status`.
    """

    default_message = "Payment not completed"
    default_status_code = 400
    default_error_code = "payment_incomplete"

    def __init__(self, payment_status: Optional[str], message: Optional[str] = None) -> None:
        self.payment_status = payment_status
        super().__init__(message, details={"status": payment_status})


class NotFound(PaymentError):
    """No ledger row matches both the session id and the caller."""

    default_message = "No matching payment found"
    default_status_code = 404
    default_error_code = "not_found"


class UpstreamFailure(PaymentError):
    """The payment gateway call itself failed."""

    default_message = "Payment provider request failed"
    default_status_code = 502
    default_error_code = "upstream_failure"
