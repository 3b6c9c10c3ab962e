"""
Payment success page reconciliation.

`PaymentReconciliation` backs the page the customer lands on after Stripe
Checkout. It moves through `idle → verifying → success | failed` and calls
the verifier at most once per instance; there is no automatic retry. A
missing session id is reported before a missing sign-in. A failed state
always carries a user-facing message and a link back to the payment
page.
"""

import enum
import logging
from typing import Any, Dict, List, Optional

from django.conf import settings

from .exceptions import PaymentError
from .services import CallerIdentity, PaymentVerifier

logger = logging.getLogger(__name__)

NO_SESSION_MESSAGE = "No session ID found. Payment verification failed."
VERIFY_ERROR_MESSAGE = "There was an error verifying your payment. Please contact support."
SIGN_IN_MESSAGE = "Please sign in again to verify your payment."


class ReconciliationState(str, enum.Enum):
    IDLE = "idle"
    VERIFYING = "verifying"
    SUCCESS = "success"
    FAILED = "failed"


def parse_course_ids(raw: Optional[str]) -> List[int]:
    """Parse a comma separated id list, ignoring tokens that are not positive integers."""
    if not raw:
        return []
    ids = []
    for token in raw.split(","):
        token = token.strip()
        if token.isdigit() and int(token) > 0 and int(token) not in ids:
            ids.append(int(token))
    return ids


class PaymentReconciliation:
    def __init__(
        self,
        identity: Optional[CallerIdentity],
        session_id: Optional[str],
        course_ids: Optional[List[int]] = None,
        verifier: Optional[PaymentVerifier] = None,
    ):
        self.identity = identity
        self.session_id = session_id or None
        self.course_ids = list(course_ids or [])
        self._verifier = verifier

        self.state = ReconciliationState.IDLE
        self.message = ""
        self.status_code = 200
        self.courses_enrolled = 0

    @property
    def verifier(self) -> PaymentVerifier:
        if self._verifier is None:
            self._verifier = PaymentVerifier()
        return self._verifier

    @property
    def retry_url(self) -> Optional[str]:
        if self.state != ReconciliationState.FAILED:
            return None
        return f"{settings.FRONTEND_URL.rstrip('/')}{settings.PAYMENT_CANCEL_PATH}"

    def run(self) -> "PaymentReconciliation":
        if self.state != ReconciliationState.IDLE:
            return self

        if not self.session_id:
            self._fail(NO_SESSION_MESSAGE, 400)
            return self

        if self.identity is None:
            self._fail(SIGN_IN_MESSAGE, 401)
            return self

        self.state = ReconciliationState.VERIFYING
        try:
            result = self.verifier.verify(self.identity, self.session_id, self.course_ids)
        except PaymentError as e:
            logger.warning(
                "Payment verification failed for session %s: %s", self.session_id, e.to_dict()
            )
            self._fail(VERIFY_ERROR_MESSAGE, e.status_code)
        except Exception:
            logger.exception("Unexpected error verifying session %s", self.session_id)
            self._fail(VERIFY_ERROR_MESSAGE, 500)
        else:
            self.state = ReconciliationState.SUCCESS
            self.courses_enrolled = len(result.enrolled_course_ids)
            self.message = "Your payment has been processed successfully."
        return self

    def _fail(self, message: str, status_code: int) -> None:
        self.state = ReconciliationState.FAILED
        self.message = message
        self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "message": self.message,
            "transaction_id": self.session_id if self.state == ReconciliationState.SUCCESS else None,
            "courses_enrolled": self.courses_enrolled,
            "retry_url": self.retry_url,
        }
