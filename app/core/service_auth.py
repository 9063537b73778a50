"""
Trusted service callers.

Privileged operations (plan sync, unauthenticated usage reads, identity
provider sync, notification fan-out) take a ServiceCaller argument so the
trust boundary is visible in their signatures. Only transport-level code
constructs one: the internal router after checking the shared service token,
and the billing webhook after verifying the Stripe signature.
"""
import hmac
import logging
from dataclasses import dataclass
from typing import Optional
from fastapi import Header
from app.core import config
from app.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceCaller:
    """Identity of an internal caller that is trusted to bypass membership checks."""
    name: str


INTERNAL_API_CALLER = ServiceCaller(name="internal-api")
STRIPE_WEBHOOK_CALLER = ServiceCaller(name="stripe-webhook")
OPERATOR_SCRIPT_CALLER = ServiceCaller(name="operator-script")


def require_service_caller(x_service_token: Optional[str] = Header(None)) -> ServiceCaller:
    """
    Dependency that admits requests carrying the shared X-Service-Token.

    With no SERVICE_API_TOKEN configured every internal request is rejected.
    """
    expected = config.SERVICE_API_TOKEN
    if not expected or not x_service_token:
        logger.warning("Internal request rejected: missing service token")
        raise UnauthorizedError("Service token required")

    if not hmac.compare_digest(x_service_token.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Internal request rejected: invalid service token")
        raise UnauthorizedError("Invalid service token")

    return INTERNAL_API_CALLER
