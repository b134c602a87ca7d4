# app/services/payment_gateway.py
import hashlib
import hmac

import requests
from requests import RequestException

from app.domain.errors import PaymentGatewayError
from app.utils.retry import http_retry
from app.utils.settings import (
    PAYMENT_API_URL,
    PAYMENT_KEY_ID,
    PAYMENT_KEY_SECRET,
    PAYMENT_TIMEOUT_SECONDS,
)
from app.utils.logging import get_logger

logger = get_logger(__name__)


def compute_signature(secret: str, intent_id: str, confirmation_id: str) -> str:
    payload = f"{intent_id}|{confirmation_id}".encode()
    return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()


class PaymentGatewayClient:
    """
    Bridge to the payment gateway REST API.

    ``create_intent`` registers a payment order on the gateway; the client
    completes payment there and comes back with a confirmation id and a
    signature that ``verify_signature`` checks against the shared secret.
    """

    def __init__(
        self,
        base_url: str | None = None,
        key_id: str | None = None,
        key_secret: str | None = None,
        timeout: int = PAYMENT_TIMEOUT_SECONDS,
    ):
        self.base_url = (base_url or PAYMENT_API_URL).rstrip("/")
        self.key_id = key_id if key_id is not None else PAYMENT_KEY_ID
        self.key_secret = key_secret if key_secret is not None else PAYMENT_KEY_SECRET
        self.timeout = timeout

    @http_retry()
    def _post(self, path: str, payload: dict) -> dict:
        url = f"{self.base_url}{path}"
        logger.info(f"PaymentGatewayClient POST {url}")

        resp = requests.post(
            url,
            json=payload,
            auth=(self.key_id, self.key_secret),
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def create_intent(self, amount: int, currency: str, receipt: str) -> dict:
        """amount is in minor units (paise, cents)."""
        try:
            data = self._post(
                "/orders",
                {"amount": amount, "currency": currency, "receipt": receipt},
            )
        except RequestException as e:
            logger.error(f"Payment intent creation failed for receipt {receipt}: {e}")
            raise PaymentGatewayError() from e

        if "id" not in data:
            logger.error(f"Payment gateway returned no intent id for receipt {receipt}")
            raise PaymentGatewayError()

        logger.info(f"Payment intent {data['id']} created for receipt {receipt}")
        return data

    def verify_signature(self, intent_id: str, confirmation_id: str, signature: str) -> bool:
        if not signature or not self.key_secret:
            return False
        expected = compute_signature(self.key_secret, intent_id, confirmation_id)
        return hmac.compare_digest(expected, signature)
