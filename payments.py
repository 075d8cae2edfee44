"""
PayPal checkout through the Orders v2 REST API.

Only order creation is done here: the buyer is sent to the returned approval
link. Capturing the approved order is not handled by this service.
"""
import logging
from typing import Optional

import requests

import config
from errors import Internal

logger = logging.getLogger(__name__)

SANDBOX_URL = "https://api-m.sandbox.paypal.com"
LIVE_URL = "https://api-m.paypal.com"


def format_amount(amount_minor_units: int) -> str:
    """6000 -> "60.00" """
    return f"{amount_minor_units // 100}.{amount_minor_units % 100:02d}"


class PayPalClient:
    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        mode: Optional[str] = None,
        return_url: Optional[str] = None,
        cancel_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.client_id = client_id or config.PAYPAL_CLIENT_ID
        self.client_secret = client_secret or config.PAYPAL_CLIENT_SECRET
        mode = mode or config.PAYPAL_MODE
        self.base_url = LIVE_URL if mode == "live" else SANDBOX_URL
        self.return_url = return_url or config.PAYPAL_RETURN_URL
        self.cancel_url = cancel_url or config.PAYPAL_CANCEL_URL
        self.session = session or requests.Session()
        self.timeout = timeout or config.PAYPAL_TIMEOUT

    def _access_token(self) -> str:
        resp = self.session.post(
            f"{self.base_url}/v1/oauth2/token",
            auth=(self.client_id or "", self.client_secret or ""),
            data={"grant_type": "client_credentials"},
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()["access_token"]

    def create_checkout(self, amount_minor_units: int, currency: str) -> str:
        """Create a CAPTURE order and return the buyer approval URL."""
        body = {
            "intent": "CAPTURE",
            "purchase_units": [
                {"amount": {"currency_code": currency, "value": format_amount(amount_minor_units)}}
            ],
            "application_context": {
                "return_url": self.return_url,
                "cancel_url": self.cancel_url,
            },
        }
        try:
            token = self._access_token()
            resp = self.session.post(
                f"{self.base_url}/v2/checkout/orders",
                json=body,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                    "Prefer": "return=representation",
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
            order = resp.json()
        except (requests.RequestException, KeyError, ValueError):
            logger.exception("Error creating PayPal payment")
            raise Internal("Something went wrong")

        for link in order.get("links", []):
            if link.get("rel") == "approve":
                return link["href"]
        logger.error("PayPal order %s has no approve link", order.get("id"))
        raise Internal("Something went wrong")
