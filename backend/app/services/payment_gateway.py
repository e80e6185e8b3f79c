"""
Payment gateway client.

Creates payment intents through the gateway's REST API. Card collection and
confirmation happen client-side with the returned client secret.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from backend.app.core.config import settings
from backend.app.core.exceptions import PaymentGatewayError

logger = logging.getLogger("parcel_service.payments")


class PaymentGateway:
    def __init__(
        self,
        api_key: str = None,
        base_url: str = None,
        timeout: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key or settings.payment_gateway_key
        self.base_url = base_url or settings.payment_gateway_url
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=(self.api_key, ""),
            timeout=timeout or settings.payment_gateway_timeout,
            transport=transport,
        )

    async def create_payment_intent(self, amount: int, currency: str = None) -> Dict[str, Any]:
        """
        Create a card payment intent.

        Args:
            amount: Amount in the smallest currency unit (cents for usd)
            currency: ISO currency code, defaults to the configured one

        Returns:
            The gateway's payment intent object

        Raises:
            PaymentGatewayError: if the gateway is unreachable or rejects the request
        """
        currency = currency or settings.payment_currency
        logger.info("Creating payment intent: amount=%s currency=%s", amount, currency)

        try:
            response = await self._client.post(
                "/v1/payment_intents",
                data={
                    "amount": str(amount),
                    "currency": currency,
                    "payment_method_types[]": "card",
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _gateway_error_message(e.response)
            logger.error("Payment gateway rejected intent (%s): %s", e.response.status_code, message)
            raise PaymentGatewayError(message) from e
        except httpx.HTTPError as e:
            logger.error("Payment gateway unreachable: %s", e)
            raise PaymentGatewayError(f"Payment gateway unavailable: {e}") from e

        return response.json()

    async def aclose(self):
        await self._client.aclose()


def _gateway_error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"Payment gateway returned HTTP {response.status_code}"


payment_gateway = PaymentGateway()


async def get_payment_gateway() -> PaymentGateway:
    """
    Get the process-wide gateway client.

    This can be used as a FastAPI dependency and overridden in tests.
    """
    return payment_gateway
