import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import stripe

from ticketbari.core.errors import PaymentGatewayError

logger = logging.getLogger(__name__)


def to_minor_units(amount: float) -> int:
    """12.345 -> 1235. Goes through str() so binary float noise does not truncate a cent."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentGateway:
    """Creates card payment intents; the client confirms them with the returned secret."""

    def __init__(self, api_key: Optional[str], currency: str = "usd"):
        self.api_key = api_key
        self.currency = currency

    def create_payment_intent(self, amount: float) -> str:
        if not self.api_key:
            logger.error("STRIPE_SECRET_KEY is not configured")
            raise PaymentGatewayError()
        amount_minor = to_minor_units(amount)
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=amount_minor,
                currency=self.currency,
                payment_method_types=["card"],
            )
        except stripe.StripeError as e:
            logger.error("Payment intent creation failed for %s %s: %s", amount_minor, self.currency, e)
            raise PaymentGatewayError()
        logger.info("Payment intent %s created for %s %s", intent.id, amount_minor, self.currency)
        return intent.client_secret
