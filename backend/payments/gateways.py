from abc import ABC, abstractmethod
import logging

import stripe
from django.conf import settings

from core_backend.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class PaymentGateway(ABC):
    """
    The Abstract Base Class for an online payment provider.
    Registers payment intents and checks the signatures on provider callbacks.
    """

    @abstractmethod
    def create_order(self, amount_minor: int, currency: str, receipt: str) -> str:
        """
        Registers a payment intent with the provider and returns the
        provider's opaque order id.

        Must raise ExternalServiceError when the provider cannot be reached,
        times out, or rejects the request.
        """
        pass

    @abstractmethod
    def verify_signature(self, fields, signature: str, payload=None, secret: str = None) -> bool:
        """
        True only when ``signature`` proves the provider reported a successful
        payment for ``fields`` (provider order id, provider payment id).
        Never raises for a bad or forged callback.
        """
        pass


class StripeGateway(PaymentGateway):
    """
    Online payments through a Stripe PaymentIntent.

    The intent id is the provider order id and the intent's charge id is the
    provider payment id. Completion is proven by a signed
    ``payment_intent.succeeded`` webhook: ``payload`` is the raw request body
    and ``signature`` the Stripe-Signature header.
    """

    SUCCEEDED_EVENT = "payment_intent.succeeded"

    def __init__(self, api_key: str = None, timeout: int = None, webhook_secret: str = None):
        self.api_key = api_key or settings.STRIPE_SECRET_KEY
        self.timeout = timeout or settings.PAYMENT_PROVIDER_TIMEOUT
        self.webhook_secret = webhook_secret or settings.STRIPE_WEBHOOK_SECRET

    def create_order(self, amount_minor: int, currency: str, receipt: str) -> str:
        stripe.api_key = self.api_key
        stripe.default_http_client = stripe.RequestsClient(timeout=self.timeout)

        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_minor,
                currency=currency.lower(),
                automatic_payment_methods={"enabled": True},
                metadata={"receipt": receipt},
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe rejected payment intent for receipt {receipt}: {e}")
            raise ExternalServiceError(
                "Payment provider request failed.", details={"provider_error": str(e)}
            )

        logger.info(f"Created Stripe PaymentIntent {intent.id} for receipt {receipt}")
        return intent.id

    def verify_signature(self, fields, signature: str, payload=None, secret: str = None) -> bool:
        provider_order_id, provider_payment_id = fields
        secret = secret or self.webhook_secret
        if not secret or not signature or not payload:
            return False

        try:
            event = stripe.Webhook.construct_event(payload, signature, secret)
        except ValueError as e:
            logger.warning(f"Stripe webhook: Invalid payload - {e}")
            return False
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Stripe webhook: Invalid signature - {e}")
            return False

        try:
            event_type = event["type"]
            payment_intent = event["data"]["object"]
            intent_id = payment_intent["id"]
            charge_id = payment_intent["latest_charge"]
        except (KeyError, TypeError):
            logger.warning("Stripe webhook: event is missing payment intent fields")
            return False

        if event_type != self.SUCCEEDED_EVENT:
            logger.info(f"Stripe webhook: ignoring {event_type} for intent {intent_id}")
            return False

        return intent_id == provider_order_id and charge_id == provider_payment_id


class PaymentGatewayFactory:
    """
    A factory for creating payment gateway instances.
    """

    GATEWAYS = {
        "stripe": StripeGateway,
    }

    @staticmethod
    def get_gateway(name: str = None) -> PaymentGateway:
        """
        Returns the gateway configured in settings.PAYMENT_GATEWAY unless a
        name is given.
        """
        name = (name or settings.PAYMENT_GATEWAY or "").lower()
        gateway_class = PaymentGatewayFactory.GATEWAYS.get(name)
        if gateway_class is None:
            raise ValueError(f"Unknown payment gateway: {name}")
        return gateway_class()
