from dataclasses import dataclass
from typing import Optional
import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core_backend.exceptions import InvalidStateError, OrderEngineError
from core_backend.roles import CallerRole
from orders.mappers import order_to_dict
from orders.models import Order
from orders.services.item_service import lock_order
from orders.services.notification_service import order_notification_publisher

from .gateways import PaymentGatewayFactory
from .money import amounts_match, to_minor

logger = logging.getLogger(__name__)


@dataclass
class PaymentIntentResult:
    provider_order_id: str
    amount_minor_units: int
    currency: str
    publishable_key: str = ""


@dataclass
class VerificationResult:
    success: bool
    message: str
    order_id: Optional[int] = None
    public_tracking_id: Optional[str] = None
    new_status: Optional[str] = None


class PaymentService:
    """
    Reconciles online payments with the payment provider.

    Payment is a two step handshake: the server registers an intent for the
    amount it computed itself, then the provider's signed callback is
    verified before the tab is closed. The client is never trusted to assert
    a price or a completion.
    """

    PAYABLE_STATUSES = [Order.OrderStatus.AWAITING_PAYMENT]

    @staticmethod
    @transaction.atomic
    def create_payment_intent(
        order_id, client_amount=None, actor: str = CallerRole.CUSTOMER
    ) -> PaymentIntentResult:
        """
        Registers a payment intent for the order's stored total.

        Safe to repeat: a retry registers a fresh intent and overwrites the
        stored provider order id. If the provider call fails the transaction
        is rolled back and the order is left as it was.

        Raises:
            NotFoundError: order does not exist
            InvalidStateError: order is not awaiting payment
            ExternalServiceError: provider failure or timeout
        """
        order = lock_order(order_id)

        if order.status not in PaymentService.PAYABLE_STATUSES:
            raise InvalidStateError(
                f"Order must be AWAITING_PAYMENT to start a payment. Current status: {order.status}"
            )

        currency = settings.PAYMENT_CURRENCY
        amount_minor = to_minor(currency, order.total_price)

        if client_amount is not None and not amounts_match(
            currency, order.total_price, client_amount
        ):
            logger.warning(
                f"Client amount {client_amount} differs from stored total "
                f"{order.total_price} for order {order.id}; charging the stored total"
            )

        gateway = PaymentGatewayFactory.get_gateway()
        provider_order_id = gateway.create_order(
            amount_minor, currency, receipt=f"order_{order.id}"
        )

        order.provider_order_id = provider_order_id
        order.save(update_fields=["provider_order_id", "updated_at"])

        logger.info(
            f"Payment intent {provider_order_id} created for order {order.id}: "
            f"{amount_minor} {currency} (actor={actor})"
        )
        return PaymentIntentResult(
            provider_order_id=provider_order_id,
            amount_minor_units=amount_minor,
            currency=currency,
            publishable_key=settings.STRIPE_PUBLISHABLE_KEY,
        )

    @staticmethod
    def verify_payment(
        provider_order_id, provider_payment_id, signature, order_id, payload=None
    ) -> VerificationResult:
        """
        Verifies a provider callback and closes the tab.

        ``signature`` and ``payload`` are what the provider signed; for Stripe
        the Stripe-Signature header and the raw webhook body.

        Never raises: every failure becomes ``success=False`` so the callback
        endpoint can always answer with a structured result. Duplicate or
        concurrent callbacks for a paid order return ``success=True`` without
        touching it again.
        """
        try:
            gateway = PaymentGatewayFactory.get_gateway()
            if not gateway.verify_signature(
                [provider_order_id, provider_payment_id], signature, payload=payload
            ):
                logger.warning(
                    f"Payment signature mismatch for order {order_id} "
                    f"(provider order {provider_order_id})"
                )
                return VerificationResult(
                    success=False, message="Invalid payment signature.", order_id=order_id
                )

            return PaymentService._complete_verified_payment(
                provider_order_id, provider_payment_id, order_id
            )
        except OrderEngineError as e:
            logger.warning(f"Payment verification failed for order {order_id}: {e.message}")
            return VerificationResult(success=False, message=e.message, order_id=order_id)
        except Exception as e:
            logger.error(
                f"Unexpected error verifying payment for order {order_id}: {e}",
                exc_info=True,
            )
            return VerificationResult(
                success=False,
                message="Payment verification failed. Please contact staff.",
                order_id=order_id,
            )

    @staticmethod
    @transaction.atomic
    def _complete_verified_payment(provider_order_id, provider_payment_id, order_id):
        order = lock_order(order_id)

        def result(success, message):
            return VerificationResult(
                success=success,
                message=message,
                order_id=order.id,
                public_tracking_id=str(order.public_tracking_id),
                new_status=order.status,
            )

        if order.status == Order.OrderStatus.COMPLETED:
            logger.info(f"Payment for order {order.id} already processed")
            return result(True, "Payment already processed.")

        if order.status != Order.OrderStatus.AWAITING_PAYMENT:
            logger.warning(
                f"Rejected payment {provider_payment_id} for order {order.id} in status {order.status}"
            )
            return result(False, f"Order is not awaiting payment. Current status: {order.status}")

        if order.provider_order_id != provider_order_id:
            logger.warning(
                f"Provider order {provider_order_id} does not belong to order {order.id} "
                f"(stored: {order.provider_order_id})"
            )
            return result(False, "Payment does not match this order.")

        order.status = Order.OrderStatus.COMPLETED
        order.provider_payment_id = provider_payment_id
        order.completed_at = timezone.now()
        order.save(
            update_fields=["status", "provider_payment_id", "completed_at", "updated_at"]
        )
        logger.info(
            f"Order {order.id} paid online (provider payment {provider_payment_id})"
        )

        paid_order = Order.objects.with_items().get(id=order.id)
        order_notification_publisher.publish_on_commit(
            order.public_tracking_id,
            {"event": "order_status_changed", "order": order_to_dict(paid_order)},
        )
        return result(True, "Payment verified successfully.")
