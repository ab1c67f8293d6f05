from decimal import Decimal, InvalidOperation
import logging

from django.conf import settings

from orders.models import Order, OrderItem
from payments.money import quantize

logger = logging.getLogger(__name__)


class OrderCalculationService:
    """Computes and stores the derived total of an order."""

    @staticmethod
    def calculate_total(items) -> Decimal:
        """
        Sum ``unit_price * quantity`` over the given items.

        A line without a unit price or with a non-positive quantity is left out
        of the sum and logged, so one corrupt record does not make the whole
        tab unreadable.
        """
        total = Decimal("0.00")
        for item in items:
            if item is None:
                continue
            if item.unit_price is None or item.quantity is None or item.quantity <= 0:
                logger.warning(
                    f"Excluding malformed line {getattr(item, 'id', None)} from order total "
                    f"(unit_price={item.unit_price}, quantity={item.quantity})"
                )
                continue
            try:
                total += Decimal(item.unit_price) * item.quantity
            except (InvalidOperation, TypeError, ValueError) as e:
                logger.warning(f"Excluding line {getattr(item, 'id', None)} from order total: {e}")
        return quantize(settings.PAYMENT_CURRENCY, total)

    @staticmethod
    def recalculate_order_total(order: Order) -> Order:
        """
        Recompute ``total_price`` from the stored items and save it.

        Must run inside the same transaction as the item mutation that made it
        necessary.
        """
        items = list(OrderItem.objects.filter(order=order))
        order.total_price = OrderCalculationService.calculate_total(items)
        order.save(update_fields=["total_price", "updated_at"])
        return order
