from django.db import transaction
from django.db.models import F
from django.utils import timezone
import logging

from core_backend.exceptions import NotFoundError, InvalidStateError, ValidationError
from core_backend.roles import CallerRole
from menu.services import CatalogService
from orders.mappers import order_item_to_dict
from orders.models import Order, OrderItem
from orders.serializers import validate_item_requests
from orders.services.calculation_service import OrderCalculationService
from orders.services.notification_service import order_notification_publisher

logger = logging.getLogger(__name__)


def lock_order(order_id) -> Order:
    """
    Load an order with a row lock for the rest of the transaction.

    Every mutation of the order aggregate goes through this so concurrent
    writers on the same tab are serialised.
    """
    try:
        return Order.objects.select_for_update().get(id=order_id)
    except (Order.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Order not found with ID: {order_id}")


class OrderItemService:
    """Service for order lines - aggregation and kitchen status."""

    @staticmethod
    def apply_items(order: Order, items: list) -> Order:
        """
        Merge validated item requests into a locked order and recompute its total.

        A dish already on the order has its quantity incremented in place; a new
        dish gets a new line at NEEDS_PREPARATION with the dish's current price.
        The caller must hold the order lock inside a transaction.
        """
        dishes = CatalogService.get_dishes([request["dish_id"] for request in items])

        for dish in dishes.values():
            if not dish.available:
                raise ValidationError(f"Dish '{dish.name}' is unavailable.")

        now = timezone.now()
        for request in items:
            dish = dishes[request["dish_id"]]
            quantity = request["quantity"]

            # Atomic increment; the order lock keeps the line set stable.
            updated = OrderItem.objects.filter(order=order, dish=dish).update(
                quantity=F("quantity") + quantity, updated_at=now
            )
            if updated:
                logger.debug(f"Incremented '{dish.name}' by {quantity} on order {order.id}")
                continue

            OrderItem.objects.create(
                order=order,
                dish=dish,
                dish_name=dish.name,
                quantity=quantity,
                unit_price=dish.price,
                item_status=OrderItem.ItemStatus.NEEDS_PREPARATION,
            )

        return OrderCalculationService.recalculate_order_total(order)

    @staticmethod
    @transaction.atomic
    def add_items(order_id, items, actor: str = CallerRole.CUSTOMER) -> Order:
        """
        Add items to an OPEN tab.

        Raises:
            ValidationError: empty or malformed items, unavailable dish
            NotFoundError: order or dish does not exist
            InvalidStateError: the order is not OPEN
        """
        validated_items = validate_item_requests(items)
        order = lock_order(order_id)

        if order.status != Order.OrderStatus.OPEN:
            raise InvalidStateError(
                f"Cannot add items to an order that is not OPEN. Current status: {order.status}"
            )

        logger.info(
            f"Adding {len(validated_items)} item(s) to order {order.id} (actor={actor})"
        )
        OrderItemService.apply_items(order, validated_items)
        return Order.objects.with_items().get(id=order.id)

    @staticmethod
    @transaction.atomic
    def update_item_status(item_id, new_status: str, actor: str = CallerRole.STAFF) -> OrderItem:
        """
        Move a line forward through NEEDS_PREPARATION -> IN_PROGRESS -> READY -> DELIVERED.

        Skipping ahead is allowed; moving back is rejected. Setting the current
        status again changes nothing and sends no notification.
        """
        if new_status not in OrderItem.ItemStatus.values:
            raise ValidationError(f"'{new_status}' is not a valid item status.")

        try:
            item = (
                OrderItem.objects.select_for_update()
                .select_related("order")
                .get(id=item_id)
            )
        except (OrderItem.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Order item not found with ID: {item_id}")

        current_rank = OrderItem.status_rank(item.item_status)
        new_rank = OrderItem.status_rank(new_status)

        if new_rank < current_rank:
            raise ValidationError(
                f"Cannot move item {item.id} back from {item.item_status} to {new_status}."
            )
        if new_rank == current_rank:
            return item

        logger.info(
            f"Updating item {item.id} status {item.item_status} -> {new_status} (actor={actor})"
        )
        item.item_status = new_status
        item.save(update_fields=["item_status", "updated_at"])

        order_notification_publisher.publish_on_commit(
            item.order.public_tracking_id,
            {"event": "item_status_changed", "item": order_item_to_dict(item)},
        )
        return item
