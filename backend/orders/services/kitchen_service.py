import logging

from orders.mappers import item_to_kitchen_dict, order_to_dict, table_to_dict
from orders.models import Order, OrderItem
from tables.services import TableService

logger = logging.getLogger(__name__)


class KitchenService:
    """Read models for the kitchen display and the floor staff."""

    @staticmethod
    def get_kitchen_queue():
        """
        Lines the kitchen still has to cook, oldest first.
        """
        items = (
            OrderItem.objects.with_order()
            .exclude_cancelled()
            .in_statuses(
                [OrderItem.ItemStatus.NEEDS_PREPARATION, OrderItem.ItemStatus.IN_PROGRESS]
            )
            .order_by("created_at", "id")
        )
        queue = [item_to_kitchen_dict(item) for item in items]
        logger.debug(f"Kitchen queue has {len(queue)} line(s) to prepare")
        return queue

    @staticmethod
    def get_service_tasks():
        """
        Everything waiting staff need to act on: dishes ready to carry out,
        tables calling for assistance and tabs waiting to be paid.
        """
        ready_items = (
            OrderItem.objects.with_order()
            .exclude_cancelled()
            .in_statuses([OrderItem.ItemStatus.READY])
            .order_by("updated_at", "id")
        )
        payment_orders = Order.objects.with_items().awaiting_payment().order_by("order_time")

        tasks = {
            "ready_items": [item_to_kitchen_dict(item) for item in ready_items],
            "assistance_tables": [
                table_to_dict(table) for table in TableService.tables_requesting_assistance()
            ],
            "payment_orders": [order_to_dict(order) for order in payment_orders],
        }
        logger.debug(
            f"Service tasks: {len(tasks['ready_items'])} ready, "
            f"{len(tasks['assistance_tables'])} assistance, "
            f"{len(tasks['payment_orders'])} awaiting payment"
        )
        return tasks
