from django.conf import settings
from django.core.paginator import Paginator
from django.db import IntegrityError, transaction
from django.utils import timezone
import logging

from core_backend.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from core_backend.roles import CallerRole
from orders.mappers import order_to_customer_status, order_to_dict
from orders.models import Order
from orders.serializers import validate_start_tab_request
from orders.services.item_service import OrderItemService, lock_order
from orders.services.notification_service import order_notification_publisher
from tables.services import TableService

logger = logging.getLogger(__name__)


class OrderService:
    """Core service for the tab lifecycle - open, bill, close, cancel."""

    # Valid status transitions for the tab state machine
    VALID_STATUS_TRANSITIONS = {
        Order.OrderStatus.OPEN: [
            Order.OrderStatus.AWAITING_PAYMENT,
            Order.OrderStatus.COMPLETED,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.AWAITING_PAYMENT: [
            Order.OrderStatus.OPEN,  # Guests kept ordering after asking for the bill
            Order.OrderStatus.COMPLETED,  # Paid at the counter
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.COMPLETED: [],
        Order.OrderStatus.CANCELLED: [],
    }

    @staticmethod
    @transaction.atomic
    def start_tab(table_id, items, notes: str = "", actor: str = CallerRole.CUSTOMER) -> Order:
        """
        Opens a new tab for a table with its first round of items.

        The one-open-tab-per-table rule is enforced by a database constraint,
        so two concurrent calls for the same table cannot both succeed.

        Raises:
            ValidationError: empty or malformed items, unavailable dish
            NotFoundError: table or dish does not exist
            ConflictError: the table already has an OPEN tab
        """
        request = validate_start_tab_request(table_id, items, notes)
        table = TableService.get_table(request["table_id"])
        logger.info(f"Starting new tab for table {table.table_number} (actor={actor})")

        try:
            with transaction.atomic():
                order = Order.objects.create(
                    table=table,
                    status=Order.OrderStatus.OPEN,
                    notes=request["notes"],
                )
        except IntegrityError:
            logger.warning(f"Rejected second open tab for table {table.table_number}")
            raise ConflictError("An open tab already exists for this table.")

        OrderItemService.apply_items(order, request["items"])
        return Order.objects.with_items().get(id=order.id)

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return Order.objects.with_items().get(id=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Order not found with ID: {order_id}")

    @staticmethod
    def get_active_order_for_table(table_id):
        """Returns the table's OPEN tab, or None when there is none."""
        return Order.objects.with_items().open_for_table(table_id)

    @staticmethod
    def get_order_status_by_tracking_id(public_tracking_id) -> dict:
        order = Order.objects.with_items().by_tracking_id(public_tracking_id)
        if order is None:
            raise NotFoundError(
                f"Order not found with tracking ID: {public_tracking_id}"
            )
        return order_to_customer_status(order)

    @staticmethod
    def list_orders(table_id=None, status=None, page=1, page_size=None):
        """
        Paginated order listing for staff views, newest first.

        Returns a django.core.paginator.Page of orders.
        """
        if status is not None and status not in Order.OrderStatus.values:
            raise ValidationError(f"'{status}' is not a valid order status.")

        queryset = Order.objects.with_items().filter_for_listing(
            table_id=table_id, status=status
        )
        paginator = Paginator(queryset, page_size or settings.ORDER_LIST_PAGE_SIZE)
        return paginator.get_page(page)

    @staticmethod
    @transaction.atomic
    def request_bill(order_id, actor: str = CallerRole.CUSTOMER) -> Order:
        """Moves an OPEN tab to AWAITING_PAYMENT."""
        order = lock_order(order_id)
        if order.status != Order.OrderStatus.OPEN:
            raise InvalidStateError(
                f"Can only request bill for an OPEN tab. Current status: {order.status}"
            )

        logger.info(f"Bill requested for order {order.id} (actor={actor})")
        order.status = Order.OrderStatus.AWAITING_PAYMENT
        order.save(update_fields=["status", "updated_at"])
        return Order.objects.with_items().get(id=order.id)

    @staticmethod
    @transaction.atomic
    def update_order_status(order_id, new_status: str, actor: str = CallerRole.STAFF) -> Order:
        """
        Staff override of the tab status, e.g. closing a tab paid at the counter
        or cancelling it.

        Terminal tabs cannot be changed. Re-opening a tab is rejected with
        ConflictError when the table already has another OPEN tab.
        """
        if new_status not in Order.OrderStatus.values:
            raise ValidationError(f"'{new_status}' is not a valid order status.")

        order = lock_order(order_id)

        if new_status not in OrderService.VALID_STATUS_TRANSITIONS.get(order.status, []):
            raise InvalidStateError(
                f"Cannot transition order from {order.status} to {new_status}."
            )

        logger.info(
            f"Updating order {order.id} status {order.status} -> {new_status} (actor={actor})"
        )
        order.status = new_status
        update_fields = ["status", "updated_at"]
        if new_status == Order.OrderStatus.COMPLETED:
            order.completed_at = timezone.now()
            update_fields.append("completed_at")
        elif new_status == Order.OrderStatus.OPEN:
            # The total can change again, so an intent for the old total must not settle it.
            order.provider_order_id = None
            update_fields.append("provider_order_id")

        try:
            with transaction.atomic():
                order.save(update_fields=update_fields)
        except IntegrityError:
            raise ConflictError("An open tab already exists for this table.")

        order = Order.objects.with_items().get(id=order.id)

        # The customer's bill page closes when payment is taken offline.
        if new_status == Order.OrderStatus.COMPLETED:
            order_notification_publisher.publish_on_commit(
                order.public_tracking_id,
                {"event": "order_status_changed", "order": order_to_dict(order)},
            )
        return order
