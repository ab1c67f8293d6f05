"""
Order Management Tests

Covers the tab lifecycle as driven by customers and staff:
1. Starting a tab
2. Adding items and line aggregation
3. Bill request and staff status overrides
4. Lookups and listing

Run with: pytest backend/orders/tests/test_order_management.py -v
"""
import pytest
from decimal import Decimal

from django.db import IntegrityError, transaction

from core_backend.exceptions import ConflictError, InvalidStateError
from orders.models import Order, OrderItem
from orders.services import OrderService, OrderItemService


# ============================================================================
# START TAB TESTS
# ============================================================================

@pytest.mark.django_db
class TestStartTab:
    """Test opening a new tab for a table."""

    def test_start_tab_creates_open_order_with_total(self, table, dish, second_dish):
        """
        Scenario A: a tab with 2x150.00 and 1x40.00 totals 340.00.
        """
        order = OrderService.start_tab(
            table_id=table.id,
            items=[
                {"dish_id": dish.id, "quantity": 2},
                {"dish_id": second_dish.id, "quantity": 1},
            ],
            notes="No onions",
        )

        assert order.status == Order.OrderStatus.OPEN
        assert order.table_id == table.id
        assert order.notes == "No onions"
        assert order.total_price == Decimal("340.00")
        assert order.items.count() == 2
        assert order.public_tracking_id is not None

    def test_new_lines_start_at_needs_preparation_with_snapshot(self, table, dish):
        order = OrderService.start_tab(
            table_id=table.id, items=[{"dish_id": dish.id, "quantity": 1}]
        )

        line = order.items.get()
        assert line.item_status == OrderItem.ItemStatus.NEEDS_PREPARATION
        assert line.dish_name == "Butter Chicken"
        assert line.unit_price == Decimal("150.00")

    def test_line_keeps_price_after_menu_change(self, open_order, dish):
        """
        Changing the menu price must not re-price lines already on a tab.
        """
        dish.price = Decimal("999.00")
        dish.save()

        order = OrderService.get_order(open_order.id)
        assert order.items.get().unit_price == Decimal("150.00")
        assert order.total_price == Decimal("300.00")

    def test_second_open_tab_for_table_is_rejected(self, open_order, table, dish):
        """
        CRITICAL: a table has at most one OPEN tab.
        """
        with pytest.raises(ConflictError):
            OrderService.start_tab(
                table_id=table.id, items=[{"dish_id": dish.id, "quantity": 1}]
            )

        assert Order.objects.filter(table=table, status=Order.OrderStatus.OPEN).count() == 1

    def test_constraint_rejects_tab_inserted_behind_the_service(self, table, dish):
        """
        A row written outside OrderService still trips the database constraint,
        which start_tab reports as ConflictError.
        """
        Order.objects.create(table=table, status=Order.OrderStatus.OPEN)

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Order.objects.create(table=table, status=Order.OrderStatus.OPEN)

        with pytest.raises(ConflictError):
            OrderService.start_tab(
                table_id=table.id, items=[{"dish_id": dish.id, "quantity": 1}]
            )

        assert Order.objects.filter(table=table, status=Order.OrderStatus.OPEN).count() == 1
        assert OrderItem.objects.filter(order__table=table).count() == 0

    def test_new_tab_allowed_after_previous_one_closes(self, open_order, table, dish):
        OrderService.update_order_status(open_order.id, Order.OrderStatus.COMPLETED)

        order = OrderService.start_tab(
            table_id=table.id, items=[{"dish_id": dish.id, "quantity": 1}]
        )

        assert order.id != open_order.id
        assert order.status == Order.OrderStatus.OPEN

    def test_tabs_on_different_tables_are_independent(self, open_order, second_table, dish):
        order = OrderService.start_tab(
            table_id=second_table.id, items=[{"dish_id": dish.id, "quantity": 1}]
        )

        assert order.status == Order.OrderStatus.OPEN
        assert Order.objects.filter(status=Order.OrderStatus.OPEN).count() == 2


# ============================================================================
# ADD ITEMS / AGGREGATION TESTS
# ============================================================================

@pytest.mark.django_db
class TestAddItems:
    """Test adding rounds of items to a running tab."""

    def test_same_dish_is_aggregated_into_one_line(self, open_order, dish):
        """
        Scenario B: adding 3 more of a dish already on the tab increments the
        existing line instead of creating a second one.
        """
        order = OrderItemService.add_items(
            open_order.id, [{"dish_id": dish.id, "quantity": 3}]
        )

        lines = list(order.items.all())
        assert len(lines) == 1
        assert lines[0].quantity == 5
        assert order.total_price == Decimal("750.00")

    def test_duplicate_dish_within_one_request_is_aggregated(self, open_order, second_dish):
        order = OrderItemService.add_items(
            open_order.id,
            [
                {"dish_id": second_dish.id, "quantity": 1},
                {"dish_id": second_dish.id, "quantity": 2},
            ],
        )

        naan = order.items.get(dish=second_dish)
        assert naan.quantity == 3
        assert order.items.count() == 2
        assert order.total_price == Decimal("420.00")

    def test_aggregation_keeps_item_status(self, open_order, dish):
        line = open_order.items.get()
        OrderItemService.update_item_status(line.id, OrderItem.ItemStatus.IN_PROGRESS)

        OrderItemService.add_items(open_order.id, [{"dish_id": dish.id, "quantity": 1}])

        line.refresh_from_db()
        assert line.quantity == 3
        assert line.item_status == OrderItem.ItemStatus.IN_PROGRESS

    def test_total_matches_lines_after_every_mutation(self, open_order, dish, second_dish):
        OrderItemService.add_items(open_order.id, [{"dish_id": second_dish.id, "quantity": 4}])
        OrderItemService.add_items(open_order.id, [{"dish_id": dish.id, "quantity": 1}])

        order = OrderService.get_order(open_order.id)
        expected = sum(item.unit_price * item.quantity for item in order.items.all())
        assert order.total_price == expected == Decimal("610.00")

    def test_add_items_to_billed_order_is_rejected(self, billed_order, dish):
        with pytest.raises(InvalidStateError):
            OrderItemService.add_items(billed_order.id, [{"dish_id": dish.id, "quantity": 1}])

        billed_order.refresh_from_db()
        assert billed_order.total_price == Decimal("450.00")

    def test_add_items_to_completed_order_is_rejected(self, open_order, dish):
        OrderService.update_order_status(open_order.id, Order.OrderStatus.COMPLETED)

        with pytest.raises(InvalidStateError):
            OrderItemService.add_items(open_order.id, [{"dish_id": dish.id, "quantity": 1}])


# ============================================================================
# BILL REQUEST AND STATUS OVERRIDE TESTS
# ============================================================================

@pytest.mark.django_db
class TestOrderStatusTransitions:
    """Test bill requests and staff-driven status changes."""

    def test_request_bill_moves_open_to_awaiting_payment(self, open_order):
        order = OrderService.request_bill(open_order.id)

        assert order.status == Order.OrderStatus.AWAITING_PAYMENT

    def test_request_bill_twice_is_rejected(self, billed_order):
        with pytest.raises(InvalidStateError):
            OrderService.request_bill(billed_order.id)

    def test_counter_payment_completes_billed_order(self, billed_order):
        """
        Offline payment: staff close the tab without the online handshake.
        """
        order = OrderService.update_order_status(
            billed_order.id, Order.OrderStatus.COMPLETED
        )

        assert order.status == Order.OrderStatus.COMPLETED
        assert order.completed_at is not None
        assert order.provider_payment_id is None

    def test_staff_can_reopen_billed_order(self, billed_order):
        order = OrderService.update_order_status(billed_order.id, Order.OrderStatus.OPEN)

        assert order.status == Order.OrderStatus.OPEN

    def test_cancel_open_order(self, open_order):
        order = OrderService.update_order_status(open_order.id, Order.OrderStatus.CANCELLED)

        assert order.status == Order.OrderStatus.CANCELLED
        assert order.is_terminal

    @pytest.mark.parametrize(
        "terminal_status", [Order.OrderStatus.COMPLETED, Order.OrderStatus.CANCELLED]
    )
    def test_terminal_orders_cannot_change(self, open_order, terminal_status):
        OrderService.update_order_status(open_order.id, terminal_status)

        with pytest.raises(InvalidStateError):
            OrderService.update_order_status(open_order.id, Order.OrderStatus.OPEN)

    def test_reopen_rejected_when_table_has_another_open_tab(self, billed_order, table, dish):
        """
        Re-opening a billed tab must not create a second OPEN tab on the table.
        """
        OrderService.start_tab(table_id=table.id, items=[{"dish_id": dish.id, "quantity": 1}])

        with pytest.raises(ConflictError):
            OrderService.update_order_status(billed_order.id, Order.OrderStatus.OPEN)

        billed_order.refresh_from_db()
        assert billed_order.status == Order.OrderStatus.AWAITING_PAYMENT


# ============================================================================
# LOOKUP AND LISTING TESTS
# ============================================================================

@pytest.mark.django_db
class TestOrderLookups:
    """Test read operations used by the customer and staff surfaces."""

    def test_get_active_order_for_table(self, open_order, table):
        order = OrderService.get_active_order_for_table(table.id)

        assert order.id == open_order.id

    def test_no_active_order_once_bill_requested(self, billed_order, table):
        assert OrderService.get_active_order_for_table(table.id) is None

    def test_no_active_order_for_empty_table(self, table):
        assert OrderService.get_active_order_for_table(table.id) is None

    def test_status_by_tracking_id(self, open_order):
        status = OrderService.get_order_status_by_tracking_id(
            str(open_order.public_tracking_id)
        )

        assert status["internal_order_id"] == open_order.id
        assert status["status"] == Order.OrderStatus.OPEN
        assert status["total_price"] == "300.00"
        assert status["items"][0]["dish_name"] == "Butter Chicken"

    def test_list_orders_filters_by_status_and_table(
        self, open_order, billed_order_on_second_table, table, second_table
    ):
        awaiting = OrderService.list_orders(status=Order.OrderStatus.AWAITING_PAYMENT)
        assert [o.id for o in awaiting] == [billed_order_on_second_table.id]

        on_first_table = OrderService.list_orders(table_id=table.id)
        assert [o.id for o in on_first_table] == [open_order.id]

        everything = OrderService.list_orders()
        assert everything.paginator.count == 2

    def test_list_orders_paginates(self, open_order, billed_order_on_second_table):
        page = OrderService.list_orders(page=2, page_size=1)

        assert page.number == 2
        assert page.paginator.num_pages == 2
        assert len(page.object_list) == 1


@pytest.fixture
def billed_order_on_second_table(second_table, second_dish):
    order = OrderService.start_tab(
        table_id=second_table.id, items=[{"dish_id": second_dish.id, "quantity": 1}]
    )
    return OrderService.request_bill(order.id)
