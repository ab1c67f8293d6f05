"""
Kitchen queue and floor-staff task list tests.
"""
import pytest
from unittest.mock import patch

from orders.models import Order, OrderItem
from orders.services import KitchenService, OrderItemService, OrderService
from tables.services import TableService


@pytest.mark.django_db
class TestKitchenQueue:

    def test_queue_contains_lines_still_to_cook(self, open_order, second_dish):
        order = OrderItemService.add_items(
            open_order.id, [{"dish_id": second_dish.id, "quantity": 1}]
        )
        chicken, naan = order.items.order_by("id")
        OrderItemService.update_item_status(naan.id, OrderItem.ItemStatus.IN_PROGRESS)

        queue = KitchenService.get_kitchen_queue()

        assert [entry["order_item_id"] for entry in queue] == [chicken.id, naan.id]
        assert queue[1]["item_status"] == OrderItem.ItemStatus.IN_PROGRESS

    def test_ready_and_delivered_lines_leave_the_queue(self, open_order):
        line = open_order.items.get()
        OrderItemService.update_item_status(line.id, OrderItem.ItemStatus.READY)

        assert KitchenService.get_kitchen_queue() == []

    def test_cancelled_tabs_leave_the_queue(self, open_order):
        OrderService.update_order_status(open_order.id, Order.OrderStatus.CANCELLED)

        assert KitchenService.get_kitchen_queue() == []

    def test_queue_size_is_logged(self, open_order):
        with patch("orders.services.kitchen_service.logger") as mock_logger:
            KitchenService.get_kitchen_queue()

        mock_logger.debug.assert_called_once_with("Kitchen queue has 1 line(s) to prepare")


@pytest.mark.django_db
class TestServiceTasks:

    def test_empty_floor(self, db):
        tasks = KitchenService.get_service_tasks()

        assert tasks == {"ready_items": [], "assistance_tables": [], "payment_orders": []}

    def test_service_tasks_collect_everything_staff_must_act_on(
        self, open_order, billed_order_elsewhere, second_table
    ):
        line = open_order.items.get()
        OrderItemService.update_item_status(line.id, OrderItem.ItemStatus.READY)
        TableService.set_assistance_requested(second_table.id, True)

        tasks = KitchenService.get_service_tasks()

        assert [entry["order_item_id"] for entry in tasks["ready_items"]] == [line.id]
        assert [entry["id"] for entry in tasks["assistance_tables"]] == [second_table.id]
        assert [entry["id"] for entry in tasks["payment_orders"]] == [billed_order_elsewhere.id]

    def test_delivered_items_are_not_service_tasks(self, open_order):
        line = open_order.items.get()
        OrderItemService.update_item_status(line.id, OrderItem.ItemStatus.DELIVERED)

        assert KitchenService.get_service_tasks()["ready_items"] == []


@pytest.fixture
def billed_order_elsewhere(second_table, second_dish):
    order = OrderService.start_tab(
        table_id=second_table.id, items=[{"dish_id": second_dish.id, "quantity": 2}]
    )
    return OrderService.request_bill(order.id)
