"""
Orders services package - the tab lifecycle engine.

- OrderService: tab lifecycle (start, bill, status override, lookups)
- OrderItemService: line aggregation and kitchen status
- OrderCalculationService: derived order totals
- KitchenService: kitchen queue and floor-staff task lists
- OrderNotificationPublisher: customer-facing order updates
"""

# Core order operations
from .order_service import OrderService

# Item management
from .item_service import OrderItemService

# Calculation operations
from .calculation_service import OrderCalculationService

# Kitchen operations
from .kitchen_service import KitchenService

# Notification operations
from .notification_service import OrderNotificationPublisher, order_notification_publisher

__all__ = [
    'OrderService',
    'OrderItemService',
    'OrderCalculationService',
    'KitchenService',
    'OrderNotificationPublisher',
    'order_notification_publisher',
]
