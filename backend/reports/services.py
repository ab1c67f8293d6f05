from decimal import Decimal
import logging

from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from menu.services import CatalogService
from orders.models import Order
from tables.services import TableService

logger = logging.getLogger(__name__)


class DashboardService:
    """Headline figures for the staff dashboard."""

    @staticmethod
    def get_dashboard_stats() -> dict:
        """
        Today's revenue and order count, plus catalog sizes.

        "Today" is the local business date (settings.TIME_ZONE). Revenue only
        counts tabs placed today that have been COMPLETED.
        """
        today = timezone.localdate()
        todays_orders = Order.objects.placed_on(today)

        revenue = todays_orders.filter(status=Order.OrderStatus.COMPLETED).aggregate(
            total=Coalesce(
                Sum("total_price"),
                Value(Decimal("0.00")),
                output_field=DecimalField(max_digits=10, decimal_places=2),
            )
        )["total"]

        stats = {
            "todays_revenue": revenue,
            "todays_orders_count": todays_orders.count(),
            "total_dishes_count": CatalogService.count_dishes(),
            "total_tables_count": TableService.count_tables(),
        }
        logger.debug(f"Dashboard stats for {today}: {stats}")
        return stats
