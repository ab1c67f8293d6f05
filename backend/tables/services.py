from django.db import transaction
import logging

from core_backend.exceptions import NotFoundError
from .models import RestaurantTable

logger = logging.getLogger(__name__)


class TableService:
    """Table lookups and the guest assistance flag."""

    @staticmethod
    def get_table(table_id) -> RestaurantTable:
        try:
            return RestaurantTable.objects.get(id=table_id)
        except (RestaurantTable.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Table not found with ID: {table_id}")

    @staticmethod
    def get_table_by_qr(qr_code_identifier: str) -> RestaurantTable:
        try:
            return RestaurantTable.objects.get(qr_code_identifier=qr_code_identifier)
        except RestaurantTable.DoesNotExist:
            raise NotFoundError("No table is registered for this QR code.")

    @staticmethod
    @transaction.atomic
    def set_assistance_requested(table_id, requested: bool) -> RestaurantTable:
        """Raise or clear the table's call-for-assistance flag."""
        updated = RestaurantTable.objects.filter(id=table_id).update(
            assistance_requested=requested
        )
        if not updated:
            raise NotFoundError(f"Table not found with ID: {table_id}")
        logger.info(f"Assistance {'requested' if requested else 'cleared'} for table {table_id}")
        return RestaurantTable.objects.get(id=table_id)

    @staticmethod
    def tables_requesting_assistance():
        return RestaurantTable.objects.filter(assistance_requested=True)

    @staticmethod
    def count_tables() -> int:
        return RestaurantTable.objects.count()
