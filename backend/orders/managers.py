"""
Query helpers for the order aggregate.

These querysets are the order repository: the services never build status
or tracking-id filters by hand.
"""

import uuid

from django.db import models


class OrderQuerySet(models.QuerySet):
    def with_items(self):
        return self.select_related("table").prefetch_related("items")

    def open_for_table(self, table_id):
        """The running tab for a table, if any."""
        return self.filter(table_id=table_id, status="OPEN").first()

    def by_tracking_id(self, token):
        """
        Look up an order by its public tracking id.

        Malformed tokens are treated as unknown rather than raising.
        """
        try:
            tracking_id = uuid.UUID(str(token))
        except (ValueError, TypeError, AttributeError):
            return None
        return self.filter(public_tracking_id=tracking_id).first()

    def awaiting_payment(self):
        return self.filter(status="AWAITING_PAYMENT")

    def placed_on(self, day):
        """Orders placed on a local calendar date."""
        return self.filter(order_time__date=day)

    def filter_for_listing(self, table_id=None, status=None):
        queryset = self
        if table_id is not None:
            queryset = queryset.filter(table_id=table_id)
        if status is not None:
            queryset = queryset.filter(status=status)
        return queryset.order_by("-order_time", "-id")


class OrderItemQuerySet(models.QuerySet):
    def with_order(self):
        return self.select_related("order", "order__table")

    def in_statuses(self, statuses):
        return self.filter(item_status__in=statuses)

    def exclude_cancelled(self):
        """Cancelled tabs never reach the kitchen or the floor staff."""
        return self.exclude(order__status="CANCELLED")
