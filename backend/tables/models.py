import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


def generate_qr_identifier():
    return uuid.uuid4().hex


class RestaurantTable(models.Model):
    class TableStatus(models.TextChoices):
        AVAILABLE = "AVAILABLE", _("Available")
        OCCUPIED = "OCCUPIED", _("Occupied")
        RESERVED = "RESERVED", _("Reserved")

    table_number = models.CharField(
        max_length=20,
        unique=True,
        help_text=_("Label printed on the table, e.g. T1 or BarSeat-3."),
    )
    capacity = models.PositiveIntegerField(default=4)
    status = models.CharField(
        max_length=20, choices=TableStatus.choices, default=TableStatus.AVAILABLE
    )
    qr_code_identifier = models.CharField(
        max_length=64,
        unique=True,
        default=generate_qr_identifier,
        help_text=_("Opaque token encoded in the table's QR code."),
    )
    assistance_requested = models.BooleanField(
        default=False,
        help_text=_("Set when guests call for a waiter, cleared by staff."),
    )

    class Meta:
        ordering = ["table_number"]

    def __str__(self):
        return f"Table {self.table_number}"
