import uuid
from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from menu.models import Dish
from tables.models import RestaurantTable
from .managers import OrderQuerySet, OrderItemQuerySet


class Order(models.Model):
    """
    A running tab for one table.

    ``total_price`` is derived from the items and is only written by
    ``OrderCalculationService``. Provider fields are only written by the
    payment reconciler.
    """

    class OrderStatus(models.TextChoices):
        OPEN = "OPEN", _("Open")  # Tab is running, items can be added
        AWAITING_PAYMENT = "AWAITING_PAYMENT", _("Awaiting Payment")  # Bill requested
        COMPLETED = "COMPLETED", _("Completed")  # Paid and closed
        CANCELLED = "CANCELLED", _("Cancelled")

    TERMINAL_STATUSES = (OrderStatus.COMPLETED, OrderStatus.CANCELLED)

    table = models.ForeignKey(
        RestaurantTable,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    public_tracking_id = models.UUIDField(
        default=uuid.uuid4,
        unique=True,
        editable=False,
        help_text=_("Opaque token customers use to follow their order."),
    )
    status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.OPEN
    )
    order_time = models.DateTimeField(default=timezone.now, editable=False)
    notes = models.TextField(blank=True, default="", max_length=500)
    total_price = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )

    # --- Payment provider references ---
    provider_order_id = models.CharField(
        max_length=100, unique=True, null=True, blank=True
    )
    provider_payment_id = models.CharField(max_length=100, null=True, blank=True)

    completed_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OrderQuerySet.as_manager()

    class Meta:
        ordering = ["-order_time"]
        constraints = [
            models.UniqueConstraint(
                fields=["table"],
                condition=Q(status="OPEN"),
                name="unique_open_order_per_table",
            ),
        ]
        indexes = [
            models.Index(fields=["table", "status"], name="orders_orde_table_i_5b1c2e_idx"),
            models.Index(fields=["status", "order_time"], name="orders_orde_status_8d0f4a_idx"),
        ]

    def __str__(self):
        return f"Order {self.id} ({self.get_status_display()}) - {self.table}"

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES


class OrderItem(models.Model):
    class ItemStatus(models.TextChoices):
        NEEDS_PREPARATION = "NEEDS_PREPARATION", _("Needs Preparation")
        IN_PROGRESS = "IN_PROGRESS", _("In Progress")
        READY = "READY", _("Ready")
        DELIVERED = "DELIVERED", _("Delivered")

    # Kitchen flow, forward only.
    STATUS_SEQUENCE = (
        ItemStatus.NEEDS_PREPARATION,
        ItemStatus.IN_PROGRESS,
        ItemStatus.READY,
        ItemStatus.DELIVERED,
    )

    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    dish = models.ForeignKey(Dish, related_name="order_items", on_delete=models.PROTECT)
    dish_name = models.CharField(
        max_length=150, help_text=_("Dish name when the line was created.")
    )
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Dish price when the line was created."),
    )
    item_status = models.CharField(
        max_length=20,
        choices=ItemStatus.choices,
        default=ItemStatus.NEEDS_PREPARATION,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OrderItemQuerySet.as_manager()

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "dish"], name="unique_dish_per_order"
            ),
        ]
        indexes = [
            models.Index(fields=["item_status", "created_at"], name="orders_orde_item_st_3e7a91_idx"),
        ]

    def __str__(self):
        return f"{self.quantity}x {self.dish_name} (Order {self.order_id})"

    @property
    def line_total(self) -> Decimal:
        if self.unit_price is None or not self.quantity or self.quantity <= 0:
            return Decimal("0.00")
        return self.unit_price * self.quantity

    @classmethod
    def status_rank(cls, status) -> int:
        return cls.STATUS_SEQUENCE.index(status)
