from django.contrib import admin
from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("dish_name", "quantity", "unit_price", "get_line_item_total", "item_status")
    fields = ("dish_name", "quantity", "unit_price", "get_line_item_total", "item_status")
    can_delete = False

    def get_line_item_total(self, obj):
        return f"{obj.line_total:,.2f}"

    get_line_item_total.short_description = "Line Item Total"

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin configuration for the Order model.

    Totals, statuses and provider references are written by the services,
    so they are read-only here.
    """

    list_display = ("id", "table", "status", "total_price", "order_time", "completed_at")
    list_filter = ("status", "order_time")
    search_fields = ("id", "public_tracking_id", "provider_order_id", "provider_payment_id")
    readonly_fields = (
        "public_tracking_id",
        "table",
        "status",
        "order_time",
        "total_price",
        "provider_order_id",
        "provider_payment_id",
        "completed_at",
        "updated_at",
    )
    inlines = [OrderItemInline]
    date_hierarchy = "order_time"

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("table")
