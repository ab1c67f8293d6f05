from django.contrib import admin
from .models import RestaurantTable


@admin.register(RestaurantTable)
class RestaurantTableAdmin(admin.ModelAdmin):
    list_display = ("table_number", "capacity", "status", "assistance_requested")
    list_filter = ("status", "assistance_requested")
    readonly_fields = ("qr_code_identifier",)
    search_fields = ("table_number", "qr_code_identifier")
