"""
Request validation for the order engine.

These serializers only validate and normalise caller input; responses are
built by the explicit mappers in ``orders.mappers``.
"""

from rest_framework import serializers

from core_backend.exceptions import ValidationError


class OrderItemRequestSerializer(serializers.Serializer):
    dish_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, max_value=999)


class StartTabRequestSerializer(serializers.Serializer):
    table_id = serializers.IntegerField(min_value=1)
    items = OrderItemRequestSerializer(many=True, allow_empty=False)
    notes = serializers.CharField(
        max_length=500, allow_blank=True, required=False, default=""
    )


def _raise_for_errors(serializer, message):
    if not serializer.is_valid():
        raise ValidationError(message, details=serializer.errors)
    return serializer.validated_data


def validate_item_requests(items) -> list:
    """
    Validate a list of ``{"dish_id", "quantity"}`` requests.

    Returns a list of dicts with integer ``dish_id`` and ``quantity``.
    """
    if not items:
        raise ValidationError("Item list cannot be empty.")
    serializer = OrderItemRequestSerializer(data=items, many=True)
    validated = _raise_for_errors(serializer, "Invalid item data.")
    return [dict(item) for item in validated]


def validate_start_tab_request(table_id, items, notes) -> dict:
    if not items:
        raise ValidationError("Item list cannot be empty.")
    serializer = StartTabRequestSerializer(
        data={"table_id": table_id, "items": items, "notes": notes or ""}
    )
    validated = _raise_for_errors(serializer, "Invalid tab request.")
    return {
        "table_id": validated["table_id"],
        "items": [dict(item) for item in validated["items"]],
        "notes": validated["notes"],
    }
