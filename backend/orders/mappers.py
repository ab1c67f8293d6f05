"""
Explicit conversions from order models to plain, JSON-safe dicts.

Every field is listed by hand. Decimals, UUIDs and datetimes are rendered as
strings so the result can be sent over the channel layer unchanged.
"""

from orders.models import Order, OrderItem


def _iso(value):
    return value.isoformat() if value else None


def _money(value):
    return str(value) if value is not None else None


def order_item_to_dict(item: OrderItem) -> dict:
    return {
        "id": item.id,
        "dish_id": item.dish_id,
        "dish_name": item.dish_name,
        "quantity": item.quantity,
        "unit_price": _money(item.unit_price),
        "line_total": _money(item.line_total),
        "item_status": item.item_status,
    }


def order_to_dict(order: Order) -> dict:
    table = order.table
    return {
        "id": order.id,
        "public_tracking_id": str(order.public_tracking_id),
        "table_id": order.table_id,
        "table_number": table.table_number if table else None,
        "status": order.status,
        "order_time": _iso(order.order_time),
        "notes": order.notes,
        "total_price": _money(order.total_price),
        "items": [order_item_to_dict(item) for item in order.items.all()],
    }


def order_to_customer_status(order: Order) -> dict:
    """Customer-facing view: no provider references, no table internals."""
    return {
        "internal_order_id": order.id,
        "public_tracking_id": str(order.public_tracking_id),
        "status": order.status,
        "order_time": _iso(order.order_time),
        "total_price": _money(order.total_price),
        "items": [
            {
                "dish_name": item.dish_name,
                "quantity": item.quantity,
                "unit_price": _money(item.unit_price),
                "line_total": _money(item.line_total),
                "item_status": item.item_status,
            }
            for item in order.items.all()
        ],
    }


def item_to_kitchen_dict(item: OrderItem) -> dict:
    order = item.order
    return {
        "order_item_id": item.id,
        "order_id": item.order_id,
        "dish_name": item.dish_name or "Unknown",
        "quantity": item.quantity,
        "item_status": item.item_status,
        "table_number": order.table.table_number if order and order.table_id else "N/A",
        "ordered_at": _iso(item.created_at),
    }


def table_to_dict(table) -> dict:
    return {
        "id": table.id,
        "table_number": table.table_number,
        "capacity": table.capacity,
        "status": table.status,
        "qr_code_identifier": table.qr_code_identifier,
        "assistance_requested": table.assistance_requested,
    }
