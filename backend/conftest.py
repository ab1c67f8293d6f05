"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import hashlib
import hmac
import json
import time
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from payments.gateways import StripeGateway


TEST_WEBHOOK_SECRET = "whsec_test_secret"


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def payment_settings(settings):
    """
    Deterministic payment configuration for every test.

    Tests never talk to a real provider; the gateway is replaced by
    ``fake_gateway`` wherever an intent is created.
    """
    settings.PAYMENT_GATEWAY = "stripe"
    settings.PAYMENT_CURRENCY = "INR"
    settings.STRIPE_WEBHOOK_SECRET = TEST_WEBHOOK_SECRET
    settings.PAYMENT_PROVIDER_TIMEOUT = 5
    settings.STRIPE_SECRET_KEY = "sk_test_dummy"
    settings.STRIPE_PUBLISHABLE_KEY = "pk_test_dummy"
    return settings


@pytest.fixture(autouse=True)
def channel_layer():
    """
    Replace the channel layer with a mock so published order updates can be
    inspected. ``group_send`` is awaited through async_to_sync.
    """
    layer = MagicMock()
    layer.group_send = AsyncMock()
    with patch("channels.layers.get_channel_layer", return_value=layer):
        yield layer


# ============================================================================
# CATALOG FIXTURES
# ============================================================================

@pytest.fixture
def category(db):
    from menu.models import Category

    return Category.objects.create(name="Mains", description="Main course")


@pytest.fixture
def dish(category):
    """Butter Chicken at 150.00."""
    from menu.models import Dish

    return Dish.objects.create(
        name="Butter Chicken", price=Decimal("150.00"), category=category
    )


@pytest.fixture
def second_dish(category):
    """Garlic Naan at 40.00."""
    from menu.models import Dish

    return Dish.objects.create(
        name="Garlic Naan", price=Decimal("40.00"), category=category
    )


@pytest.fixture
def unavailable_dish(category):
    from menu.models import Dish

    return Dish.objects.create(
        name="Seasonal Special",
        price=Decimal("300.00"),
        category=category,
        available=False,
    )


@pytest.fixture
def table(db):
    from tables.models import RestaurantTable

    return RestaurantTable.objects.create(table_number="T1", capacity=4)


@pytest.fixture
def second_table(db):
    from tables.models import RestaurantTable

    return RestaurantTable.objects.create(table_number="T2", capacity=2)


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def open_order(table, dish):
    """An OPEN tab on table T1 with 2x Butter Chicken (300.00)."""
    from orders.services import OrderService

    return OrderService.start_tab(
        table_id=table.id, items=[{"dish_id": dish.id, "quantity": 2}]
    )


@pytest.fixture
def billed_order(table, dish):
    """A tab on T1 awaiting payment with 3x Butter Chicken (450.00)."""
    from orders.services import OrderService

    order = OrderService.start_tab(
        table_id=table.id, items=[{"dish_id": dish.id, "quantity": 3}]
    )
    return OrderService.request_bill(order.id)


# ============================================================================
# PAYMENT FIXTURES
# ============================================================================

class FakeGateway(StripeGateway):
    """
    Stripe gateway that hands out sequential intent ids instead of calling
    the API. Webhook verification is the real one.
    """

    def __init__(self):
        super().__init__()
        self.calls = []
        self.error = None

    def create_order(self, amount_minor, currency, receipt):
        if self.error is not None:
            raise self.error
        self.calls.append(
            {"amount_minor": amount_minor, "currency": currency, "receipt": receipt}
        )
        return f"pi_test_{len(self.calls)}"


@pytest.fixture
def fake_gateway():
    gateway = FakeGateway()
    with patch(
        "payments.gateways.PaymentGatewayFactory.get_gateway", return_value=gateway
    ):
        yield gateway


@pytest.fixture
def signed_webhook():
    """
    Returns a function building a Stripe webhook as the endpoint receives it:
    the raw JSON body and its Stripe-Signature header.
    """

    def _build(
        provider_order_id,
        provider_payment_id,
        event_type="payment_intent.succeeded",
        secret=TEST_WEBHOOK_SECRET,
        timestamp=None,
    ):
        payload = json.dumps(
            {
                "id": "evt_test",
                "object": "event",
                "type": event_type,
                "data": {
                    "object": {
                        "id": provider_order_id,
                        "object": "payment_intent",
                        "status": "succeeded",
                        "latest_charge": provider_payment_id,
                    }
                },
            }
        )
        timestamp = int(time.time()) if timestamp is None else timestamp
        signed = f"{timestamp}.{payload}"
        digest = hmac.new(
            secret.encode("utf-8"), signed.encode("utf-8"), hashlib.sha256
        ).hexdigest()
        return payload, f"t={timestamp},v1={digest}"

    return _build
