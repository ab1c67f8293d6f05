from django.apps import AppConfig
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


class CoreBackendConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core_backend"

    def ready(self):
        """
        Warn about missing payment configuration at startup instead of on the
        first customer checkout.
        """
        if settings.PAYMENT_GATEWAY != "stripe":
            return
        if not getattr(settings, "STRIPE_WEBHOOK_SECRET", ""):
            logger.warning(
                "STRIPE_WEBHOOK_SECRET is not set. Online payment verification will fail."
            )
        if not getattr(settings, "STRIPE_SECRET_KEY", ""):
            logger.warning(
                "STRIPE_SECRET_KEY is not set. Payment intents cannot be created."
            )
