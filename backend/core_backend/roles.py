from django.db import models
from django.utils.translation import gettext_lazy as _


class CallerRole(models.TextChoices):
    """
    Pre-validated role of whoever triggered an engine call.

    Resolved by the caller (authentication lives outside the engine) and
    passed explicitly so logs show whether a change was customer-, staff- or
    system-initiated.
    """

    CUSTOMER = "CUSTOMER", _("Customer")
    STAFF = "STAFF", _("Staff")
    SYSTEM = "SYSTEM", _("System")
