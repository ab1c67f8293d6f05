from django.db import models
from django.utils.translation import gettext_lazy as _


class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)

    class Meta:
        verbose_name_plural = _("Categories")
        ordering = ["name"]

    def __str__(self):
        return self.name


class Dish(models.Model):
    name = models.CharField(max_length=150, help_text=_("Name of the dish."))
    description = models.TextField(
        blank=True, help_text=_("Detailed description of the dish.")
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Current menu price. Order lines keep the price they were added at."),
    )
    image_url = models.URLField(max_length=1024, blank=True)
    available = models.BooleanField(
        default=True,
        help_text=_("Unavailable dishes cannot be added to a tab."),
    )
    category = models.ForeignKey(
        Category,
        related_name="dishes",
        on_delete=models.PROTECT,
    )

    class Meta:
        verbose_name_plural = _("Dishes")
        ordering = ["category__name", "name"]

    def __str__(self):
        return self.name
