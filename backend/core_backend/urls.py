"""
URL configuration for core_backend project.

Only the admin site and a health check are routed here; the customer and
staff APIs are served by a separate HTTP layer that calls the order and
payment services directly.
"""

from django.contrib import admin
from django.urls import path
from django.http import JsonResponse


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
]
