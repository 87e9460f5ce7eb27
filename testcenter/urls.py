"""
URL configuration for the test-appointment backend project.

The `urlpatterns` list routes URLs to views. This module includes the
Django admin, the API routes provided by the screening app and the
Prometheus metrics endpoint. OpenAPI documentation is exposed at
``/swagger/`` and ``/redoc/``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="Test Appointment API",
    default_version='v1',
    description="Patient registration and test appointment booking.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    # Django admin site (used by the test-result back office)
    path('admin/', admin.site.urls),
    # Include API routes from the screening app
    path('', include('screening.routers')),
    # Prometheus scrape endpoint (/metrics)
    path('', include('django_prometheus.urls')),
    # Swagger and ReDoc
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
