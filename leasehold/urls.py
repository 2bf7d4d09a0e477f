"""
URL configuration for leasehold project.

All API routes live under /api/v1/. App routers are included from
listings.urls, leasing.urls and accounts.urls; the health check, API
index and JWT endpoints are defined here.
"""

import sys

from django.contrib import admin
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import include, path
from django.utils import timezone
from django.views.decorators.cache import cache_control
from django.views.decorators.http import require_http_methods
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# HEALTH CHECK ENDPOINT
# =============================================================================

@require_http_methods(["GET"])
@cache_control(no_cache=True, must_revalidate=True, no_store=True)
def health_check(request):
    """
    Health check endpoint for deployment monitoring.

    Returns:
        JSON response with system status and database connectivity
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        logger.error(f"Health check failed: {e}")
        return JsonResponse({
            "status": "unhealthy",
            "database": "error",
        }, status=503)

    return JsonResponse({
        "status": "healthy",
        "database": "connected",
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}",
        "timestamp": timezone.now().isoformat(),
    }, status=200)


# =============================================================================
# API INFO ENDPOINT
# =============================================================================

@require_http_methods(["GET"])
def api_info(request):
    """
    API information endpoint for frontend integration.

    Returns:
        JSON response with API version and available endpoints
    """
    return JsonResponse({
        "api_name": "Leasehold API",
        "version": "1.0",
        "description": "Rental and sales marketplace: listings, applications and leases",
        "endpoints": {
            "authentication": {
                "token_obtain": "/api/v1/auth/token/",
                "token_refresh": "/api/v1/auth/token/refresh/",
                "token_verify": "/api/v1/auth/token/verify/",
            },
            "properties": {
                "list": "/api/v1/properties/",
                "create": "/api/v1/properties/",
                "detail": "/api/v1/properties/{id}/",
                "leases": "/api/v1/properties/{id}/leases/",
            },
            "profiles": {
                "create": "/api/v1/{tenants|buyers|landlords}/",
                "detail": "/api/v1/{tenants|buyers|landlords}/{cognito_id}/",
                "favorites": "/api/v1/{tenants|buyers}/{cognito_id}/favorites/{property_id}/",
                "current_residences": "/api/v1/{tenants|buyers}/{cognito_id}/current-residences/",
                "landlord_properties": "/api/v1/landlords/{cognito_id}/properties/",
            },
            "applications": {
                "list_create": "/api/v1/applications/",
                "detail": "/api/v1/applications/{id}/",
                "status": "/api/v1/applications/{id}/status/",
            },
            "leases": {
                "list": "/api/v1/leases/",
                "detail": "/api/v1/leases/{id}/",
                "payments": "/api/v1/leases/{id}/payments/",
            },
            "utilities": {
                "health": "/api/v1/health/",
            },
        },
    })


# =============================================================================
# MAIN URL PATTERNS
# =============================================================================

urlpatterns = [
    # Django Admin Interface
    path('admin/', admin.site.urls),

    # Health and System Status
    path('api/v1/health/', health_check, name='health-check'),
    path('api/v1/info/', api_info, name='api-info'),

    # Authentication Endpoints (JWT)
    path('api/v1/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/v1/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/v1/auth/token/verify/', TokenVerifyView.as_view(), name='token_verify'),

    # Core Application Endpoints
    path('api/v1/properties/', include('listings.urls')),
    path('api/v1/', include('leasing.urls')),
    path('api/v1/', include('accounts.urls')),

    path('api/v1/', api_info, name='api-root'),
]


# =============================================================================
# CUSTOM ERROR HANDLERS
# =============================================================================

def custom_404_handler(request, exception):
    """Custom 404 handler for API endpoints"""
    if request.path.startswith('/api/'):
        return JsonResponse({
            'error': 'not_found',
            'message': f'The requested endpoint {request.path} does not exist',
            'available_endpoints': '/api/v1/info/'
        }, status=404)

    from django.views.defaults import page_not_found
    return page_not_found(request, exception)


def custom_500_handler(request):
    """Custom 500 handler for API endpoints"""
    if request.path.startswith('/api/'):
        return JsonResponse({
            'error': 'server_error',
            'message': 'An unexpected error occurred',
        }, status=500)

    from django.views.defaults import server_error
    return server_error(request)


handler404 = custom_404_handler
handler500 = custom_500_handler
