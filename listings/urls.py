"""
URL configuration for listings app.

Included by the main project URLs at /api/v1/properties/:

- /                  - Property search (GET), create (POST)
- /{id}/             - Property detail (GET)
- /{id}/leases/      - Leases for a property (GET)
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import PropertyViewSet


# =============================================================================
# ROUTER CONFIGURATION
# =============================================================================

router = SimpleRouter()

# Registered at root '' since this URL config is included at /api/v1/properties/
router.register(r'', PropertyViewSet, basename='property')


urlpatterns = [
    path('', include(router.urls)),
]
