"""
URL configuration for leasing app.

Included by the main project URLs at /api/v1/:

Application Endpoints:
- applications/                  - List (GET), submit (POST)
- applications/{id}/             - Retrieve (GET)
- applications/{id}/status/      - Status workflow (PUT, PATCH)

Lease Endpoints:
- leases/                        - List (GET)
- leases/{id}/                   - Retrieve (GET)
- leases/{id}/payments/          - Payments for a lease (GET)
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import ApplicationViewSet, LeaseViewSet


# =============================================================================
# ROUTER CONFIGURATION
# =============================================================================

# SimpleRouter: the API root at /api/v1/ is served by leasehold.urls.api_info
router = SimpleRouter()
router.register(r'applications', ApplicationViewSet, basename='application')
router.register(r'leases', LeaseViewSet, basename='lease')


urlpatterns = [
    path('', include(router.urls)),
]
