"""
URL configuration for accounts app.

Included by the main project URLs at /api/v1/:

Profile Endpoints (tenants, buyers, landlords):
- {kind}/                                  - Create (POST)
- {kind}/{cognito_id}/                     - Retrieve (GET), update (PUT, PATCH)

Applicant Endpoints (tenants, buyers):
- {kind}/{cognito_id}/favorites/{id}/      - Add (POST), remove (DELETE)
- {kind}/{cognito_id}/current-residences/  - Active-lease listings (GET)

Landlord Endpoints:
- landlords/{cognito_id}/properties/       - Owned listings (GET)
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import BuyerViewSet, LandlordViewSet, TenantViewSet


# =============================================================================
# ROUTER CONFIGURATION
# =============================================================================

router = SimpleRouter()
router.register(r'tenants', TenantViewSet, basename='tenant')
router.register(r'buyers', BuyerViewSet, basename='buyer')
router.register(r'landlords', LandlordViewSet, basename='landlord')


urlpatterns = [
    path('', include(router.urls)),
]
