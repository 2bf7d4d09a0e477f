"""
Views for the accounts app.

Profile endpoints for tenants, buyers and landlords, keyed by the external
identity id (cognito_id), plus the favorites and current-residence lists
of applicants and the listings of a landlord.
"""

import logging

from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404
from rest_framework.response import Response

from leasing.models import Lease
from listings.models import Property
from listings.serializers import PropertySerializer

from .models import Buyer, Landlord, Tenant
from .serializers import (
    BuyerDetailSerializer,
    BuyerWriteSerializer,
    LandlordDetailSerializer,
    LandlordWriteSerializer,
    TenantDetailSerializer,
    TenantWriteSerializer,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ['name', 'email', 'phone_number']


# =============================================================================
# PROFILE BASE VIEWSET
# =============================================================================

class ProfileViewSet(mixins.CreateModelMixin,
                     mixins.RetrieveModelMixin,
                     mixins.UpdateModelMixin,
                     viewsets.GenericViewSet):
    """
    Create, retrieve and update an identity record by cognito_id.

    PUT and PATCH both apply only the fields sent.
    """
    lookup_field = 'cognito_id'
    lookup_value_regex = r'[^/]+'
    filter_backends = []

    detail_serializer_class = None
    write_serializer_class = None

    def get_serializer_class(self):
        if self.action in ('create', 'update', 'partial_update'):
            return self.write_serializer_class
        return self.detail_serializer_class

    def render_profile(self, profile, status_code=status.HTTP_200_OK):
        refreshed = self.get_queryset().get(pk=profile.pk)
        return Response(self.detail_serializer_class(refreshed).data, status=status_code)

    def create(self, request, *args, **kwargs):
        model = self.get_queryset().model
        cognito_id = request.data.get('cognito_id')
        if cognito_id and self.get_queryset().filter(cognito_id=cognito_id).exists():
            return Response(
                {
                    'error': 'conflict',
                    'message': f"{model._meta.verbose_name} with this Cognito ID already exists."
                },
                status=status.HTTP_409_CONFLICT
            )

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        profile = serializer.save()
        logger.info(f"{model._meta.verbose_name} {profile.cognito_id} created")
        return self.render_profile(profile, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        if not any(field in request.data for field in UPDATABLE_FIELDS):
            return Response(
                {
                    'error': 'invalid_update',
                    'message': f"No valid fields provided for update ({', '.join(UPDATABLE_FIELDS)})."
                },
                status=status.HTTP_400_BAD_REQUEST
            )

        profile = self.get_object()
        serializer = self.get_serializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return self.render_profile(profile)


# =============================================================================
# APPLICANT VIEWSETS
# =============================================================================

class ApplicantViewSet(ProfileViewSet):
    """Profile endpoints shared by tenants and buyers."""

    @action(detail=True, methods=['post', 'delete'], url_path=r'favorites/(?P<property_id>\d+)')
    def favorite(self, request, cognito_id=None, property_id=None):
        """
        Add (POST) or remove (DELETE) a favorite listing.

        POST|DELETE /api/v1/{tenants|buyers}/{cognito_id}/favorites/{property_id}/

        Both are idempotent; the response is the updated profile.
        """
        applicant = self.get_object()
        listing = get_object_or_404(Property.objects.all(), pk=property_id)

        if request.method == 'POST':
            applicant.favorites.add(listing)
        else:
            applicant.favorites.remove(listing)
        return self.render_profile(applicant)

    @action(detail=True, methods=['get'], url_path='current-residences')
    def current_residences(self, request, cognito_id=None):
        """
        Listings the applicant holds an active lease on today.

        GET /api/v1/{tenants|buyers}/{cognito_id}/current-residences/
        """
        applicant = self.get_object()
        today = timezone.localdate()
        active = Lease.objects.filter(
            applicant_kind=applicant.kind,
            applicant_cognito_id=applicant.cognito_id,
            start_date__lte=today,
            end_date__gt=today,
        ).values('property_id')
        listings = Property.objects.filter(pk__in=active).select_related('location')
        return Response(PropertySerializer(listings, many=True).data)


class TenantViewSet(ApplicantViewSet):
    queryset = Tenant.objects.prefetch_related('favorites__location', 'residences')
    detail_serializer_class = TenantDetailSerializer
    write_serializer_class = TenantWriteSerializer


class BuyerViewSet(ApplicantViewSet):
    queryset = Buyer.objects.prefetch_related('favorites__location', 'residences')
    detail_serializer_class = BuyerDetailSerializer
    write_serializer_class = BuyerWriteSerializer


# =============================================================================
# LANDLORD VIEWSET
# =============================================================================

class LandlordViewSet(ProfileViewSet):
    queryset = Landlord.objects.all()
    detail_serializer_class = LandlordDetailSerializer
    write_serializer_class = LandlordWriteSerializer

    @action(detail=True, methods=['get'])
    def properties(self, request, cognito_id=None):
        """
        Listings owned by the landlord.

        GET /api/v1/landlords/{cognito_id}/properties/
        """
        landlord = self.get_object()
        listings = Property.objects.filter(
            landlord_cognito_id=landlord.cognito_id
        ).select_related('location')
        return Response(PropertySerializer(listings, many=True).data)
