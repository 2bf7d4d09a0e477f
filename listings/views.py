"""
Views for the listings app.

Endpoints for properties: search with filters, detail with location,
listing creation, and the leases recorded against a property.
"""

import logging

from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from leasing.models import Lease
from leasing.serializers import LeaseSerializer

from .filters import PropertyFilter
from .models import Property
from .serializers import PropertyCreateSerializer, PropertyListSerializer, PropertySerializer

logger = logging.getLogger(__name__)


# =============================================================================
# PROPERTY VIEWSET
# =============================================================================

class PropertyViewSet(mixins.CreateModelMixin, viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for properties.

    Supports:
    - List/search properties (see PropertyFilter for query parameters)
    - Retrieve a property with its location and coordinates
    - Create a property together with its location
    - Leases recorded against a property
    """
    queryset = Property.objects.select_related('location')
    serializer_class = PropertyListSerializer
    lookup_value_regex = r'\d+'
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = PropertyFilter

    search_fields = ['name', 'description', 'location__city', 'location__address']

    ordering_fields = [
        'price_per_month',
        'beds',
        'square_feet',
        'average_rating',
        'posted_date'
    ]
    ordering = ['id']

    def get_serializer_class(self):
        """Full serializer for detail, compact rows for search results."""
        if self.action == 'create':
            return PropertyCreateSerializer
        if self.action == 'retrieve':
            return PropertySerializer
        return PropertyListSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        listing = serializer.save()
        logger.info(
            f"Property {listing.pk} created for landlord {listing.landlord_cognito_id}"
        )
        return Response(PropertySerializer(listing).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def leases(self, request, pk=None):
        """
        Leases for a property, each with its next payment date.

        GET /api/v1/properties/{id}/leases/
        """
        listing = self.get_object()
        leases = Lease.objects.filter(property_id=listing.pk).order_by('start_date', 'id')
        return Response(LeaseSerializer(leases, many=True).data)
