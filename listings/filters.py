"""
Listings Filters - Leasehold Backend API
Django REST Framework filters for the property search.

Provides filtering for:
- Price and size ranges
- Minimum beds/baths ("any" disables the filter)
- Property type and city
- Required amenities (all must be present)
- Favorite lists (comma-separated property ids)
"""

import math

from django_filters import rest_framework as filters
from django_filters import CharFilter, NumberFilter

from .models import Property

ANY = 'any'


def split_csv(value):
    """Split a comma-separated query value, dropping blanks."""
    return [part.strip() for part in value.split(',') if part.strip()]


class PropertyFilter(filters.FilterSet):
    """
    Search filters for properties.

    Example:
        GET /api/v1/properties/?price_min=1000&beds=2&amenities=Pool,Gym
    """

    # =========================================================================
    # RANGE FILTERS
    # =========================================================================

    price_min = NumberFilter(
        field_name='price_per_month',
        lookup_expr='gte',
        help_text='Minimum monthly price'
    )

    price_max = NumberFilter(
        field_name='price_per_month',
        lookup_expr='lte',
        help_text='Maximum monthly price'
    )

    square_feet_min = NumberFilter(
        field_name='square_feet',
        lookup_expr='gte',
        help_text='Minimum square footage'
    )

    square_feet_max = NumberFilter(
        field_name='square_feet',
        lookup_expr='lte',
        help_text='Maximum square footage'
    )

    beds = CharFilter(
        method='filter_minimum',
        help_text='Minimum number of beds, or "any"'
    )

    baths = CharFilter(
        method='filter_minimum',
        help_text='Minimum number of baths, or "any"'
    )

    # =========================================================================
    # CATEGORY FILTERS
    # =========================================================================

    property_type = CharFilter(
        method='filter_property_type',
        help_text='Property type, or "any"'
    )

    city = CharFilter(
        field_name='location__city',
        lookup_expr='icontains',
        help_text='Filter by city name (partial match)'
    )

    amenities = CharFilter(
        method='filter_amenities',
        help_text='Required amenities (comma-separated, all must match)'
    )

    favorite_ids = CharFilter(
        method='filter_favorite_ids',
        help_text='Restrict to these property ids (comma-separated)'
    )

    class Meta:
        model = Property
        fields = {
            'is_pets_allowed': ['exact'],
            'is_parking_included': ['exact'],
            'landlord_cognito_id': ['exact'],
        }

    # =========================================================================
    # CUSTOM FILTER METHODS
    # =========================================================================

    def filter_minimum(self, queryset, name, value):
        """beds/baths: numeric minimum; "any", junk or non-finite values leave the queryset alone"""
        if not value or value.lower() == ANY:
            return queryset
        try:
            minimum = float(value)
        except ValueError:
            return queryset
        if not math.isfinite(minimum):
            return queryset
        return queryset.filter(**{f'{name}__gte': minimum})

    def filter_property_type(self, queryset, name, value):
        if not value or value.lower() == ANY:
            return queryset
        return queryset.filter(property_type=value)

    def filter_amenities(self, queryset, name, value):
        """
        Keep properties listing every requested amenity.

        Matched in Python: JSON containment lookups are not available on
        every database backend.
        """
        if not value or value.lower() == ANY:
            return queryset
        wanted = set(split_csv(value))
        if not wanted:
            return queryset
        matching = [
            pk for pk, amenities in queryset.values_list('pk', 'amenities')
            if wanted.issubset(amenities or [])
        ]
        return queryset.filter(pk__in=matching)

    def filter_favorite_ids(self, queryset, name, value):
        ids = [int(part) for part in split_csv(value) if part.isdigit()]
        if not ids:
            return queryset
        return queryset.filter(pk__in=ids)
