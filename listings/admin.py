"""
Listings Admin - Leasehold Backend
Django admin configuration for properties and locations.
"""

from django.contrib import admin

from services.geo import format_wkt_point

from .models import Location, Property


# =============================================================================
# MAIN ADMIN CLASSES
# =============================================================================

@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    """
    Admin interface for locations.

    The point column shows coordinates in the WKT form legacy exports use,
    which makes comparing against an export straightforward.
    """

    list_display = ['address', 'city', 'state', 'country', 'postal_code', 'point']
    list_filter = ['state', 'country']
    search_fields = ['address', 'city', 'postal_code']

    @admin.display(description='Point')
    def point(self, obj):
        if not obj.has_coordinates:
            return '-'
        return format_wkt_point(obj.longitude, obj.latitude)


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    """
    Admin interface for properties.

    Occupant lists are read-only here; the leasing workflow fills them in
    when an application is approved.
    """

    list_display = [
        'name',
        'property_type',
        'price_per_month',
        'security_deposit',
        'beds',
        'baths',
        'city',
        'landlord_cognito_id',
        'posted_date'
    ]

    list_filter = ['property_type', 'is_pets_allowed', 'is_parking_included']
    search_fields = ['name', 'description', 'landlord_cognito_id', 'location__city']
    raw_id_fields = ['location']
    readonly_fields = ['tenants', 'buyers', 'posted_date', 'updated_at']

    fieldsets = (
        ('Listing', {
            'fields': ('name', 'description', 'property_type', 'location', 'landlord_cognito_id')
        }),
        ('Pricing', {
            'fields': ('price_per_month', 'security_deposit', 'application_fee')
        }),
        ('Characteristics', {
            'fields': (
                'beds',
                'baths',
                'square_feet',
                'amenities',
                'highlights',
                'photo_urls',
                'is_pets_allowed',
                'is_parking_included'
            )
        }),
        ('Occupants', {
            'fields': ('tenants', 'buyers'),
            'classes': ('collapse',)
        }),
        ('Metadata', {
            'fields': ('average_rating', 'number_of_reviews', 'posted_date', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('location')

    @admin.display(description='City', ordering='location__city')
    def city(self, obj):
        return obj.location.city if obj.location else '-'
