"""
Listings models for Leasehold.

This module implements the listing entities:
- Location: Street address plus a structured longitude/latitude pair
- Property: A rentable listing with pricing, deposit and occupant lists

Design Philosophy: Listings are read-only from the leasing workflow's point
of view, except for the additive occupant lists.
"""

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
import logging

from accounts.models import ApplicantKind

logger = logging.getLogger(__name__)


# =============================================================================
# CHOICES
# =============================================================================

class PropertyType(models.TextChoices):
    ROOMS = 'Rooms', 'Rooms'
    TINYHOUSE = 'Tinyhouse', 'Tiny House'
    APARTMENT = 'Apartment', 'Apartment'
    VILLA = 'Villa', 'Villa'
    TOWNHOUSE = 'Townhouse', 'Townhouse'
    COTTAGE = 'Cottage', 'Cottage'


AMENITY_CHOICES = [
    'WasherDryer',
    'AirConditioning',
    'Dishwasher',
    'HighSpeedInternet',
    'HardwoodFloors',
    'WalkInClosets',
    'Microwave',
    'Refrigerator',
    'Pool',
    'Gym',
    'Parking',
    'PetsAllowed',
    'WiFi',
]

HIGHLIGHT_CHOICES = [
    'HighSpeedInternetAccess',
    'WasherDryer',
    'AirConditioning',
    'Heating',
    'SmokeFree',
    'CableReady',
    'SatelliteTV',
    'DoubleVanities',
    'TubShower',
    'Intercom',
    'SprinklerSystem',
    'RecentlyRenovated',
    'CloseToTransit',
    'GreatView',
    'QuietNeighborhood',
]

# Occupant list on Property for each applicant kind.
OCCUPANT_FIELDS = {
    ApplicantKind.TENANT: 'tenants',
    ApplicantKind.BUYER: 'buyers',
}


# =============================================================================
# LOCATION MODEL
# =============================================================================

class Location(models.Model):
    """
    Postal address of a listing.

    Coordinates are stored as two decimal columns; the legacy
    "POINT(lon lat)" text form only exists at the import boundary
    (see services.geo).
    """

    address = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    country = models.CharField(max_length=100)
    postal_code = models.CharField(max_length=20)

    longitude = models.DecimalField(
        max_digits=10,
        decimal_places=7,
        blank=True,
        null=True,
        validators=[MinValueValidator(-180), MaxValueValidator(180)],
        help_text="Decimal degrees"
    )
    latitude = models.DecimalField(
        max_digits=10,
        decimal_places=7,
        blank=True,
        null=True,
        validators=[MinValueValidator(-90), MaxValueValidator(90)],
        help_text="Decimal degrees"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'locations'
        ordering = ['id']
        indexes = [
            models.Index(fields=['city', 'state']),
        ]

    def __str__(self):
        return self.get_full_address()

    def get_full_address(self):
        """
        Returns formatted full address.

        Returns:
            str: Comma-separated full address or empty string if no components
        """
        parts = [self.address, self.city, self.state, self.postal_code, self.country]
        return ", ".join(filter(None, parts))

    @property
    def has_coordinates(self):
        """Check if the location has been geocoded."""
        return self.latitude is not None and self.longitude is not None

    def get_coordinates(self):
        """
        Structured coordinate pair for API responses.

        Returns:
            dict: {"longitude": float, "latitude": float} or None
        """
        if not self.has_coordinates:
            return None
        return {
            'longitude': float(self.longitude),
            'latitude': float(self.latitude),
        }


# =============================================================================
# PROPERTY MODEL
# =============================================================================

class Property(models.Model):
    """
    A rentable listing.

    ``price_per_month`` and ``security_deposit`` seed the rent and deposit of
    leases created when an application for this property is approved.
    """

    name = models.CharField(max_length=255)
    description = models.TextField()

    # Pricing
    price_per_month = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)]
    )
    security_deposit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)]
    )
    application_fee = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)]
    )

    # Characteristics
    property_type = models.CharField(max_length=20, choices=PropertyType.choices)
    beds = models.PositiveIntegerField()
    baths = models.DecimalField(max_digits=4, decimal_places=1)
    square_feet = models.PositiveIntegerField()
    amenities = models.JSONField(default=list, blank=True)
    highlights = models.JSONField(default=list, blank=True)
    photo_urls = models.JSONField(default=list, blank=True)
    is_pets_allowed = models.BooleanField(default=False)
    is_parking_included = models.BooleanField(default=False)

    # Reviews
    average_rating = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(5)]
    )
    number_of_reviews = models.PositiveIntegerField(default=0)

    # Relationships
    location = models.ForeignKey(
        Location,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='properties'
    )
    landlord_cognito_id = models.CharField(
        max_length=128,
        blank=True,
        default='',
        db_index=True,
        help_text="External id of the listing landlord"
    )

    # Occupants (additive; see OCCUPANT_FIELDS)
    tenants = models.ManyToManyField(
        'accounts.Tenant',
        related_name='residences',
        blank=True
    )
    buyers = models.ManyToManyField(
        'accounts.Buyer',
        related_name='residences',
        blank=True
    )

    # Metadata
    posted_date = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'properties'
        ordering = ['id']
        verbose_name = 'Property'
        verbose_name_plural = 'Properties'

        indexes = [
            models.Index(fields=['property_type', 'price_per_month', 'beds', 'baths']),
        ]

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"<Property: {self.pk} {self.name}>"

    def occupants(self, kind):
        """
        Related manager holding the occupant list for an applicant kind.

        Raises:
            ValueError: if ``kind`` is not an ApplicantKind value
        """
        return getattr(self, OCCUPANT_FIELDS[ApplicantKind(kind)])

    def clean(self):
        """Reject amenity/highlight values outside the known vocabularies."""
        from django.core.exceptions import ValidationError

        errors = {}
        unknown_amenities = set(self.amenities or []) - set(AMENITY_CHOICES)
        if unknown_amenities:
            errors['amenities'] = f"Unknown amenities: {', '.join(sorted(unknown_amenities))}"
        unknown_highlights = set(self.highlights or []) - set(HIGHLIGHT_CHOICES)
        if unknown_highlights:
            errors['highlights'] = f"Unknown highlights: {', '.join(sorted(unknown_highlights))}"
        if errors:
            raise ValidationError(errors)
