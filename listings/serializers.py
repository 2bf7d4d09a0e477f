"""
API Serializers for Leasehold listings.

- LocationSerializer: address plus a {longitude, latitude} pair
- PropertySerializer: listing detail with its location resolved
- PropertyListSerializer: compact rows for search results
- PropertyCreateSerializer: new listing with its location
"""

from django.db import transaction
from rest_framework import serializers

from accounts.models import Landlord

from .models import AMENITY_CHOICES, HIGHLIGHT_CHOICES, Location, Property


class LocationSerializer(serializers.ModelSerializer):
    """Location with coordinates exposed as a structured pair."""

    coordinates = serializers.SerializerMethodField()

    class Meta:
        model = Location
        fields = [
            'id',
            'address',
            'city',
            'state',
            'country',
            'postal_code',
            'coordinates',
        ]
        read_only_fields = fields

    def get_coordinates(self, obj):
        """Get coordinates as {"longitude": x, "latitude": y} or None."""
        return obj.get_coordinates()


class PropertySerializer(serializers.ModelSerializer):
    """
    Complete property serializer.

    ``address`` duplicates ``location.address`` for clients that only need
    a one-line label.
    """

    location = LocationSerializer(read_only=True)
    address = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = [
            'id',
            'name',
            'description',
            'price_per_month',
            'security_deposit',
            'application_fee',
            'property_type',
            'beds',
            'baths',
            'square_feet',
            'amenities',
            'highlights',
            'photo_urls',
            'is_pets_allowed',
            'is_parking_included',
            'average_rating',
            'number_of_reviews',
            'landlord_cognito_id',
            'location',
            'address',
            'posted_date',
        ]
        read_only_fields = fields

    def get_address(self, obj):
        if obj.location is None:
            return None
        return obj.location.address


class PropertyListSerializer(serializers.ModelSerializer):
    """Search-result row for a property."""

    city = serializers.CharField(source='location.city', read_only=True, default=None)
    coordinates = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = [
            'id',
            'name',
            'price_per_month',
            'property_type',
            'beds',
            'baths',
            'square_feet',
            'average_rating',
            'city',
            'coordinates',
        ]
        read_only_fields = fields

    def get_coordinates(self, obj):
        if obj.location is None:
            return None
        return obj.location.get_coordinates()


# =============================================================================
# CREATE SERIALIZERS
# =============================================================================

class LocationCreateSerializer(serializers.ModelSerializer):
    """Address of a new listing; coordinates are optional."""

    class Meta:
        model = Location
        fields = [
            'address',
            'city',
            'state',
            'country',
            'postal_code',
            'longitude',
            'latitude',
        ]

    def validate(self, data):
        if (data.get('longitude') is None) != (data.get('latitude') is None):
            raise serializers.ValidationError(
                "Provide both longitude and latitude, or neither."
            )
        return data


class PropertyCreateSerializer(serializers.ModelSerializer):
    """
    Property creation serializer.

    Creates the Location and the Property together. Photos are given as
    already-hosted URLs; nothing is uploaded or geocoded here.
    """

    location = LocationCreateSerializer()

    class Meta:
        model = Property
        fields = [
            'name',
            'description',
            'price_per_month',
            'security_deposit',
            'application_fee',
            'property_type',
            'beds',
            'baths',
            'square_feet',
            'amenities',
            'highlights',
            'photo_urls',
            'is_pets_allowed',
            'is_parking_included',
            'landlord_cognito_id',
            'location',
        ]
        extra_kwargs = {
            'description': {'required': False, 'allow_blank': True},
            'landlord_cognito_id': {'required': True, 'allow_blank': False},
        }

    def validate_name(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("Property name is required.")
        return value.strip()

    def validate_landlord_cognito_id(self, value):
        if not Landlord.objects.filter(cognito_id=value).exists():
            raise serializers.ValidationError("Landlord not found.")
        return value

    def validate_amenities(self, value):
        return self._validate_vocabulary(value, AMENITY_CHOICES, 'amenities')

    def validate_highlights(self, value):
        return self._validate_vocabulary(value, HIGHLIGHT_CHOICES, 'highlights')

    def validate_photo_urls(self, value):
        if not isinstance(value, list) or not all(isinstance(url, str) for url in value):
            raise serializers.ValidationError("photo_urls must be a list of URLs.")
        return value

    def _validate_vocabulary(self, value, choices, label):
        if not isinstance(value, list):
            raise serializers.ValidationError(f"{label} must be a list.")
        unknown = sorted(set(value) - set(choices))
        if unknown:
            raise serializers.ValidationError(f"Unknown {label}: {', '.join(unknown)}")
        return value

    def create(self, validated_data):
        location_data = validated_data.pop('location')
        with transaction.atomic():
            location = Location.objects.create(**location_data)
            return Property.objects.create(location=location, **validated_data)
