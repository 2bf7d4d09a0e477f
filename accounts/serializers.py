"""
API Serializers for Leasehold accounts.

- Tenant/Buyer/LandlordSerializer: public cards embedded in application
  and lease responses (no ids, timestamps or favorites)
- *DetailSerializer: profile endpoints, with favorites and residences
- *WriteSerializer: profile create and update bodies
"""

from rest_framework import serializers

from listings.serializers import PropertyListSerializer

from .models import ApplicantKind, Buyer, Landlord, Tenant

PROFILE_FIELDS = ['cognito_id', 'name', 'email', 'phone_number']


# =============================================================================
# EMBEDDED PROFILE CARDS
# =============================================================================

class TenantSerializer(serializers.ModelSerializer):
    """Tenant profile as embedded in other responses."""

    class Meta:
        model = Tenant
        fields = ['cognito_id', 'name', 'email', 'phone_number']
        read_only_fields = fields


class BuyerSerializer(serializers.ModelSerializer):
    """Buyer profile as embedded in other responses."""

    class Meta:
        model = Buyer
        fields = ['cognito_id', 'name', 'email', 'phone_number']
        read_only_fields = fields


class LandlordSerializer(serializers.ModelSerializer):
    """Landlord contact card shown next to an application's property."""

    class Meta:
        model = Landlord
        fields = ['cognito_id', 'name', 'email', 'phone_number']
        read_only_fields = fields


APPLICANT_SERIALIZERS = {
    ApplicantKind.TENANT: TenantSerializer,
    ApplicantKind.BUYER: BuyerSerializer,
}


def serialize_applicant(applicant):
    """Serialize a Tenant or Buyer with the serializer registered for its kind."""
    if applicant is None:
        return None
    return APPLICANT_SERIALIZERS[applicant.kind](applicant).data


# =============================================================================
# PROFILE DETAIL SERIALIZERS
# =============================================================================

class ApplicantDetailSerializer(serializers.ModelSerializer):
    """Applicant profile with favorite listings and residence ids."""

    favorites = PropertyListSerializer(many=True, read_only=True)
    residences = serializers.PrimaryKeyRelatedField(many=True, read_only=True)


class TenantDetailSerializer(ApplicantDetailSerializer):

    class Meta:
        model = Tenant
        fields = PROFILE_FIELDS + ['favorites', 'residences', 'created_at', 'updated_at']
        read_only_fields = fields


class BuyerDetailSerializer(ApplicantDetailSerializer):

    class Meta:
        model = Buyer
        fields = PROFILE_FIELDS + ['favorites', 'residences', 'created_at', 'updated_at']
        read_only_fields = fields


class LandlordDetailSerializer(serializers.ModelSerializer):

    class Meta:
        model = Landlord
        fields = PROFILE_FIELDS + ['created_at', 'updated_at']
        read_only_fields = fields


# =============================================================================
# PROFILE WRITE SERIALIZERS
# =============================================================================

class ProfileWriteSerializer(serializers.ModelSerializer):
    """
    Create and update body for identity records.

    ``cognito_id`` is set once at creation and read-only afterwards.
    """

    def get_fields(self):
        fields = super().get_fields()
        if self.instance is not None:
            fields['cognito_id'].read_only = True
        return fields

    def validate_name(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("Name is required.")
        return value.strip()


class TenantWriteSerializer(ProfileWriteSerializer):

    class Meta:
        model = Tenant
        fields = PROFILE_FIELDS


class BuyerWriteSerializer(ProfileWriteSerializer):

    class Meta:
        model = Buyer
        fields = PROFILE_FIELDS


class LandlordWriteSerializer(ProfileWriteSerializer):

    class Meta:
        model = Landlord
        fields = PROFILE_FIELDS
