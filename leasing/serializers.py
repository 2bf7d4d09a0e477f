"""
API Serializers for Leasehold leasing.

Implements the serializers behind the application and lease endpoints:
- ApplicationSerializer: stored application fields (the formatter adds the
  related property, applicant, landlord and lease)
- ApplicationCreateSerializer: submission input with reference checks
- ApplicationStatusSerializer: body of the status endpoint
- LeaseSerializer / LeaseDetailSerializer: leases with the derived
  next payment date
- PaymentSerializer: rent instalments
"""

from rest_framework import serializers
from django.utils import timezone
import logging

from accounts.models import ApplicantKind, applicant_model_for
from accounts.serializers import serialize_applicant
from listings.models import Property
from listings.serializers import PropertySerializer
from services.dates import next_payment_date

from .models import Application, Lease, Payment

logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION SERIALIZERS
# =============================================================================

class ApplicationSerializer(serializers.ModelSerializer):
    """Stored fields of an application, references as raw ids."""

    property_id = serializers.IntegerField(read_only=True, allow_null=True)
    lease_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Application
        fields = [
            'id',
            'application_date',
            'status',
            'property_id',
            'applicant_kind',
            'applicant_cognito_id',
            'lease_id',
            'name',
            'email',
            'phone_number',
            'message',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ApplicationCreateSerializer(serializers.ModelSerializer):
    """
    Application submission.

    New applications always start Pending and without a lease; a lease is
    only synthesized by the status workflow on approval.
    """

    property_id = serializers.IntegerField()
    applicant_kind = serializers.ChoiceField(
        choices=ApplicantKind.choices,
        default=ApplicantKind.TENANT
    )

    class Meta:
        model = Application
        fields = [
            'property_id',
            'applicant_kind',
            'applicant_cognito_id',
            'name',
            'email',
            'phone_number',
            'message',
        ]

    def validate_property_id(self, value):
        if not Property.objects.filter(pk=value).exists():
            raise serializers.ValidationError("Property not found.")
        return value

    def validate_name(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("Applicant's name is required.")
        return value.strip()

    def validate(self, data):
        """The referenced applicant must exist for the given kind."""
        model = applicant_model_for(data['applicant_kind'])
        if not model.objects.filter(cognito_id=data['applicant_cognito_id']).exists():
            raise serializers.ValidationError({
                'applicant_cognito_id': f"{model._meta.verbose_name} not found."
            })
        return data


class ApplicationStatusSerializer(serializers.Serializer):
    """Body of PUT/PATCH /applications/{id}/status/."""

    status = serializers.CharField(max_length=32, trim_whitespace=False)


# =============================================================================
# LEASE SERIALIZERS
# =============================================================================

class LeaseSerializer(serializers.ModelSerializer):
    """
    Lease with its next payment date.

    The date is derived on every read from ``start_date`` and the ``today``
    passed in serializer context (defaults to the current local date).
    """

    property_id = serializers.IntegerField(read_only=True, allow_null=True)
    next_payment_date = serializers.SerializerMethodField()

    class Meta:
        model = Lease
        fields = [
            'id',
            'start_date',
            'end_date',
            'rent',
            'deposit',
            'property_id',
            'applicant_kind',
            'applicant_cognito_id',
            'next_payment_date',
        ]
        read_only_fields = fields

    def get_next_payment_date(self, obj):
        today = self.context.get('today') or timezone.localdate()
        due = next_payment_date(obj.start_date, today=today)
        return due.isoformat() if due else None


class LeaseDetailSerializer(LeaseSerializer):
    """Lease with its property and applicant resolved."""

    property = PropertySerializer(read_only=True)
    applicant = serializers.SerializerMethodField()

    class Meta(LeaseSerializer.Meta):
        fields = LeaseSerializer.Meta.fields + ['property', 'applicant']
        read_only_fields = fields

    def get_applicant(self, obj):
        try:
            model = applicant_model_for(obj.applicant_kind)
        except ValueError:
            logger.warning(f"Lease {obj.pk} has unknown applicant kind {obj.applicant_kind!r}")
            return None
        return serialize_applicant(
            model.objects.filter(cognito_id=obj.applicant_cognito_id).first()
        )


# =============================================================================
# PAYMENT SERIALIZERS
# =============================================================================

class PaymentSerializer(serializers.ModelSerializer):
    """Rent instalment with its outstanding balance."""

    balance = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = [
            'id',
            'lease',
            'amount_due',
            'amount_paid',
            'balance',
            'due_date',
            'payment_date',
            'payment_status',
        ]
        read_only_fields = fields

    def get_balance(self, obj):
        return str(obj.get_balance())
