"""
Leasing models for Leasehold.

This module implements the leasing lifecycle entities:
- Application: A tenant's or buyer's request for a property
- Lease: The agreement synthesized when an application is first approved
- Payment: Rent instalments due under a lease

Property and applicant references mirror the document store the data was
exported from: the property link is not enforced by the database, and the
applicant is referenced by external id plus an ApplicantKind tag.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from accounts.models import ApplicantKind


# =============================================================================
# CHOICES
# =============================================================================

class ApplicationStatus(models.TextChoices):
    PENDING = 'Pending', 'Pending'
    APPROVED = 'Approved', 'Approved'
    DENIED = 'Denied', 'Denied'


class PaymentStatus(models.TextChoices):
    PENDING = 'Pending', 'Pending'
    PAID = 'Paid', 'Paid'
    PARTIALLY_PAID = 'PartiallyPaid', 'Partially Paid'
    OVERDUE = 'Overdue', 'Overdue'


# =============================================================================
# LEASE MODEL
# =============================================================================

class Lease(models.Model):
    """
    Lease between a property and one applicant.

    Created once per application, on its first approval, and not modified
    afterwards.
    """

    start_date = models.DateField()
    end_date = models.DateField()
    rent = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        help_text="Monthly rent copied from the property at approval time"
    )
    deposit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)]
    )

    # Relationships
    property = models.ForeignKey(
        'listings.Property',
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        null=True,
        related_name='leases'
    )
    applicant_kind = models.CharField(max_length=10, choices=ApplicantKind.choices)
    applicant_cognito_id = models.CharField(max_length=128, db_index=True)

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'leases'
        ordering = ['id']
        indexes = [
            models.Index(fields=['property', 'applicant_kind', 'applicant_cognito_id']),
            models.Index(fields=['start_date', 'end_date']),
        ]

    def __str__(self):
        return f"Lease #{self.pk} ({self.applicant_kind} {self.applicant_cognito_id})"

    def clean(self):
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValidationError({'end_date': "End date must be after start date."})


# =============================================================================
# APPLICATION MODEL
# =============================================================================

class Application(models.Model):
    """
    Application for a property by a tenant or buyer.

    ``status`` is deliberately a free-form string; whether unknown values
    are accepted is decided by the LEASING['STRICT_APPLICATION_STATUS']
    setting at the workflow level. ``lease`` is set at most once.
    """

    application_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(
        max_length=32,
        default=ApplicationStatus.PENDING,
        db_index=True
    )

    # Relationships
    property = models.ForeignKey(
        'listings.Property',
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        null=True,
        related_name='applications'
    )
    applicant_kind = models.CharField(max_length=10, choices=ApplicantKind.choices)
    applicant_cognito_id = models.CharField(max_length=128, db_index=True)
    lease = models.OneToOneField(
        Lease,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='application'
    )

    # Applicant snapshot at time of application
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255)
    phone_number = models.CharField(max_length=50)
    message = models.TextField(blank=True, default='')

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'applications'
        ordering = ['-application_date', '-id']
        indexes = [
            models.Index(fields=['property', 'applicant_cognito_id']),
        ]

    def __str__(self):
        return f"Application #{self.pk} - {self.name} ({self.status})"


# =============================================================================
# PAYMENT MODEL
# =============================================================================

class Payment(models.Model):
    """Rent instalment under a lease."""

    lease = models.ForeignKey(
        Lease,
        on_delete=models.CASCADE,
        related_name='payments'
    )
    amount_due = models.DecimalField(max_digits=12, decimal_places=2)
    amount_paid = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    due_date = models.DateField()
    payment_date = models.DateField(blank=True, null=True)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        db_index=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        ordering = ['due_date']
        indexes = [
            models.Index(fields=['lease', 'due_date']),
        ]

    def __str__(self):
        return f"Payment {self.amount_due} due {self.due_date} ({self.payment_status})"

    def get_balance(self):
        """Outstanding amount on this instalment, never negative."""
        return max(self.amount_due - self.amount_paid, Decimal("0.00"))
