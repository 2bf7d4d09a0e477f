"""
Accounts models for Leasehold.

This module implements the identity records:
- Tenant: applicant renting a property
- Buyer: applicant purchasing a property
- Landlord: owner/manager who lists properties

Tenants and buyers share the Applicant shape and are told apart by
ApplicantKind, the tag stored on applications and leases.
"""

from django.db import models


# =============================================================================
# APPLICANT KIND
# =============================================================================

class ApplicantKind(models.TextChoices):
    """Tag identifying which identity table an applicant reference points at."""
    TENANT = 'tenant', 'Tenant'
    BUYER = 'buyer', 'Buyer'


# =============================================================================
# PROFILE BASE
# =============================================================================

class Profile(models.Model):
    """Fields shared by every identity record."""

    cognito_id = models.CharField(
        max_length=128,
        unique=True,
        help_text="External identity provider id"
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255)
    phone_number = models.CharField(max_length=50, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.cognito_id})"


class Applicant(Profile):
    """
    A person who can apply for a property.

    Favorites are kept as a plain many-to-many; occupancy is recorded on
    the property side (Property.tenants / Property.buyers).
    """

    favorites = models.ManyToManyField(
        'listings.Property',
        related_name='favorited_by_%(class)ss',
        blank=True,
    )

    # Set on each concrete subclass.
    kind = None

    class Meta(Profile.Meta):
        abstract = True


# =============================================================================
# CONCRETE IDENTITIES
# =============================================================================

class Tenant(Applicant):
    """Applicant renting a property."""

    kind = ApplicantKind.TENANT

    class Meta(Applicant.Meta):
        db_table = 'tenants'
        verbose_name = 'Tenant'
        verbose_name_plural = 'Tenants'


class Buyer(Applicant):
    """Applicant purchasing a property."""

    kind = ApplicantKind.BUYER

    class Meta(Applicant.Meta):
        db_table = 'buyers'
        verbose_name = 'Buyer'
        verbose_name_plural = 'Buyers'


class Landlord(Profile):
    """Owner or manager of listed properties."""

    class Meta(Profile.Meta):
        db_table = 'landlords'
        verbose_name = 'Landlord'
        verbose_name_plural = 'Landlords'


# Every ApplicantKind must have an entry here; see applicant_model_for().
APPLICANT_MODELS = {
    ApplicantKind.TENANT: Tenant,
    ApplicantKind.BUYER: Buyer,
}


def applicant_model_for(kind):
    """
    Resolve the identity model for an applicant kind tag.

    Raises:
        ValueError: if ``kind`` is not a known ApplicantKind value
    """
    try:
        return APPLICANT_MODELS[ApplicantKind(kind)]
    except ValueError:
        raise ValueError(f"Unknown applicant kind: {kind!r}") from None
