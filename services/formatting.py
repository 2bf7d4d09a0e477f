"""
Denormalized application views.

ApplicationFormatter assembles what the dashboards show for one
application: the stored application fields plus its property (with
location and coordinates), the applicant resolved through the kind tag, the
listing landlord, and the lease with its next payment date.
"""

import logging

from django.utils import timezone

from accounts.models import applicant_model_for
from accounts.serializers import LandlordSerializer, serialize_applicant
from leasing.serializers import ApplicationSerializer, LeaseSerializer
from listings.serializers import PropertySerializer

logger = logging.getLogger(__name__)


class ApplicationFormatter:
    """
    Build response dicts for applications.

    Args:
        identities: IdentityStore
        listings: ListingStore
        leases: LeaseStore
        today: zero-argument callable returning the reference date for
            next-payment calculations (defaults to the local date)
    """

    def __init__(self, identities, listings, leases, today=None):
        self.identities = identities
        self.listings = listings
        self.leases = leases
        self.today = today or timezone.localdate

    def format(self, application, fallback_to_latest=False):
        """
        Denormalized view of one application.

        With ``fallback_to_latest`` an unlinked application shows the latest
        lease between the same property and applicant (the listing pages use
        this); otherwise only the application's own lease is shown.
        """
        data = dict(ApplicationSerializer(application).data)

        listing = None
        if application.property_id is not None:
            listing = self.listings.find_property(application.property_id)

        data['property'] = PropertySerializer(listing).data if listing else None
        data['landlord'] = self._format_landlord(listing)
        data['applicant'] = self._format_applicant(application)
        data['lease'] = self._format_lease(application, fallback_to_latest)
        return data

    def format_many(self, applications, fallback_to_latest=False):
        return [self.format(application, fallback_to_latest) for application in applications]

    def _format_landlord(self, listing):
        if listing is None:
            return None
        landlord = self.identities.find_landlord(listing.landlord_cognito_id)
        return LandlordSerializer(landlord).data if landlord else None

    def _format_applicant(self, application):
        try:
            applicant_model_for(application.applicant_kind)
        except ValueError:
            logger.warning(
                f"Application {application.pk} has unknown applicant kind "
                f"{application.applicant_kind!r}"
            )
            return None
        applicant = self.identities.find_applicant(
            application.applicant_kind, application.applicant_cognito_id
        )
        return serialize_applicant(applicant)

    def _format_lease(self, application, fallback_to_latest):
        lease = self.leases.find_lease(application.lease_id)

        if (fallback_to_latest and lease is None
                and application.lease_id is None and application.property_id):
            lease = self.leases.find_latest_for(
                application.property_id,
                application.applicant_kind,
                application.applicant_cognito_id,
            )

        if lease is None:
            return None
        return LeaseSerializer(lease, context={'today': self.today()}).data
