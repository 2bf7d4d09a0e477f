"""
Store adapters over the Django ORM.

Each store wraps one slice of the data model behind the handful of calls the
leasing workflow and response formatter need. Stores hold no state of their
own; views build fresh instances per request and hand them to the workflow.
"""

import logging
from typing import Optional

from django.utils import timezone

from accounts.models import ApplicantKind, Landlord, applicant_model_for
from leasing.models import Application, Lease
from listings.models import Property

logger = logging.getLogger(__name__)


class IdentityStore:
    """Tenant, buyer and landlord lookups."""

    def find_applicant(self, kind, external_id):
        """Return the Tenant or Buyer for ``kind``/``external_id``, or None."""
        model = applicant_model_for(kind)
        return model.objects.filter(cognito_id=external_id).first()

    def find_landlord(self, cognito_id) -> Optional[Landlord]:
        if not cognito_id:
            return None
        return Landlord.objects.filter(cognito_id=cognito_id).first()


class ListingStore:
    """Property lookups plus occupant bookkeeping."""

    def find_property(self, property_id) -> Optional[Property]:
        return Property.objects.select_related('location').filter(pk=property_id).first()

    def add_occupant(self, property_id, kind, external_id):
        """
        Add an applicant to a property's occupant list for its kind.

        Set semantics: adding someone already on the list is a no-op.
        """
        listing = Property.objects.get(pk=property_id)
        applicant = applicant_model_for(kind).objects.get(cognito_id=external_id)
        listing.occupants(kind).add(applicant)
        logger.debug(f"Occupant {kind}:{external_id} recorded on property {property_id}")


class LeaseStore:
    """Lease creation and lookups. Ids come from the table's auto-increment key."""

    def create_lease(self, *, property_id, applicant_kind, applicant_cognito_id,
                     start_date, end_date, rent, deposit) -> Lease:
        lease = Lease(
            property_id=property_id,
            applicant_kind=ApplicantKind(applicant_kind),
            applicant_cognito_id=applicant_cognito_id,
            start_date=start_date,
            end_date=end_date,
            rent=rent,
            deposit=deposit,
        )
        lease.full_clean()
        lease.save()
        return lease

    def find_lease(self, lease_id) -> Optional[Lease]:
        if lease_id is None:
            return None
        return Lease.objects.filter(pk=lease_id).first()

    def find_latest_for(self, property_id, kind, external_id) -> Optional[Lease]:
        """Most recent lease between a property and an applicant, if any."""
        return (
            Lease.objects
            .filter(
                property_id=property_id,
                applicant_kind=kind,
                applicant_cognito_id=external_id,
            )
            .order_by('-start_date', '-id')
            .first()
        )


class ApplicationStore:
    """Application lookups and the single status/lease update."""

    def find_application(self, application_id, for_update=False) -> Optional[Application]:
        """
        Load an application by id.

        ``for_update`` locks the row until the surrounding transaction ends;
        callers must be inside ``transaction.atomic()``.
        """
        queryset = Application.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        return queryset.filter(pk=application_id).first()

    def update_application(self, application_id, status, lease_id=None) -> int:
        """
        Write the new status, and the lease link when one is given, in a
        single UPDATE. Returns the number of rows touched.
        """
        changes = {'status': status, 'updated_at': timezone.now()}
        if lease_id is not None:
            changes['lease_id'] = lease_id
        return Application.objects.filter(pk=application_id).update(**changes)

    def create_application(self, **fields) -> Application:
        return Application.objects.create(**fields)

    def filter_for_user(self, user_id=None, user_type=None):
        """
        Applications visible to a user.

        - tenant / buyer: their own applications
        - landlord: applications on properties they list
        - no user: every application
        """
        queryset = Application.objects.all()
        if not user_id or not user_type:
            return queryset
        if user_type == 'landlord':
            property_ids = Property.objects.filter(
                landlord_cognito_id=user_id
            ).values_list('pk', flat=True)
            return queryset.filter(property_id__in=list(property_ids))
        return queryset.filter(
            applicant_kind=ApplicantKind(user_type),
            applicant_cognito_id=user_id,
        )
