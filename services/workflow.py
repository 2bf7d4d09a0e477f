"""
Application status workflow.

Moves an application to a new status and, the first time it is approved,
synthesizes the lease that goes with it:

    1. load the application (locked for the rest of the transaction)
    2. check its applicant and property references
    3. load the property
    4. on first approval: create the lease, record the occupant
    5. write status (+ lease link) in one update
    6. re-read and return the denormalized view

Failures are translated once, here, into the services exception taxonomy.
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from accounts.models import ApplicantKind
from leasing.models import ApplicationStatus

from . import (
    DataIntegrityError,
    InvalidStatusError,
    RecordNotFoundError,
    StoreError,
    WorkflowError,
)
from .dates import lease_end_date
from .formatting import ApplicationFormatter
from .stores import ApplicationStore, IdentityStore, LeaseStore, ListingStore

logger = logging.getLogger(__name__)

DEFAULT_LEASE_TERM_MONTHS = 12


class ApplicationWorkflow:
    """
    Application status transitions.

    Stores and the formatter are injected so callers (views, tests) decide
    what backs them; ``from_settings()`` wires the ORM-backed defaults.
    """

    def __init__(self, applications, listings, leases, identities, formatter,
                 strict_status=False, lease_term_months=DEFAULT_LEASE_TERM_MONTHS,
                 today=None):
        self.applications = applications
        self.listings = listings
        self.leases = leases
        self.identities = identities
        self.formatter = formatter
        self.strict_status = strict_status
        self.lease_term_months = lease_term_months
        self.today = today or timezone.localdate

    @classmethod
    def from_settings(cls, today=None):
        """Workflow backed by the Django ORM and configured from settings.LEASING."""
        config = getattr(settings, 'LEASING', {})
        identities = IdentityStore()
        listings = ListingStore()
        leases = LeaseStore()
        return cls(
            applications=ApplicationStore(),
            listings=listings,
            leases=leases,
            identities=identities,
            formatter=ApplicationFormatter(identities, listings, leases, today=today),
            strict_status=config.get('STRICT_APPLICATION_STATUS', False),
            lease_term_months=config.get('LEASE_TERM_MONTHS', DEFAULT_LEASE_TERM_MONTHS),
            today=today,
        )

    # =========================================================================
    # STATUS TRANSITION
    # =========================================================================

    def set_application_status(self, application_id, new_status):
        """
        Set an application's status, creating its lease on first approval.

        Args:
            application_id: primary key of the application
            new_status: "Pending", "Approved", "Denied" (any non-empty
                string unless the strict status policy is on)

        Returns:
            dict: denormalized application view

        Raises:
            InvalidStatusError: empty or (strict policy) unknown status
            RecordNotFoundError: application or its property is missing
            DataIntegrityError: stored applicant/property reference is
                missing, malformed or dangling
            StoreError: any database failure
        """
        new_status = self._validate_status(new_status)

        try:
            with transaction.atomic():
                application = self.applications.find_application(application_id, for_update=True)
                if application is None:
                    raise RecordNotFoundError(
                        f"Application {application_id} not found.", entity='application'
                    )

                kind = self._check_references(application)

                listing = self.listings.find_property(application.property_id)
                if listing is None:
                    raise RecordNotFoundError(
                        f"Property {application.property_id} for application "
                        f"{application_id} not found.",
                        entity='property'
                    )

                new_lease_id = None
                if new_status == ApplicationStatus.APPROVED and application.lease_id is None:
                    new_lease_id = self._create_lease(application, listing, kind)

                self.applications.update_application(
                    application_id, new_status, lease_id=new_lease_id
                )

            return self.formatter.format(self.applications.find_application(application_id))

        except WorkflowError as e:
            logger.warning(f"Status update for application {application_id} rejected: {e}")
            raise
        except DatabaseError as e:
            logger.exception(f"Store failure updating application {application_id}")
            raise StoreError(f"Error updating application status: {e}") from e

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _validate_status(self, new_status):
        if not isinstance(new_status, str) or not new_status.strip():
            raise InvalidStatusError("Status is required.")
        # Stored and compared verbatim; " Approved " is not an approval.
        if self.strict_status and new_status not in ApplicationStatus.values:
            raise InvalidStatusError(
                f"Unknown status {new_status!r}; expected one of "
                f"{', '.join(ApplicationStatus.values)}."
            )
        return new_status

    def _check_references(self, application):
        """
        Validate the application's stored references before any write.

        Returns:
            ApplicantKind of the applicant
        """
        if not application.applicant_cognito_id:
            raise DataIntegrityError(
                f"Application {application.pk} has no applicant id.", entity='application'
            )
        try:
            kind = ApplicantKind(application.applicant_kind)
        except ValueError:
            raise DataIntegrityError(
                f"Application {application.pk} has invalid applicant kind "
                f"{application.applicant_kind!r}.",
                entity='application'
            ) from None
        if application.property_id is None:
            raise DataIntegrityError(
                f"Application {application.pk} has no property reference.", entity='application'
            )
        if self.identities.find_applicant(kind, application.applicant_cognito_id) is None:
            raise DataIntegrityError(
                f"Application {application.pk} references missing {kind.value} "
                f"{application.applicant_cognito_id!r}.",
                entity='application'
            )
        return kind

    def _create_lease(self, application, listing, kind):
        start = self.today()
        try:
            lease = self.leases.create_lease(
                property_id=application.property_id,
                applicant_kind=kind,
                applicant_cognito_id=application.applicant_cognito_id,
                start_date=start,
                end_date=lease_end_date(start, self.lease_term_months),
                rent=listing.price_per_month,
                deposit=listing.security_deposit,
            )
        except ValidationError as e:
            raise DataIntegrityError(
                f"Could not build a lease for application {application.pk}: {e}",
                entity='lease'
            ) from e

        self.listings.add_occupant(application.property_id, kind, application.applicant_cognito_id)

        logger.info(
            f"Lease {lease.pk} created for application {application.pk} "
            f"({kind.value} {application.applicant_cognito_id}, property {application.property_id})"
        )
        return lease.pk
