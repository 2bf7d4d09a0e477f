# ===== SERVICES LAYER TEST SUITE =====
"""
Test suite for the leasing services layer
File: services/tests.py

Test Coverage:
- Lease calendar calculations (end dates, next payment dates)
- WKT point codec
- Exception taxonomy
- Store adapters (occupants, user scoping)
- ApplicationWorkflow status transitions and lease synthesis
- ApplicationFormatter denormalized output
"""

from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase, override_settings

from accounts.models import ApplicantKind, Buyer, Landlord, Tenant
from leasing.models import Application, ApplicationStatus, Lease
from listings.models import Location, Property

from . import (
    DataIntegrityError,
    InvalidStatusError,
    RecordNotFoundError,
    StoreError,
)
from .dates import lease_end_date, next_payment_date
from .formatting import ApplicationFormatter
from .geo import format_wkt_point, parse_wkt_point, validate_coordinates
from .stores import ApplicationStore, IdentityStore, LeaseStore, ListingStore
from .workflow import ApplicationWorkflow

TODAY = date(2024, 1, 15)


def create_listing(**overrides):
    """Property with a geocoded location; keyword arguments override fields."""
    location = Location.objects.create(
        address='1 Colorado Blvd',
        city='Pasadena',
        state='CA',
        country='United States',
        postal_code='91101',
        longitude=Decimal('-118.1445160'),
        latitude=Decimal('34.1477850'),
    )
    fields = {
        'name': 'Sunny Loft',
        'description': 'Top floor loft near the park',
        'price_per_month': Decimal('1500.00'),
        'security_deposit': Decimal('3000.00'),
        'property_type': 'Apartment',
        'beds': 2,
        'baths': Decimal('1.5'),
        'square_feet': 900,
        'amenities': ['Pool', 'Gym'],
        'location': location,
        'landlord_cognito_id': 'landlord-1',
    }
    fields.update(overrides)
    return Property.objects.create(**fields)


def create_application(listing, kind=ApplicantKind.TENANT, cognito_id='tenant-1', **overrides):
    fields = {
        'property_id': listing.pk if listing else None,
        'applicant_kind': kind,
        'applicant_cognito_id': cognito_id,
        'name': 'Alex Doe',
        'email': 'alex@example.com',
        'phone_number': '555-0100',
        'message': 'Looking to move in next month',
    }
    fields.update(overrides)
    return Application.objects.create(**fields)


# =============================================================================
# LEASE CALENDAR TESTS
# =============================================================================

class LeaseEndDateTest(TestCase):
    """Test lease end date calculation"""

    def test_twelve_month_term(self):
        self.assertEqual(lease_end_date(date(2024, 1, 15), 12), date(2025, 1, 15))

    def test_leap_day_start_clamps(self):
        """Feb 29 plus a year lands on Feb 28"""
        self.assertEqual(lease_end_date(date(2024, 2, 29), 12), date(2025, 2, 28))

    def test_short_term(self):
        self.assertEqual(lease_end_date(date(2024, 1, 31), 1), date(2024, 2, 29))


class NextPaymentDateTest(TestCase):
    """Test next payment date derivation"""

    def test_mid_term(self):
        self.assertEqual(
            next_payment_date(date(2024, 1, 15), today=date(2024, 7, 1)),
            date(2024, 7, 15)
        )

    def test_future_start_is_first_payment(self):
        self.assertEqual(
            next_payment_date(date(2024, 1, 15), today=date(2024, 1, 1)),
            date(2024, 1, 15)
        )

    def test_start_today_is_next_month(self):
        self.assertEqual(next_payment_date(TODAY, today=TODAY), date(2024, 2, 15))

    def test_due_today_moves_to_following_month(self):
        """Result is strictly after today"""
        self.assertEqual(
            next_payment_date(date(2024, 1, 15), today=date(2024, 7, 15)),
            date(2024, 8, 15)
        )

    def test_month_end_start_does_not_drift(self):
        """A lease starting on the 31st stays on month-end after February"""
        self.assertEqual(
            next_payment_date(date(2024, 1, 31), today=date(2024, 3, 1)),
            date(2024, 3, 31)
        )

    def test_no_start_date(self):
        self.assertIsNone(next_payment_date(None, today=TODAY))

    def test_datetime_start(self):
        self.assertEqual(
            next_payment_date(datetime(2024, 1, 15, 9, 30), today=date(2024, 3, 20)),
            date(2024, 4, 15)
        )


# =============================================================================
# GEO CODEC TESTS
# =============================================================================

class WKTPointTest(TestCase):
    """Test WKT point parsing and formatting"""

    def test_parse_point(self):
        self.assertEqual(
            parse_wkt_point('POINT(-118.144516 34.147785)'),
            (-118.144516, 34.147785)
        )

    def test_parse_tolerates_case_and_spacing(self):
        self.assertEqual(parse_wkt_point('  point ( -73.5 40.25 ) '), (-73.5, 40.25))

    def test_parse_integers(self):
        self.assertEqual(parse_wkt_point('POINT(10 20)'), (10.0, 20.0))

    def test_parse_invalid(self):
        self.assertIsNone(parse_wkt_point(None))
        self.assertIsNone(parse_wkt_point(''))
        self.assertIsNone(parse_wkt_point('LINESTRING(0 0, 1 1)'))
        self.assertIsNone(parse_wkt_point('POINT(abc def)'))

    def test_parse_out_of_range(self):
        self.assertIsNone(parse_wkt_point('POINT(200 10)'))
        self.assertIsNone(parse_wkt_point('POINT(10 -95)'))

    def test_format_point(self):
        self.assertEqual(
            format_wkt_point(Decimal('-118.1445160'), Decimal('34.1477850')),
            'POINT(-118.144516 34.147785)'
        )

    def test_format_then_parse(self):
        self.assertEqual(parse_wkt_point(format_wkt_point(-0.1276, 51.5072)), (-0.1276, 51.5072))

    def test_validate_coordinates(self):
        self.assertTrue(validate_coordinates(-180, -90))
        self.assertTrue(validate_coordinates(180, 90))
        self.assertFalse(validate_coordinates(-181, 0))
        self.assertFalse(validate_coordinates(0, float('nan')))
        self.assertFalse(validate_coordinates('invalid', 37.3))


# =============================================================================
# EXCEPTION TAXONOMY TESTS
# =============================================================================

class WorkflowErrorTest(TestCase):
    """Test error codes, HTTP statuses and rendered bodies"""

    def test_status_codes(self):
        self.assertEqual(InvalidStatusError('x').status_code, 400)
        self.assertEqual(RecordNotFoundError('x').status_code, 404)
        self.assertEqual(DataIntegrityError('x').status_code, 500)
        self.assertEqual(StoreError('x').status_code, 500)

    def test_to_dict_with_entity(self):
        error = RecordNotFoundError('Property 9 not found.', entity='property')
        self.assertEqual(error.to_dict(), {
            'error': 'not_found',
            'message': 'Property 9 not found.',
            'entity': 'property',
        })

    def test_to_dict_without_entity(self):
        self.assertEqual(
            InvalidStatusError('Status is required.').to_dict(),
            {'error': 'invalid_status', 'message': 'Status is required.'}
        )


# =============================================================================
# STORE TESTS
# =============================================================================

class StoreTest(TestCase):
    """Test the ORM store adapters"""

    def setUp(self):
        self.listing = create_listing()
        self.tenant = Tenant.objects.create(cognito_id='tenant-1', name='Alex Doe', email='alex@example.com')
        self.buyer = Buyer.objects.create(cognito_id='buyer-1', name='Sam Roe', email='sam@example.com')

    def test_find_applicant_by_kind(self):
        identities = IdentityStore()
        self.assertEqual(identities.find_applicant(ApplicantKind.TENANT, 'tenant-1'), self.tenant)
        self.assertEqual(identities.find_applicant('buyer', 'buyer-1'), self.buyer)
        self.assertIsNone(identities.find_applicant(ApplicantKind.BUYER, 'tenant-1'))

    def test_find_applicant_unknown_kind(self):
        with self.assertRaises(ValueError):
            IdentityStore().find_applicant('landlord', 'tenant-1')

    def test_add_occupant_is_idempotent(self):
        listings = ListingStore()
        listings.add_occupant(self.listing.pk, ApplicantKind.TENANT, 'tenant-1')
        listings.add_occupant(self.listing.pk, ApplicantKind.TENANT, 'tenant-1')

        self.assertEqual(self.listing.tenants.count(), 1)
        self.assertEqual(self.listing.buyers.count(), 0)

    def test_add_occupant_uses_kind_list(self):
        ListingStore().add_occupant(self.listing.pk, ApplicantKind.BUYER, 'buyer-1')

        self.assertEqual(list(self.listing.buyers.all()), [self.buyer])
        self.assertEqual(self.listing.tenants.count(), 0)

    def test_update_application_without_lease_keeps_link(self):
        lease = Lease.objects.create(
            start_date=TODAY, end_date=date(2025, 1, 15), rent=1, deposit=1,
            property=self.listing, applicant_kind='tenant', applicant_cognito_id='tenant-1'
        )
        application = create_application(self.listing, lease=lease)

        touched = ApplicationStore().update_application(application.pk, 'Denied')

        application.refresh_from_db()
        self.assertEqual(touched, 1)
        self.assertEqual(application.status, 'Denied')
        self.assertEqual(application.lease_id, lease.pk)

    def test_filter_for_user(self):
        other = create_listing(landlord_cognito_id='landlord-2')
        mine = create_application(self.listing)
        theirs = create_application(other, kind=ApplicantKind.BUYER, cognito_id='buyer-1')
        store = ApplicationStore()

        self.assertEqual(list(store.filter_for_user('tenant-1', 'tenant')), [mine])
        self.assertEqual(list(store.filter_for_user('buyer-1', 'buyer')), [theirs])
        self.assertEqual(list(store.filter_for_user('landlord-2', 'landlord')), [theirs])
        self.assertEqual(store.filter_for_user().count(), 2)

    def test_find_latest_for(self):
        older = Lease.objects.create(
            start_date=date(2022, 1, 1), end_date=date(2023, 1, 1), rent=1, deposit=1,
            property=self.listing, applicant_kind='tenant', applicant_cognito_id='tenant-1'
        )
        newer = Lease.objects.create(
            start_date=date(2023, 1, 1), end_date=date(2024, 1, 1), rent=1, deposit=1,
            property=self.listing, applicant_kind='tenant', applicant_cognito_id='tenant-1'
        )
        leases = LeaseStore()

        self.assertEqual(leases.find_latest_for(self.listing.pk, 'tenant', 'tenant-1'), newer)
        self.assertNotEqual(leases.find_latest_for(self.listing.pk, 'tenant', 'tenant-1'), older)
        self.assertIsNone(leases.find_latest_for(self.listing.pk, 'buyer', 'tenant-1'))


# =============================================================================
# WORKFLOW TESTS
# =============================================================================

class ApplicationWorkflowTest(TestCase):
    """Test status transitions and lease synthesis"""

    def setUp(self):
        self.landlord = Landlord.objects.create(
            cognito_id='landlord-1', name='Pat Owner', email='pat@example.com'
        )
        self.tenant = Tenant.objects.create(
            cognito_id='tenant-1', name='Alex Doe', email='alex@example.com'
        )
        self.listing = create_listing()
        self.application = create_application(self.listing)
        self.workflow = ApplicationWorkflow.from_settings(today=lambda: TODAY)

    def assertUnchanged(self, status=ApplicationStatus.PENDING):
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, status)
        self.assertIsNone(self.application.lease_id)
        self.assertEqual(Lease.objects.count(), 0)
        self.assertEqual(self.listing.tenants.count(), 0)

    def test_approve_creates_lease(self):
        """First approval creates exactly one lease from the property terms"""
        result = self.workflow.set_application_status(self.application.pk, 'Approved')

        self.assertEqual(Lease.objects.count(), 1)
        lease = Lease.objects.get()
        self.assertEqual(lease.property_id, self.listing.pk)
        self.assertEqual(lease.applicant_kind, ApplicantKind.TENANT)
        self.assertEqual(lease.applicant_cognito_id, 'tenant-1')
        self.assertEqual(lease.start_date, TODAY)
        self.assertEqual(lease.end_date, date(2025, 1, 15))
        self.assertEqual(lease.rent, Decimal('1500.00'))
        self.assertEqual(lease.deposit, Decimal('3000.00'))

        self.application.refresh_from_db()
        self.assertEqual(self.application.status, 'Approved')
        self.assertEqual(self.application.lease_id, lease.pk)
        self.assertIn(self.tenant, self.listing.tenants.all())

        self.assertEqual(result['status'], 'Approved')
        self.assertEqual(result['lease_id'], lease.pk)
        self.assertEqual(result['lease']['id'], lease.pk)
        self.assertEqual(result['lease']['next_payment_date'], '2024-02-15')

    def test_second_approval_creates_nothing(self):
        self.workflow.set_application_status(self.application.pk, 'Approved')
        first_lease = Lease.objects.get()

        result = self.workflow.set_application_status(self.application.pk, 'Approved')

        self.assertEqual(Lease.objects.count(), 1)
        self.assertEqual(result['lease_id'], first_lease.pk)
        self.assertEqual(self.listing.tenants.count(), 1)

    def test_deny_creates_no_lease(self):
        result = self.workflow.set_application_status(self.application.pk, 'Denied')

        self.assertUnchanged(status='Denied')
        self.assertIsNone(result['lease'])
        self.assertEqual(result['status'], 'Denied')

    def test_denied_second_application_shows_no_lease(self):
        """A later unlinked application never reports an earlier application's lease"""
        self.workflow.set_application_status(self.application.pk, 'Approved')
        second = create_application(self.listing)

        result = self.workflow.set_application_status(second.pk, 'Denied')

        self.assertIsNone(result['lease_id'])
        self.assertIsNone(result['lease'])
        self.assertEqual(Lease.objects.count(), 1)

    def test_padded_status_is_stored_verbatim(self):
        result = self.workflow.set_application_status(self.application.pk, ' Approved ')

        self.assertEqual(result['status'], ' Approved ')
        self.assertUnchanged(status=' Approved ')

    def test_status_change_after_approval_keeps_lease(self):
        self.workflow.set_application_status(self.application.pk, 'Approved')
        lease = Lease.objects.get()

        self.workflow.set_application_status(self.application.pk, 'Pending')

        self.application.refresh_from_db()
        self.assertEqual(self.application.status, 'Pending')
        self.assertEqual(self.application.lease_id, lease.pk)

    def test_buyer_approval_uses_buyer_occupants(self):
        buyer = Buyer.objects.create(cognito_id='buyer-1', name='Sam Roe', email='sam@example.com')
        application = create_application(self.listing, kind=ApplicantKind.BUYER, cognito_id='buyer-1')

        result = self.workflow.set_application_status(application.pk, 'Approved')

        self.assertEqual(list(self.listing.buyers.all()), [buyer])
        self.assertEqual(self.listing.tenants.count(), 0)
        self.assertEqual(Lease.objects.get().applicant_kind, ApplicantKind.BUYER)
        self.assertEqual(result['applicant']['cognito_id'], 'buyer-1')

    def test_missing_application(self):
        with self.assertRaises(RecordNotFoundError) as ctx:
            self.workflow.set_application_status(999999, 'Approved')

        self.assertEqual(ctx.exception.entity, 'application')
        self.assertUnchanged()

    def test_deleted_property(self):
        Property.objects.filter(pk=self.listing.pk).delete()

        with self.assertRaises(RecordNotFoundError) as ctx:
            self.workflow.set_application_status(self.application.pk, 'Approved')

        self.assertEqual(ctx.exception.entity, 'property')
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, ApplicationStatus.PENDING)
        self.assertEqual(Lease.objects.count(), 0)

    def test_empty_status_rejected(self):
        for value in ['', '   ', None]:
            with self.assertRaises(InvalidStatusError):
                self.workflow.set_application_status(self.application.pk, value)
        self.assertUnchanged()

    def test_unknown_status_stored_when_permissive(self):
        result = self.workflow.set_application_status(self.application.pk, 'Archived')

        self.assertEqual(result['status'], 'Archived')
        self.assertUnchanged(status='Archived')

    @override_settings(LEASING={'STRICT_APPLICATION_STATUS': True, 'LEASE_TERM_MONTHS': 12})
    def test_unknown_status_rejected_when_strict(self):
        workflow = ApplicationWorkflow.from_settings(today=lambda: TODAY)

        with self.assertRaises(InvalidStatusError):
            workflow.set_application_status(self.application.pk, 'Archived')

        self.assertUnchanged()

    @override_settings(LEASING={'STRICT_APPLICATION_STATUS': True, 'LEASE_TERM_MONTHS': 6})
    def test_configured_lease_term(self):
        workflow = ApplicationWorkflow.from_settings(today=lambda: TODAY)

        workflow.set_application_status(self.application.pk, 'Approved')

        self.assertEqual(Lease.objects.get().end_date, date(2024, 7, 15))

    def test_dangling_applicant(self):
        Application.objects.filter(pk=self.application.pk).update(applicant_cognito_id='ghost')

        with self.assertRaises(DataIntegrityError):
            self.workflow.set_application_status(self.application.pk, 'Approved')

        self.assertUnchanged()

    def test_invalid_applicant_kind(self):
        Application.objects.filter(pk=self.application.pk).update(applicant_kind='landlord')

        with self.assertRaises(DataIntegrityError):
            self.workflow.set_application_status(self.application.pk, 'Approved')

        self.assertUnchanged()

    def test_missing_property_reference(self):
        Application.objects.filter(pk=self.application.pk).update(property_id=None)

        with self.assertRaises(DataIntegrityError):
            self.workflow.set_application_status(self.application.pk, 'Approved')

        self.assertUnchanged()

    def test_invalid_lease_terms(self):
        """Property terms that fail lease validation surface as integrity errors"""
        Property.objects.filter(pk=self.listing.pk).update(price_per_month=Decimal('-1.00'))

        with self.assertRaises(DataIntegrityError) as ctx:
            self.workflow.set_application_status(self.application.pk, 'Approved')

        self.assertEqual(ctx.exception.entity, 'lease')
        self.assertUnchanged()

    def test_store_failure_rolls_back(self):
        with patch.object(
            self.workflow.applications,
            'update_application',
            side_effect=DatabaseError('disk I/O error')
        ):
            with self.assertRaises(StoreError):
                self.workflow.set_application_status(self.application.pk, 'Approved')

        self.assertUnchanged()


# =============================================================================
# FORMATTER TESTS
# =============================================================================

class ApplicationFormatterTest(TestCase):
    """Test the denormalized application view"""

    def setUp(self):
        Landlord.objects.create(cognito_id='landlord-1', name='Pat Owner', email='pat@example.com')
        Tenant.objects.create(cognito_id='tenant-1', name='Alex Doe', email='alex@example.com')
        self.listing = create_listing()
        self.formatter = ApplicationFormatter(
            IdentityStore(), ListingStore(), LeaseStore(), today=lambda: TODAY
        )

    def test_pending_application(self):
        data = self.formatter.format(create_application(self.listing))

        self.assertEqual(data['status'], 'Pending')
        self.assertEqual(data['property']['id'], self.listing.pk)
        self.assertEqual(data['property']['location']['coordinates'], {
            'longitude': -118.144516,
            'latitude': 34.147785,
        })
        self.assertEqual(data['landlord']['cognito_id'], 'landlord-1')
        self.assertEqual(data['applicant']['name'], 'Alex Doe')
        self.assertIsNone(data['lease'])

    def test_unlinked_application_shows_latest_lease(self):
        lease = Lease.objects.create(
            start_date=date(2023, 12, 1), end_date=date(2024, 12, 1), rent=1, deposit=1,
            property=self.listing, applicant_kind='tenant', applicant_cognito_id='tenant-1'
        )

        data = self.formatter.format(create_application(self.listing), fallback_to_latest=True)

        self.assertEqual(data['lease']['id'], lease.pk)
        self.assertEqual(data['lease']['next_payment_date'], '2024-02-01')

    def test_unlinked_application_without_fallback(self):
        Lease.objects.create(
            start_date=date(2023, 12, 1), end_date=date(2024, 12, 1), rent=1, deposit=1,
            property=self.listing, applicant_kind='tenant', applicant_cognito_id='tenant-1'
        )

        data = self.formatter.format(create_application(self.listing))

        self.assertIsNone(data['lease'])

    def test_dangling_property(self):
        application = create_application(self.listing)
        Property.objects.filter(pk=self.listing.pk).delete()

        data = self.formatter.format(Application.objects.get(pk=application.pk))

        self.assertIsNone(data['property'])
        self.assertIsNone(data['landlord'])
        self.assertEqual(data['applicant']['cognito_id'], 'tenant-1')

    def test_format_many(self):
        create_application(self.listing)
        create_application(self.listing, name='Jordan Poe')

        self.assertEqual(len(self.formatter.format_many(Application.objects.all())), 2)
