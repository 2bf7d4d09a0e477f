# ===== LEASING APP TEST SUITE =====
"""
Test suite for the leasing app
File: leasing/tests.py

Test Coverage:
- Application and Lease model behavior
- Application submission, listing and retrieval endpoints
- Status endpoint: lease synthesis and structured errors
- Lease and payment read endpoints
"""

from datetime import date, timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings
from django.utils import timezone

from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import Buyer, Landlord, Tenant
from listings.models import Location, Property
from services.dates import next_payment_date

from .models import Application, Lease, Payment, PaymentStatus


class LeasingFixtureMixin:
    """Shared records: one landlord, one tenant, one buyer and one listing"""

    def create_fixtures(self):
        self.landlord = Landlord.objects.create(
            cognito_id='landlord-1', name='Pat Owner', email='pat@example.com'
        )
        self.tenant = Tenant.objects.create(
            cognito_id='tenant-1', name='Alex Doe', email='alex@example.com'
        )
        self.buyer = Buyer.objects.create(
            cognito_id='buyer-1', name='Sam Roe', email='sam@example.com'
        )
        self.location = Location.objects.create(
            address='1 Colorado Blvd',
            city='Pasadena',
            state='CA',
            country='United States',
            postal_code='91101',
            longitude=Decimal('-118.1445160'),
            latitude=Decimal('34.1477850'),
        )
        self.listing = Property.objects.create(
            name='Sunny Loft',
            description='Top floor loft near the park',
            price_per_month=Decimal('1500.00'),
            security_deposit=Decimal('3000.00'),
            property_type='Apartment',
            beds=2,
            baths=Decimal('1.5'),
            square_feet=900,
            location=self.location,
            landlord_cognito_id='landlord-1',
        )

    def create_application(self, cognito_id='tenant-1', kind='tenant', **overrides):
        fields = {
            'property': self.listing,
            'applicant_kind': kind,
            'applicant_cognito_id': cognito_id,
            'name': 'Alex Doe',
            'email': 'alex@example.com',
            'phone_number': '555-0100',
        }
        fields.update(overrides)
        return Application.objects.create(**fields)

    def create_lease(self, **overrides):
        fields = {
            'start_date': date(2024, 1, 15),
            'end_date': date(2025, 1, 15),
            'rent': Decimal('1500.00'),
            'deposit': Decimal('3000.00'),
            'property': self.listing,
            'applicant_kind': 'tenant',
            'applicant_cognito_id': 'tenant-1',
        }
        fields.update(overrides)
        return Lease.objects.create(**fields)


# =============================================================================
# MODEL TESTS
# =============================================================================

class LeasingModelTest(LeasingFixtureMixin, TestCase):
    """Test Application, Lease and Payment models"""

    def setUp(self):
        self.create_fixtures()

    def test_application_defaults(self):
        application = self.create_application()

        self.assertEqual(application.status, 'Pending')
        self.assertIsNone(application.lease)
        self.assertIsNotNone(application.application_date)
        self.assertEqual(str(application), f"Application #{application.pk} - Alex Doe (Pending)")

    def test_lease_end_must_follow_start(self):
        lease = Lease(
            start_date=date(2024, 1, 15),
            end_date=date(2024, 1, 15),
            rent=Decimal('1.00'),
            deposit=Decimal('1.00'),
            property=self.listing,
            applicant_kind='tenant',
            applicant_cognito_id='tenant-1',
        )
        with self.assertRaises(ValidationError):
            lease.full_clean()

    def test_lease_ids_increase(self):
        first = self.create_lease()
        second = self.create_lease(applicant_cognito_id='buyer-1', applicant_kind='buyer')

        self.assertGreater(second.pk, first.pk)

    def test_payment_balance(self):
        lease = self.create_lease()
        partial = Payment.objects.create(
            lease=lease, amount_due=Decimal('1500.00'), amount_paid=Decimal('500.00'),
            due_date=date(2024, 2, 15), payment_status=PaymentStatus.PARTIALLY_PAID
        )
        overpaid = Payment.objects.create(
            lease=lease, amount_due=Decimal('1500.00'), amount_paid=Decimal('1600.00'),
            due_date=date(2024, 3, 15), payment_status=PaymentStatus.PAID
        )

        self.assertEqual(partial.get_balance(), Decimal('1000.00'))
        self.assertEqual(overpaid.get_balance(), Decimal('0.00'))


# =============================================================================
# APPLICATION API TESTS
# =============================================================================

class ApplicationAPITest(LeasingFixtureMixin, APITestCase):
    """Test application submission, listing and retrieval"""

    def setUp(self):
        self.create_fixtures()

    def test_submit_application(self):
        response = self.client.post('/api/v1/applications/', {
            'property_id': self.listing.pk,
            'applicant_cognito_id': 'tenant-1',
            'name': '  Alex Doe ',
            'email': 'alex@example.com',
            'phone_number': '555-0100',
            'message': 'Looking to move in next month',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'Pending')
        self.assertEqual(response.data['name'], 'Alex Doe')
        self.assertEqual(response.data['applicant_kind'], 'tenant')
        self.assertIsNone(response.data['lease'])
        self.assertEqual(response.data['property']['id'], self.listing.pk)
        self.assertEqual(Lease.objects.count(), 0)

    def test_submit_ignores_client_status(self):
        response = self.client.post('/api/v1/applications/', {
            'property_id': self.listing.pk,
            'applicant_kind': 'buyer',
            'applicant_cognito_id': 'buyer-1',
            'name': 'Sam Roe',
            'email': 'sam@example.com',
            'phone_number': '555-0101',
            'status': 'Approved',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Application.objects.get().status, 'Pending')

    def test_submit_unknown_property(self):
        response = self.client.post('/api/v1/applications/', {
            'property_id': 999999,
            'applicant_cognito_id': 'tenant-1',
            'name': 'Alex Doe',
            'email': 'alex@example.com',
            'phone_number': '555-0100',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('property_id', response.data)

    def test_submit_unknown_applicant(self):
        response = self.client.post('/api/v1/applications/', {
            'property_id': self.listing.pk,
            'applicant_kind': 'buyer',
            'applicant_cognito_id': 'tenant-1',
            'name': 'Alex Doe',
            'email': 'alex@example.com',
            'phone_number': '555-0100',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('applicant_cognito_id', response.data)
        self.assertEqual(Application.objects.count(), 0)

    def test_list_scoped_to_user(self):
        mine = self.create_application()
        self.create_application(cognito_id='buyer-1', kind='buyer', name='Sam Roe')

        response = self.client.get('/api/v1/applications/', {
            'user_id': 'tenant-1', 'user_type': 'tenant'
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [mine.pk])
        self.assertEqual(response.data[0]['applicant']['cognito_id'], 'tenant-1')
        self.assertEqual(response.data[0]['landlord']['cognito_id'], 'landlord-1')

    def test_list_shows_latest_lease_for_unlinked_application(self):
        lease = self.create_lease()
        self.create_application()

        response = self.client.get('/api/v1/applications/', {
            'user_id': 'tenant-1', 'user_type': 'tenant'
        })

        self.assertIsNone(response.data[0]['lease_id'])
        self.assertEqual(response.data[0]['lease']['id'], lease.pk)

    def test_list_for_landlord(self):
        self.create_application()
        self.create_application(cognito_id='buyer-1', kind='buyer')

        response = self.client.get('/api/v1/applications/', {
            'user_id': 'landlord-1', 'user_type': 'landlord'
        })

        self.assertEqual(len(response.data), 2)

    def test_list_rejects_bad_query(self):
        response = self.client.get('/api/v1/applications/', {'user_id': 'tenant-1'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get('/api/v1/applications/', {
            'user_id': 'tenant-1', 'user_type': 'manager'
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'invalid_query')

    def test_retrieve(self):
        application = self.create_application()

        response = self.client.get(f'/api/v1/applications/{application.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], application.pk)
        self.assertEqual(response.data['property']['location']['city'], 'Pasadena')

    def test_retrieve_missing(self):
        response = self.client.get('/api/v1/applications/999999/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'not_found')
        self.assertEqual(response.data['entity'], 'application')


# =============================================================================
# STATUS ENDPOINT TESTS
# =============================================================================

class ApplicationStatusAPITest(LeasingFixtureMixin, APITestCase):
    """Test PUT/PATCH /applications/{id}/status/"""

    def setUp(self):
        self.create_fixtures()
        self.application = self.create_application()
        self.url = f'/api/v1/applications/{self.application.pk}/status/'

    def test_approve_creates_lease(self):
        response = self.client.put(self.url, {'status': 'Approved'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        lease = Lease.objects.get()
        today = timezone.localdate()
        self.assertEqual(lease.start_date, today)
        self.assertEqual(lease.rent, Decimal('1500.00'))
        self.assertEqual(lease.deposit, Decimal('3000.00'))
        self.assertEqual(response.data['status'], 'Approved')
        self.assertEqual(response.data['lease']['id'], lease.pk)
        self.assertEqual(response.data['lease']['start_date'], today.isoformat())
        self.assertIn(self.tenant, self.listing.tenants.all())

    def test_patch_twice_creates_one_lease(self):
        self.client.patch(self.url, {'status': 'Approved'}, format='json')
        response = self.client.patch(self.url, {'status': 'Approved'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Lease.objects.count(), 1)

    def test_deny(self):
        response = self.client.put(self.url, {'status': 'Denied'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['lease'])
        self.assertEqual(Lease.objects.count(), 0)

    def test_missing_status(self):
        response = self.client.put(self.url, {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'invalid_status')

    def test_blank_status(self):
        response = self.client.put(self.url, {'status': '  '}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, 'Pending')

    def test_overlong_status(self):
        response = self.client.put(self.url, {'status': 'x' * 33}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'invalid_status')
        self.assertIn('32', response.data['message'])
        self.assertNotEqual(response.data['message'], 'Status is required.')

    def test_padded_approval_creates_no_lease(self):
        response = self.client.put(self.url, {'status': ' Approved '}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], ' Approved ')
        self.assertEqual(Lease.objects.count(), 0)

    def test_denied_reapplication_reports_no_lease(self):
        self.client.put(self.url, {'status': 'Approved'}, format='json')
        second = self.create_application()

        response = self.client.put(
            f'/api/v1/applications/{second.pk}/status/', {'status': 'Denied'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['lease_id'])
        self.assertIsNone(response.data['lease'])

    @override_settings(LEASING={'STRICT_APPLICATION_STATUS': True, 'LEASE_TERM_MONTHS': 12})
    def test_strict_policy_rejects_unknown_status(self):
        response = self.client.put(self.url, {'status': 'Archived'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'invalid_status')

    def test_missing_application(self):
        response = self.client.put('/api/v1/applications/999999/status/', {'status': 'Approved'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['entity'], 'application')

    def test_deleted_property(self):
        Property.objects.filter(pk=self.listing.pk).delete()

        response = self.client.put(self.url, {'status': 'Approved'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'not_found')
        self.assertEqual(response.data['entity'], 'property')
        self.assertEqual(Lease.objects.count(), 0)

    def test_dangling_applicant(self):
        Tenant.objects.filter(cognito_id='tenant-1').delete()

        response = self.client.put(self.url, {'status': 'Approved'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'data_integrity_error')
        self.assertEqual(Lease.objects.count(), 0)


# =============================================================================
# LEASE API TESTS
# =============================================================================

class LeaseAPITest(LeasingFixtureMixin, APITestCase):
    """Test lease and payment read endpoints"""

    def setUp(self):
        self.create_fixtures()
        self.lease = self.create_lease(start_date=timezone.localdate() - timedelta(days=400))
        Payment.objects.create(
            lease=self.lease, amount_due=Decimal('1500.00'), amount_paid=Decimal('1500.00'),
            due_date=date(2024, 2, 15), payment_status=PaymentStatus.PAID
        )

    def test_list(self):
        response = self.client.get('/api/v1/leases/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        expected = next_payment_date(self.lease.start_date, today=timezone.localdate())
        self.assertEqual(response.data[0]['next_payment_date'], expected.isoformat())
        self.assertGreater(expected, timezone.localdate())

    def test_filter_by_applicant(self):
        response = self.client.get('/api/v1/leases/', {'applicant_cognito_id': 'buyer-1'})

        self.assertEqual(response.data, [])

    def test_detail(self):
        response = self.client.get(f'/api/v1/leases/{self.lease.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['property']['name'], 'Sunny Loft')
        self.assertEqual(response.data['applicant']['cognito_id'], 'tenant-1')

    def test_payments(self):
        response = self.client.get(f'/api/v1/leases/{self.lease.pk}/payments/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['balance'], '0.00')

    def test_missing_lease(self):
        response = self.client.get('/api/v1/leases/999999/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
