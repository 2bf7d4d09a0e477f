# ===== ACCOUNTS APP TEST SUITE =====
"""
Test suite for the accounts app
File: accounts/tests.py

Test Coverage:
- ApplicantKind resolution to identity models
- Profile models and serializers
- Profile, favorites, current-residence and landlord listing endpoints
"""

from datetime import timedelta
from decimal import Decimal

from django.db import IntegrityError
from django.test import TestCase
from django.utils import timezone

from rest_framework import status
from rest_framework.test import APITestCase

from leasing.models import Lease
from listings.models import Location, Property

from .models import APPLICANT_MODELS, ApplicantKind, Buyer, Landlord, Tenant, applicant_model_for
from .serializers import APPLICANT_SERIALIZERS, LandlordSerializer, serialize_applicant


class ApplicantKindTest(TestCase):
    """Every applicant kind resolves to exactly one identity model"""

    def test_every_kind_has_a_model_and_serializer(self):
        for kind in ApplicantKind:
            self.assertIn(kind, APPLICANT_MODELS)
            self.assertIn(kind, APPLICANT_SERIALIZERS)
            self.assertEqual(applicant_model_for(kind).kind, kind)

    def test_resolve_by_string(self):
        self.assertIs(applicant_model_for('tenant'), Tenant)
        self.assertIs(applicant_model_for('buyer'), Buyer)

    def test_unknown_kind(self):
        for value in ['landlord', '', None]:
            with self.assertRaises(ValueError):
                applicant_model_for(value)


class ProfileModelTest(TestCase):
    """Test identity records"""

    def test_cognito_id_is_unique(self):
        Tenant.objects.create(cognito_id='tenant-1', name='Alex Doe', email='alex@example.com')

        with self.assertRaises(IntegrityError):
            Tenant.objects.create(cognito_id='tenant-1', name='Other', email='other@example.com')

    def test_same_id_allowed_across_kinds(self):
        Tenant.objects.create(cognito_id='user-1', name='Alex Doe', email='alex@example.com')
        Buyer.objects.create(cognito_id='user-1', name='Alex Doe', email='alex@example.com')

        self.assertEqual(Tenant.objects.count() + Buyer.objects.count(), 2)

    def test_string_representation(self):
        landlord = Landlord.objects.create(cognito_id='landlord-1', name='Pat Owner', email='pat@example.com')
        self.assertEqual(str(landlord), 'Pat Owner (landlord-1)')


class ProfileSerializerTest(TestCase):
    """Test applicant and landlord serialization"""

    def test_serialize_applicant_uses_kind_serializer(self):
        buyer = Buyer.objects.create(
            cognito_id='buyer-1', name='Sam Roe', email='sam@example.com', phone_number='555-0101'
        )

        self.assertEqual(serialize_applicant(buyer), {
            'cognito_id': 'buyer-1',
            'name': 'Sam Roe',
            'email': 'sam@example.com',
            'phone_number': '555-0101',
        })

    def test_serialize_missing_applicant(self):
        self.assertIsNone(serialize_applicant(None))

    def test_landlord_serializer(self):
        landlord = Landlord.objects.create(cognito_id='landlord-1', name='Pat Owner', email='pat@example.com')

        self.assertEqual(LandlordSerializer(landlord).data['phone_number'], '')


# =============================================================================
# PROFILE API TESTS
# =============================================================================

def create_listing(name='Sunny Loft', landlord_cognito_id='landlord-1'):
    location = Location.objects.create(
        address='1 Colorado Blvd',
        city='Pasadena',
        state='CA',
        country='United States',
        postal_code='91101',
        longitude=Decimal('-118.1445160'),
        latitude=Decimal('34.1477850'),
    )
    return Property.objects.create(
        name=name,
        description='Top floor loft near the park',
        price_per_month=Decimal('1500.00'),
        security_deposit=Decimal('3000.00'),
        property_type='Apartment',
        beds=2,
        baths=Decimal('1.5'),
        square_feet=900,
        location=location,
        landlord_cognito_id=landlord_cognito_id,
    )


class ProfileAPITest(APITestCase):
    """Test create, retrieve and update of identity records"""

    def test_create_tenant(self):
        response = self.client.post('/api/v1/tenants/', {
            'cognito_id': 'tenant-1',
            'name': 'Alex Doe',
            'email': 'alex@example.com',
            'phone_number': '555-0100',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['cognito_id'], 'tenant-1')
        self.assertEqual(response.data['favorites'], [])
        self.assertEqual(response.data['residences'], [])
        self.assertTrue(Tenant.objects.filter(cognito_id='tenant-1').exists())

    def test_create_duplicate_conflicts(self):
        Buyer.objects.create(cognito_id='buyer-1', name='Sam Roe', email='sam@example.com')

        response = self.client.post('/api/v1/buyers/', {
            'cognito_id': 'buyer-1', 'name': 'Sam Roe', 'email': 'sam@example.com'
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'conflict')

    def test_create_missing_fields(self):
        response = self.client.post('/api/v1/landlords/', {'cognito_id': 'landlord-1'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)
        self.assertIn('email', response.data)

    def test_retrieve_landlord(self):
        Landlord.objects.create(cognito_id='landlord-1', name='Pat Owner', email='pat@example.com')

        response = self.client.get('/api/v1/landlords/landlord-1/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Pat Owner')

    def test_retrieve_missing(self):
        response = self.client.get('/api/v1/tenants/nobody/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_keeps_cognito_id(self):
        Tenant.objects.create(cognito_id='tenant-1', name='Alex Doe', email='alex@example.com')

        response = self.client.put('/api/v1/tenants/tenant-1/', {
            'cognito_id': 'someone-else', 'name': 'Alex Q. Doe'
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        tenant = Tenant.objects.get()
        self.assertEqual(tenant.cognito_id, 'tenant-1')
        self.assertEqual(tenant.name, 'Alex Q. Doe')
        self.assertEqual(tenant.email, 'alex@example.com')

    def test_update_without_fields(self):
        Landlord.objects.create(cognito_id='landlord-1', name='Pat Owner', email='pat@example.com')

        response = self.client.patch('/api/v1/landlords/landlord-1/', {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'invalid_update')


class FavoritesAPITest(APITestCase):
    """Test adding and removing favorite listings"""

    def setUp(self):
        self.tenant = Tenant.objects.create(cognito_id='tenant-1', name='Alex Doe', email='alex@example.com')
        self.listing = create_listing()
        self.url = f'/api/v1/tenants/tenant-1/favorites/{self.listing.pk}/'

    def test_add_favorite(self):
        response = self.client.post(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data['favorites']], [self.listing.pk])
        self.assertEqual(response.data['favorites'][0]['city'], 'Pasadena')

    def test_add_twice_keeps_one(self):
        self.client.post(self.url)
        self.client.post(self.url)

        self.assertEqual(self.tenant.favorites.count(), 1)

    def test_remove_favorite(self):
        self.tenant.favorites.add(self.listing)

        response = self.client.delete(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['favorites'], [])
        self.assertEqual(self.tenant.favorites.count(), 0)

    def test_unknown_property(self):
        response = self.client.post('/api/v1/tenants/tenant-1/favorites/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unknown_applicant(self):
        response = self.client.post(f'/api/v1/buyers/tenant-1/favorites/{self.listing.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ResidencesAPITest(APITestCase):
    """Test current residences and the profile residence list"""

    def setUp(self):
        self.buyer = Buyer.objects.create(cognito_id='buyer-1', name='Sam Roe', email='sam@example.com')
        self.current = create_listing(name='Current Home')
        self.former = create_listing(name='Former Home')
        today = timezone.localdate()
        self.create_lease(self.current, today - timedelta(days=30), today + timedelta(days=335))
        self.create_lease(self.former, today - timedelta(days=400), today - timedelta(days=35))

    def create_lease(self, listing, start, end):
        return Lease.objects.create(
            start_date=start, end_date=end, rent=listing.price_per_month,
            deposit=listing.security_deposit, property=listing,
            applicant_kind='buyer', applicant_cognito_id='buyer-1'
        )

    def test_current_residences(self):
        response = self.client.get('/api/v1/buyers/buyer-1/current-residences/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [self.current.pk])
        self.assertEqual(response.data[0]['location']['city'], 'Pasadena')

    def test_other_kind_has_no_residences(self):
        Tenant.objects.create(cognito_id='buyer-1', name='Sam Roe', email='sam@example.com')

        response = self.client.get('/api/v1/tenants/buyer-1/current-residences/')

        self.assertEqual(response.data, [])

    def test_profile_lists_residences(self):
        self.current.buyers.add(self.buyer)

        response = self.client.get('/api/v1/buyers/buyer-1/')

        self.assertEqual(response.data['residences'], [self.current.pk])


class LandlordPropertiesAPITest(APITestCase):
    """Test GET /landlords/{cognito_id}/properties/"""

    def test_lists_owned_properties(self):
        Landlord.objects.create(cognito_id='landlord-1', name='Pat Owner', email='pat@example.com')
        mine = create_listing()
        create_listing(name='Elsewhere', landlord_cognito_id='landlord-2')

        response = self.client.get('/api/v1/landlords/landlord-1/properties/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [mine.pk])

    def test_unknown_landlord(self):
        response = self.client.get('/api/v1/landlords/ghost/properties/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
