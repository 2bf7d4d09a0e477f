# ===== LISTINGS APP TEST SUITE =====
"""
Test suite for the listings app
File: listings/tests.py

Test Coverage:
- Location and Property model behavior
- Property search, detail, creation and lease endpoints
- Admin point column
- seed_rentals management command
"""

import json
import tempfile
from datetime import date
from decimal import Decimal
from io import StringIO
from pathlib import Path

from django.contrib.admin.sites import AdminSite
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import ApplicantKind, Buyer, Landlord, Tenant
from leasing.models import Application, Lease, Payment

from .admin import LocationAdmin
from .models import Location, Property


def create_location(**overrides):
    fields = {
        'address': '1 Colorado Blvd',
        'city': 'Pasadena',
        'state': 'CA',
        'country': 'United States',
        'postal_code': '91101',
        'longitude': Decimal('-118.1445160'),
        'latitude': Decimal('34.1477850'),
    }
    fields.update(overrides)
    return Location.objects.create(**fields)


def create_property(location=None, **overrides):
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


# =============================================================================
# MODEL TESTS
# =============================================================================

class LocationModelTest(TestCase):
    """Test Location model functionality"""

    def test_full_address(self):
        location = create_location()
        self.assertEqual(
            location.get_full_address(),
            '1 Colorado Blvd, Pasadena, CA, 91101, United States'
        )

    def test_coordinates(self):
        location = create_location()

        self.assertTrue(location.has_coordinates)
        self.assertEqual(location.get_coordinates(), {
            'longitude': -118.144516,
            'latitude': 34.147785,
        })

    def test_missing_coordinates(self):
        location = create_location(longitude=None, latitude=None)

        self.assertFalse(location.has_coordinates)
        self.assertIsNone(location.get_coordinates())


class PropertyModelTest(TestCase):
    """Test Property model functionality"""

    def setUp(self):
        self.listing = create_property(location=create_location())

    def test_occupants_by_kind(self):
        tenant = Tenant.objects.create(cognito_id='tenant-1', name='Alex Doe', email='alex@example.com')
        self.listing.occupants(ApplicantKind.TENANT).add(tenant)

        self.assertEqual(list(self.listing.tenants.all()), [tenant])
        self.assertEqual(list(tenant.residences.all()), [self.listing])
        self.assertEqual(self.listing.occupants('buyer').count(), 0)

    def test_occupants_unknown_kind(self):
        with self.assertRaises(ValueError):
            self.listing.occupants('landlord')

    def test_clean_rejects_unknown_amenities(self):
        self.listing.amenities = ['Pool', 'Helipad']

        with self.assertRaises(ValidationError) as ctx:
            self.listing.clean()

        self.assertIn('amenities', ctx.exception.message_dict)


# =============================================================================
# PROPERTY API TESTS
# =============================================================================

class PropertyAPITest(APITestCase):
    """Test property search and detail endpoints"""

    def setUp(self):
        self.pasadena = create_property(location=create_location())
        self.austin = create_property(
            location=create_location(city='Austin', state='TX', postal_code='73301'),
            name='Garden Cottage',
            property_type='Cottage',
            price_per_month=Decimal('2400.00'),
            beds=3,
            amenities=['Pool', 'WasherDryer'],
        )

    def test_list(self):
        response = self.client.get('/api/v1/properties/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertEqual(response.data[0]['city'], 'Pasadena')
        self.assertEqual(response.data[0]['coordinates']['longitude'], -118.144516)

    def test_price_range(self):
        response = self.client.get('/api/v1/properties/', {'price_min': 2000})
        self.assertEqual([row['id'] for row in response.data], [self.austin.pk])

        response = self.client.get('/api/v1/properties/', {'price_max': 2000})
        self.assertEqual([row['id'] for row in response.data], [self.pasadena.pk])

    def test_beds_minimum_and_any(self):
        response = self.client.get('/api/v1/properties/', {'beds': '3'})
        self.assertEqual([row['id'] for row in response.data], [self.austin.pk])

        response = self.client.get('/api/v1/properties/', {'beds': 'any'})
        self.assertEqual(len(response.data), 2)

    def test_non_finite_minimum_ignored(self):
        for value in ['nan', 'inf', '-inf']:
            response = self.client.get('/api/v1/properties/', {'beds': value, 'baths': value})
            self.assertEqual(response.status_code, 200)
            self.assertEqual(len(response.data), 2)

    def test_amenities_must_all_match(self):
        response = self.client.get('/api/v1/properties/', {'amenities': 'Pool,WasherDryer'})
        self.assertEqual([row['id'] for row in response.data], [self.austin.pk])

        response = self.client.get('/api/v1/properties/', {'amenities': 'Pool'})
        self.assertEqual(len(response.data), 2)

    def test_property_type_and_city(self):
        response = self.client.get('/api/v1/properties/', {'property_type': 'Cottage'})
        self.assertEqual([row['id'] for row in response.data], [self.austin.pk])

        response = self.client.get('/api/v1/properties/', {'city': 'pasa'})
        self.assertEqual([row['id'] for row in response.data], [self.pasadena.pk])

    def test_favorite_ids(self):
        response = self.client.get('/api/v1/properties/', {'favorite_ids': f'{self.austin.pk}, x'})

        self.assertEqual([row['id'] for row in response.data], [self.austin.pk])

    def test_detail(self):
        response = self.client.get(f'/api/v1/properties/{self.pasadena.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['address'], '1 Colorado Blvd')
        self.assertEqual(response.data['location']['coordinates'], {
            'longitude': -118.144516,
            'latitude': 34.147785,
        })
        self.assertEqual(response.data['price_per_month'], '1500.00')

    def test_detail_without_location(self):
        listing = create_property(name='Bare Room', property_type='Rooms')

        response = self.client.get(f'/api/v1/properties/{listing.pk}/')

        self.assertIsNone(response.data['location'])
        self.assertIsNone(response.data['address'])

    def test_missing_property(self):
        response = self.client.get('/api/v1/properties/999999/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_property_leases(self):
        lease = Lease.objects.create(
            start_date=date(2024, 1, 15), end_date=date(2025, 1, 15),
            rent=Decimal('1500.00'), deposit=Decimal('3000.00'),
            property=self.pasadena, applicant_kind='tenant', applicant_cognito_id='tenant-1'
        )

        response = self.client.get(f'/api/v1/properties/{self.pasadena.pk}/leases/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [lease.pk])
        self.assertIn('next_payment_date', response.data[0])

        response = self.client.get(f'/api/v1/properties/{self.austin.pk}/leases/')
        self.assertEqual(response.data, [])


class PropertyCreateAPITest(APITestCase):
    """Test POST /properties/"""

    def setUp(self):
        Landlord.objects.create(cognito_id='landlord-1', name='Pat Owner', email='pat@example.com')
        self.payload = {
            'name': 'Harbor View',
            'description': 'Two bedrooms over the marina',
            'price_per_month': '1800.00',
            'security_deposit': '3600.00',
            'property_type': 'Apartment',
            'beds': 2,
            'baths': '2.0',
            'square_feet': 1100,
            'amenities': ['Pool', 'Gym'],
            'highlights': ['GreatView'],
            'photo_urls': ['https://cdn.example.com/harbor-1.jpg'],
            'is_pets_allowed': True,
            'landlord_cognito_id': 'landlord-1',
            'location': {
                'address': '9 Marina Way',
                'city': 'Long Beach',
                'state': 'CA',
                'country': 'United States',
                'postal_code': '90802',
                'longitude': '-118.1937400',
                'latitude': '33.7700500',
            },
        }

    def test_create_property_with_location(self):
        response = self.client.post('/api/v1/properties/', self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        listing = Property.objects.get()
        self.assertEqual(listing.name, 'Harbor View')
        self.assertEqual(listing.location.city, 'Long Beach')
        self.assertEqual(response.data['id'], listing.pk)
        self.assertEqual(response.data['location']['coordinates'], {
            'longitude': -118.19374,
            'latitude': 33.77005,
        })
        self.assertEqual(response.data['photo_urls'], ['https://cdn.example.com/harbor-1.jpg'])

    def test_create_without_coordinates(self):
        del self.payload['location']['longitude']
        del self.payload['location']['latitude']

        response = self.client.post('/api/v1/properties/', self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['location']['coordinates'])

    def test_half_coordinate_pair_rejected(self):
        del self.payload['location']['latitude']

        response = self.client.post('/api/v1/properties/', self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Location.objects.count(), 0)

    def test_unknown_landlord(self):
        self.payload['landlord_cognito_id'] = 'ghost'

        response = self.client.post('/api/v1/properties/', self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('landlord_cognito_id', response.data)
        self.assertEqual(Property.objects.count(), 0)

    def test_unknown_amenity(self):
        self.payload['amenities'] = ['Pool', 'Helipad']

        response = self.client.post('/api/v1/properties/', self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amenities', response.data)

    def test_missing_required_fields(self):
        for field in ['name', 'price_per_month', 'beds', 'location']:
            payload = dict(self.payload)
            del payload[field]

            response = self.client.post('/api/v1/properties/', payload, format='json')

            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertIn(field, response.data)
        self.assertEqual(Property.objects.count(), 0)


# =============================================================================
# ADMIN TESTS
# =============================================================================

class LocationAdminTest(TestCase):
    """Test the WKT point column"""

    def setUp(self):
        self.admin = LocationAdmin(Location, AdminSite())

    def test_point_column(self):
        self.assertEqual(self.admin.point(create_location()), 'POINT(-118.144516 34.147785)')

    def test_point_column_without_coordinates(self):
        self.assertEqual(self.admin.point(create_location(longitude=None, latitude=None)), '-')


# =============================================================================
# SEED COMMAND TESTS
# =============================================================================

SEED_DATA = {
    'locations.json': [
        {
            'id': 1, 'address': '1 Colorado Blvd', 'city': 'Pasadena', 'state': 'CA',
            'country': 'United States', 'postalCode': '91101',
            'coordinates': 'POINT(-118.144516 34.147785)',
        },
        {
            'id': 2, 'address': '9 Nowhere Rd', 'city': 'Austin', 'state': 'TX',
            'country': 'United States', 'postalCode': '73301',
            'coordinates': 'not a point',
        },
    ],
    'managers.json': [
        {'cognitoId': 'landlord-1', 'name': 'Pat Owner', 'email': 'pat@example.com', 'phoneNumber': '555-0199'},
    ],
    'tenants.json': [
        {
            'cognitoId': 'tenant-1', 'name': 'Alex Doe', 'email': 'alex@example.com',
            'favorites': {'connect': [{'id': 10}]},
            'properties': {'connect': [{'id': 10}]},
        },
    ],
    'properties.json': [
        {
            'id': 10, 'name': 'Sunny Loft', 'description': 'Top floor loft',
            'pricePerMonth': 1500, 'securityDeposit': 3000, 'applicationFee': 50,
            'photoUrls': ['https://example.com/1.jpg'], 'amenities': ['Pool'],
            'highlights': ['GreatView'], 'isPetsAllowed': True, 'isParkingIncluded': False,
            'beds': 2, 'baths': 1.5, 'squareFeet': 900, 'propertyType': 'Apartment',
            'postedDate': '2023-05-01T00:00:00.000Z', 'averageRating': 4.5,
            'numberOfReviews': 12, 'locationId': 1, 'managerCognitoId': 'landlord-1',
        },
        {
            'id': 11, 'name': 'Missing Fields',
        },
    ],
    'leases.json': [
        {
            'id': 100, 'startDate': '2024-01-15T00:00:00.000Z', 'endDate': '2025-01-15T00:00:00.000Z',
            'rent': 1500, 'deposit': 3000, 'propertyId': 10, 'tenantCognitoId': 'tenant-1',
        },
    ],
    'applications.json': [
        {
            'id': 1000, 'applicationDate': '2023-12-20T10:00:00.000Z', 'status': 'Approved',
            'propertyId': 10, 'tenantCognitoId': 'tenant-1', 'leaseId': 100,
            'name': 'Alex Doe', 'email': 'alex@example.com', 'phoneNumber': '555-0100',
        },
    ],
    'payments.json': [
        {
            'amountDue': 1500, 'amountPaid': 1500, 'dueDate': '2024-02-15T00:00:00.000Z',
            'paymentDate': '2024-02-10T00:00:00.000Z', 'paymentStatus': 'Paid', 'leaseId': 100,
        },
        {
            'amountDue': 1500, 'dueDate': '2024-03-15T00:00:00.000Z', 'leaseId': 999,
        },
    ],
}


class SeedRentalsCommandTest(TestCase):
    """Test loading legacy JSON exports"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        for file_name, records in SEED_DATA.items():
            Path(self.tmp.name, file_name).write_text(json.dumps(records), encoding='utf-8')

    def seed(self, *args):
        out = StringIO()
        call_command('seed_rentals', self.tmp.name, *args, stdout=out)
        return out.getvalue()

    def test_seed_loads_records(self):
        output = self.seed()

        self.assertIn('Seeding complete', output)
        self.assertIn('properties: 1 loaded, 1 failed', output)
        self.assertTrue(Landlord.objects.filter(cognito_id='landlord-1').exists())

        listing = Property.objects.get(pk=10)
        self.assertEqual(listing.landlord_cognito_id, 'landlord-1')
        self.assertEqual(listing.price_per_month, Decimal('1500'))
        self.assertEqual(listing.photo_urls, ['https://example.com/1.jpg'])
        self.assertEqual(listing.posted_date.date(), date(2023, 5, 1))

        application = Application.objects.get(pk=1000)
        self.assertEqual(application.lease_id, 100)
        self.assertEqual(application.applicant_kind, ApplicantKind.TENANT)
        self.assertEqual(Lease.objects.get(pk=100).start_date, date(2024, 1, 15))
        self.assertEqual(Payment.objects.count(), 1)

    def test_seed_parses_wkt_coordinates(self):
        self.seed()

        pasadena = Location.objects.get(pk=1)
        self.assertEqual(pasadena.get_coordinates(), {
            'longitude': -118.144516,
            'latitude': 34.147785,
        })
        self.assertFalse(Location.objects.get(pk=2).has_coordinates)

    def test_seed_links_favorites_and_residences(self):
        self.seed()

        tenant = Tenant.objects.get(cognito_id='tenant-1')
        self.assertEqual(list(tenant.favorites.values_list('pk', flat=True)), [10])
        self.assertEqual(list(tenant.residences.values_list('pk', flat=True)), [10])

    def test_seed_twice_is_stable(self):
        self.seed()
        self.seed()

        self.assertEqual(Property.objects.count(), 1)
        self.assertEqual(Lease.objects.count(), 1)
        self.assertEqual(Application.objects.count(), 1)

    def test_clear_removes_existing_records(self):
        Buyer.objects.create(cognito_id='buyer-old', name='Old Buyer', email='old@example.com')

        self.seed('--clear')

        self.assertFalse(Buyer.objects.exists())
        self.assertEqual(Tenant.objects.count(), 1)

    def test_missing_directory(self):
        with self.assertRaises(CommandError):
            call_command('seed_rentals', str(Path(self.tmp.name, 'absent')), stdout=StringIO())
