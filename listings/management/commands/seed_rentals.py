"""
Seed the database from legacy JSON exports.

Each file holds a JSON array of records with camelCase keys, as exported
from the document store the marketplace used to run on. Records keep their
numeric ids so cross references (propertyId, leaseId, ...) resolve.

Usage:
    # As management command:
    python manage.py seed_rentals path/to/seedData
    python manage.py seed_rentals path/to/seedData --clear

    # As callable function:
    from listings.management.commands.seed_rentals import run_seed
    stats = run_seed('path/to/seedData', clear_data=True)

Files (all optional, loaded in this order):
    locations.json, landlords.json (or managers.json), tenants.json,
    buyers.json, properties.json, leases.json, applications.json,
    payments.json
"""

import json
import logging
from datetime import timezone as dt_timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path

from dateutil.parser import isoparse
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.core.management.color import no_style
from django.db import IntegrityError, connection, transaction
from django.utils import timezone

from accounts.models import ApplicantKind, Buyer, Landlord, Tenant
from leasing.models import Application, Lease, Payment
from listings.models import Location, Property
from services.geo import parse_wkt_point

logger = logging.getLogger(__name__)

SEEDED_MODELS = [Location, Landlord, Tenant, Buyer, Property, Lease, Application, Payment]

# Record-level failures: logged and counted, the rest of the file still loads.
RECORD_ERRORS = (KeyError, TypeError, ValueError, InvalidOperation, ValidationError, IntegrityError)


# =============================================================================
# FIELD CONVERSION
# =============================================================================

def _decimal(value, default=None):
    if value is None or value == '':
        return default
    return Decimal(str(value))


def _datetime(value):
    if not value:
        return None
    parsed = isoparse(value)
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def _date(value):
    parsed = _datetime(value)
    return parsed.date() if parsed else None


def _connected_ids(value):
    """
    Ids from a relation field, accepting the export's shapes:
    {"connect": [{"id": 1}, ...]}, {"connect": {"id": 1}}, [1, 2] or [{"id": 1}].
    """
    if not value:
        return []
    if isinstance(value, dict):
        value = value.get('connect', [])
    if isinstance(value, dict):
        value = [value]
    ids = []
    for item in value:
        ids.append(int(item['id'] if isinstance(item, dict) else item))
    return ids


def _coordinates(record):
    """(longitude, latitude) from a WKT string or a GeoJSON point, else None."""
    raw = record.get('coordinates') or record.get('coordinatesWKT')
    if isinstance(raw, dict):
        pair = raw.get('coordinates') or []
        if len(pair) == 2:
            return float(pair[0]), float(pair[1])
        return None
    return parse_wkt_point(raw)


def _applicant_ref(record):
    """
    (ApplicantKind, cognito id) for an application or lease record.

    Exports tag the applicant either with an explicit kind or through
    the key holding the id.
    """
    if record.get('applicantKind'):
        return ApplicantKind(record['applicantKind']), record.get('applicantCognitoId', '')
    if record.get('buyerCognitoId'):
        return ApplicantKind.BUYER, record['buyerCognitoId']
    return ApplicantKind.TENANT, record.get('tenantCognitoId', '')


# =============================================================================
# RECORD LOADERS
# =============================================================================

def _load_location(record):
    coordinates = _coordinates(record)
    longitude, latitude = coordinates if coordinates else (None, None)
    Location.objects.update_or_create(
        pk=record['id'],
        defaults={
            'address': record.get('address', ''),
            'city': record.get('city', ''),
            'state': record.get('state', ''),
            'country': record.get('country', ''),
            'postal_code': record.get('postalCode', ''),
            'longitude': _decimal(longitude),
            'latitude': _decimal(latitude),
        }
    )


def _profile_defaults(record):
    return {
        'name': record.get('name', ''),
        'email': record.get('email', ''),
        'phone_number': record.get('phoneNumber') or '',
    }


def _load_landlord(record):
    Landlord.objects.update_or_create(
        cognito_id=record['cognitoId'], defaults=_profile_defaults(record)
    )


def _applicant_loader(model):
    def load(record):
        model.objects.update_or_create(
            cognito_id=record['cognitoId'], defaults=_profile_defaults(record)
        )
    return load


def _load_property(record):
    location_id = record.get('locationId')
    if location_id is not None and not Location.objects.filter(pk=location_id).exists():
        logger.warning(f"Property {record['id']}: location {location_id} not found")
        location_id = None

    defaults = {
        'name': record['name'],
        'description': record.get('description', ''),
        'price_per_month': _decimal(record['pricePerMonth']),
        'security_deposit': _decimal(record['securityDeposit']),
        'application_fee': _decimal(record.get('applicationFee'), Decimal('0')),
        'property_type': record['propertyType'],
        'beds': int(record['beds']),
        'baths': _decimal(record['baths']),
        'square_feet': int(record['squareFeet']),
        'amenities': list(record.get('amenities') or []),
        'highlights': list(record.get('highlights') or []),
        'photo_urls': list(record.get('photoUrls') or []),
        'is_pets_allowed': bool(record.get('isPetsAllowed', False)),
        'is_parking_included': bool(record.get('isParkingIncluded', False)),
        'average_rating': _decimal(record.get('averageRating'), Decimal('0')),
        'number_of_reviews': int(record.get('numberOfReviews') or 0),
        'location_id': location_id,
        'landlord_cognito_id': record.get('landlordCognitoId') or record.get('managerCognitoId') or '',
    }
    listing, _ = Property.objects.update_or_create(pk=record['id'], defaults=defaults)

    posted = _datetime(record.get('postedDate'))
    if posted:
        Property.objects.filter(pk=listing.pk).update(posted_date=posted)


def _link_applicant_properties(model, record):
    """Favorites and residences, resolved once properties exist."""
    applicant = model.objects.get(cognito_id=record['cognitoId'])

    favorite_ids = _connected_ids(record.get('favorites'))
    if favorite_ids:
        applicant.favorites.add(*Property.objects.filter(pk__in=favorite_ids))

    residence_ids = _connected_ids(record.get('properties'))
    if residence_ids:
        applicant.residences.add(*Property.objects.filter(pk__in=residence_ids))


def _load_lease(record):
    kind, cognito_id = _applicant_ref(record)
    lease = Lease(
        pk=record['id'],
        start_date=_date(record['startDate']),
        end_date=_date(record['endDate']),
        rent=_decimal(record['rent']),
        deposit=_decimal(record['deposit']),
        property_id=record.get('propertyId'),
        applicant_kind=kind,
        applicant_cognito_id=cognito_id,
    )
    # Legacy leases may point at properties that no longer exist.
    lease.full_clean(exclude=['property'], validate_unique=False)
    lease.save()


def _load_application(record):
    kind, cognito_id = _applicant_ref(record)

    lease_id = record.get('leaseId')
    if lease_id is not None and not Lease.objects.filter(pk=lease_id).exists():
        logger.warning(f"Application {record['id']}: lease {lease_id} not found")
        lease_id = None

    Application.objects.update_or_create(
        pk=record['id'],
        defaults={
            'application_date': _datetime(record.get('applicationDate')) or timezone.now(),
            'status': record.get('status') or 'Pending',
            'property_id': record.get('propertyId'),
            'applicant_kind': kind,
            'applicant_cognito_id': cognito_id,
            'lease_id': lease_id,
            'name': record.get('name', ''),
            'email': record.get('email', ''),
            'phone_number': record.get('phoneNumber') or '',
            'message': record.get('message') or '',
        }
    )


def _load_payment(record):
    lease_id = record.get('leaseId')
    if not Lease.objects.filter(pk=lease_id).exists():
        raise ValueError(f"lease {lease_id} not found")

    values = {
        'lease_id': lease_id,
        'amount_due': _decimal(record['amountDue']),
        'amount_paid': _decimal(record.get('amountPaid'), Decimal('0')),
        'due_date': _date(record['dueDate']),
        'payment_date': _date(record.get('paymentDate')),
        'payment_status': record.get('paymentStatus') or 'Pending',
    }
    if record.get('id') is not None:
        Payment.objects.update_or_create(pk=record['id'], defaults=values)
    else:
        Payment.objects.create(**values)


# (stats key, file names tried in order, loader)
SEED_STEPS = [
    ('locations', ['locations.json'], _load_location),
    ('landlords', ['landlords.json', 'managers.json'], _load_landlord),
    ('tenants', ['tenants.json'], _applicant_loader(Tenant)),
    ('buyers', ['buyers.json'], _applicant_loader(Buyer)),
    ('properties', ['properties.json'], _load_property),
    ('leases', ['leases.json'], _load_lease),
    ('applications', ['applications.json'], _load_application),
    ('payments', ['payments.json'], _load_payment),
]


# =============================================================================
# SEED RUNNER
# =============================================================================

def _read_records(directory, file_names):
    for file_name in file_names:
        path = directory / file_name
        if path.exists():
            with open(path, 'r', encoding='utf-8') as f:
                records = json.load(f)
            if not isinstance(records, list):
                raise CommandError(f"{path} must contain a JSON array")
            return path, records
    return None, []


def clear_seeded_data():
    """Delete every seeded table, dependents first."""
    counts = {}
    for model in reversed(SEEDED_MODELS):
        counts[model._meta.db_table] = model.objects.count()
        model.objects.all().delete()
    return counts


def run_seed(directory, clear_data=False) -> dict:
    """
    Load every seed file found in ``directory``.

    Returns:
        dict with per-file counts: {'locations': {'loaded': n, 'failed': m}, ...}
        plus 'errors': list[str]

    Raises:
        CommandError: if the directory is missing or a file is not a JSON array
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise CommandError(f"Seed directory not found: {directory}")

    stats = {'errors': []}

    with transaction.atomic():
        if clear_data:
            cleared = clear_seeded_data()
            logger.info(f"Cleared seeded tables: {cleared}")

        applicant_records = {}
        for key, file_names, loader in SEED_STEPS:
            path, records = _read_records(directory, file_names)
            stats[key] = {'loaded': 0, 'failed': 0}
            if key in ('tenants', 'buyers'):
                applicant_records[key] = records
            if path is None:
                logger.info(f"No {key} file in {directory}, skipping")
            for index, record in enumerate(records):
                try:
                    with transaction.atomic():
                        loader(record)
                    stats[key]['loaded'] += 1
                except RECORD_ERRORS as e:
                    stats[key]['failed'] += 1
                    stats['errors'].append(f"{path.name}[{index}]: {e}")
                    logger.warning(f"Skipping {path.name}[{index}]: {e}")

            # Favorites and residences point at properties.
            if key == 'properties':
                _link_all(applicant_records, stats)

        _reset_sequences()

    return stats


def _link_all(applicant_records, stats):
    for key, model in (('tenants', Tenant), ('buyers', Buyer)):
        for record in applicant_records.get(key, []):
            try:
                with transaction.atomic():
                    _link_applicant_properties(model, record)
            except (RECORD_ERRORS + (model.DoesNotExist,)) as e:
                stats['errors'].append(f"{key} relations for {record.get('cognitoId')}: {e}")


def _reset_sequences():
    """Move auto-increment counters past the explicit ids just inserted."""
    statements = connection.ops.sequence_reset_sql(no_style(), SEEDED_MODELS)
    if statements:
        with connection.cursor() as cursor:
            for sql in statements:
                cursor.execute(sql)


# =============================================================================
# MANAGEMENT COMMAND
# =============================================================================

class Command(BaseCommand):
    help = 'Load legacy JSON exports (locations, properties, leases, applications, ...)'

    def add_arguments(self, parser):
        parser.add_argument('directory', type=str, help='Directory holding the JSON files')
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete existing seeded data before loading'
        )

    def handle(self, *args, **options):
        stats = run_seed(options['directory'], clear_data=options['clear'])

        for key, _, _ in SEED_STEPS:
            counts = stats[key]
            line = f"{key}: {counts['loaded']} loaded"
            if counts['failed']:
                line += f", {counts['failed']} failed"
            self.stdout.write(line)

        for error in stats['errors'][:10]:
            self.stdout.write(self.style.WARNING(f"  {error}"))
        if len(stats['errors']) > 10:
            self.stdout.write(self.style.WARNING(f"  ... and {len(stats['errors']) - 10} more"))

        self.stdout.write(self.style.SUCCESS("Seeding complete"))
