"""
Listings App Configuration - Leasehold Backend
"""

from django.apps import AppConfig


class ListingsConfig(AppConfig):
    """
    Configuration for the Listings app.

    This app manages:
    - Properties with pricing and deposit terms
    - Locations with structured coordinates
    - Occupant lists filled in by the leasing workflow
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'listings'
    verbose_name = 'Properties & Locations'
