"""
Leasing App Configuration - Leasehold Backend
"""

from django.apps import AppConfig


class LeasingConfig(AppConfig):
    """
    Configuration for the Leasing app.

    This app manages:
    - Applications submitted by tenants and buyers
    - Leases synthesized when an application is approved
    - Rent payments recorded against leases
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'leasing'
    verbose_name = 'Applications & Leases'
