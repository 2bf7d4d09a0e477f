"""
Django application configuration for the accounts app.
"""

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """
    Configuration for the Accounts app.

    This app manages:
    - Tenant and Buyer applicant profiles
    - Landlord profiles
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'accounts'
    verbose_name = 'Tenants, Buyers & Landlords'
