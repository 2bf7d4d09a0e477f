"""
Django application configuration for the services app.

The services app holds the leasing workflow, its store adapters and the
response formatter. It defines no models.
"""

from django.apps import AppConfig


class ServicesConfig(AppConfig):
    """Application configuration for the services app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'services'
    verbose_name = 'Services'
