#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Leasehold Backend Management Script
===================================

Usage Examples:
===============

Development:
  python manage.py runserver                    # Start development server
  python manage.py migrate --run-syncdb         # Create tables (apps ship no migrations)
  python manage.py createsuperuser              # Create admin user

Data Management:
  python manage.py seed_rentals seedData/          # Load legacy JSON exports
  python manage.py seed_rentals seedData/ --clear  # Wipe, then load

Testing:
  python manage.py test                         # Run the Django test suite
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Set the default Django settings module
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'leasehold.settings')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        error_msg = (
            "Couldn't import Django. This usually means:\n"
            "  1. Django is not installed - run: pip install -e .\n"
            "  2. Virtual environment is not activated\n"
            "  3. PYTHONPATH is not set correctly\n\n"
            f"Current Python path: {sys.executable}\n"
            f"Current working directory: {os.getcwd()}\n"
            f"DJANGO_SETTINGS_MODULE: {os.environ.get('DJANGO_SETTINGS_MODULE', 'Not set')}\n"
        )
        raise ImportError(error_msg) from exc

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
