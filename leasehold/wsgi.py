"""
WSGI config for leasehold project.

This module contains the WSGI application used by Django's development server
and any production WSGI deployments. It exposes a module-level variable
named ``application``.

Production entry point:
    gunicorn leasehold.wsgi:application
"""

import json
import logging
import os

from django.core.wsgi import get_wsgi_application

# Set the default settings module for the 'leasehold' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'leasehold.settings')

# Initialize Django application early to avoid AppRegistryNotReady errors
django_application = get_wsgi_application()

logger = logging.getLogger(__name__)


def application(environ, start_response):
    """
    Production WSGI application with a fast health path.

    ``/wsgi-health/`` answers without touching Django so load balancers can
    check the process cheaply. Everything else is delegated to Django; an
    error escaping Django is logged and rendered as a JSON 500.
    """
    if environ.get('PATH_INFO') == '/wsgi-health/':
        start_response('200 OK', [
            ('Content-Type', 'application/json'),
            ('Cache-Control', 'no-cache'),
        ])
        return [b'{"status": "healthy", "service": "leasehold-wsgi"}']

    try:
        return django_application(environ, start_response)
    except Exception:
        logger.exception("WSGI application error")
        start_response('500 Internal Server Error', [
            ('Content-Type', 'application/json'),
            ('Cache-Control', 'no-cache'),
        ])
        body = {
            "error": "Internal server error",
            "message": "The server encountered an unexpected condition",
            "service": "leasehold-wsgi",
        }
        return [json.dumps(body).encode('utf-8')]
