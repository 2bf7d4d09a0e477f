"""
ASGI config for leasehold project.

It exposes the ASGI callable as a module-level variable named ``application``
for servers such as Uvicorn, Hypercorn or Daphne.
"""

import os

from django.core.asgi import get_asgi_application

# Set the default settings module for the 'leasehold' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'leasehold.settings')

application = get_asgi_application()
