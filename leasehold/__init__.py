"""
Leasehold project package.

Django project configuration for the rental and sales marketplace backend:
settings, root URL routing, and the WSGI/ASGI entry points.
"""
