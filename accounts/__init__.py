"""
Accounts app for the Leasehold platform.

Holds the identity records the marketplace works with: tenants and buyers
(the two applicant kinds) and landlords who list properties. Records are
keyed by the external identity provider id (``cognito_id``).
"""
