"""
Leasing app for the Leasehold platform.

This app handles the application-to-lease workflow: tenants and buyers
apply for properties, landlords approve or deny, and the first approval
produces a lease with its payment schedule.
"""
