"""
Listings app for the Leasehold platform.

This app manages rentable properties and their locations, the property
read endpoints, and the import of legacy listing exports.
"""
