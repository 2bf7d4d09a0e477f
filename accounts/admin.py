"""
Accounts Admin - Leasehold Backend
Django admin configuration for tenants, buyers and landlords.
"""

from django.contrib import admin

from .models import Buyer, Landlord, Tenant


class ProfileAdmin(admin.ModelAdmin):
    """Shared admin layout for identity records."""

    list_display = ['name', 'email', 'phone_number', 'cognito_id', 'created_at']
    search_fields = ['name', 'email', 'cognito_id']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Tenant)
class TenantAdmin(ProfileAdmin):
    filter_horizontal = ['favorites']


@admin.register(Buyer)
class BuyerAdmin(ProfileAdmin):
    filter_horizontal = ['favorites']


@admin.register(Landlord)
class LandlordAdmin(ProfileAdmin):
    pass
