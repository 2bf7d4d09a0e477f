"""
Leasing Admin - Leasehold Backend
Django admin configuration for applications, leases and payments.
"""

from django.contrib import admin

from .models import Application, Lease, Payment


# =============================================================================
# INLINE ADMIN CLASSES
# =============================================================================

class PaymentInline(admin.TabularInline):
    """Payments listed under their lease"""
    model = Payment
    extra = 0

    fields = [
        'due_date',
        'amount_due',
        'amount_paid',
        'payment_date',
        'payment_status'
    ]


# =============================================================================
# MAIN ADMIN CLASSES
# =============================================================================

@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    """
    Admin interface for applications.

    Status changes made here bypass the leasing workflow; approve through
    the API so the lease gets created.
    """

    list_display = [
        'id',
        'name',
        'status',
        'applicant_kind',
        'applicant_cognito_id',
        'property_id',
        'lease',
        'application_date'
    ]

    list_filter = ['status', 'applicant_kind', 'application_date']
    search_fields = ['name', 'email', 'applicant_cognito_id']
    raw_id_fields = ['property', 'lease']
    readonly_fields = ['lease', 'created_at', 'updated_at']

    fieldsets = (
        ('Application', {
            'fields': ('status', 'application_date', 'property', 'lease')
        }),
        ('Applicant', {
            'fields': (
                'applicant_kind',
                'applicant_cognito_id',
                'name',
                'email',
                'phone_number',
                'message'
            )
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(Lease)
class LeaseAdmin(admin.ModelAdmin):
    """Admin interface for leases"""

    list_display = [
        'id',
        'property_id',
        'applicant_kind',
        'applicant_cognito_id',
        'start_date',
        'end_date',
        'rent',
        'deposit'
    ]

    list_filter = ['applicant_kind', 'start_date']
    search_fields = ['applicant_cognito_id']
    raw_id_fields = ['property']
    date_hierarchy = 'start_date'
    inlines = [PaymentInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['id', 'lease', 'due_date', 'amount_due', 'amount_paid', 'payment_status']
    list_filter = ['payment_status', 'due_date']
    raw_id_fields = ['lease']
