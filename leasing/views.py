"""
Views for the leasing app.

This module defines the API viewsets for applications and leases. The
status endpoint is the only write path that can create a lease; it runs the
ApplicationWorkflow and renders workflow errors as structured JSON.
"""

import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.models import ApplicantKind
from services import InvalidStatusError, RecordNotFoundError, WorkflowError
from services.formatting import ApplicationFormatter
from services.stores import ApplicationStore, IdentityStore, LeaseStore, ListingStore
from services.workflow import ApplicationWorkflow

from .models import ApplicationStatus, Lease
from .serializers import (
    ApplicationCreateSerializer,
    ApplicationStatusSerializer,
    LeaseDetailSerializer,
    LeaseSerializer,
    PaymentSerializer,
)

logger = logging.getLogger(__name__)

USER_TYPES = [kind.value for kind in ApplicantKind] + ['landlord']


def error_response(exc):
    """Render a WorkflowError with its own HTTP status."""
    return Response(exc.to_dict(), status=exc.status_code)


# =============================================================================
# APPLICATION VIEWSET
# =============================================================================

class ApplicationViewSet(viewsets.GenericViewSet):
    """
    API endpoint for applications.

    Supports:
    - List applications, optionally scoped to a user
      (?user_id=...&user_type=tenant|buyer|landlord)
    - Submit a new application (always Pending, no lease)
    - Retrieve one application
    - Set an application's status (PUT/PATCH .../status/)

    Every response carries the denormalized view: property, landlord,
    applicant and lease alongside the stored fields.
    """
    serializer_class = ApplicationCreateSerializer
    lookup_value_regex = r'\d+'
    filter_backends = []

    def get_formatter(self):
        return ApplicationFormatter(IdentityStore(), ListingStore(), LeaseStore())

    def list(self, request):
        user_id = request.query_params.get('user_id')
        user_type = request.query_params.get('user_type')

        if bool(user_id) != bool(user_type):
            return Response(
                {
                    'error': 'invalid_query',
                    'message': 'user_id and user_type must be given together.'
                },
                status=status.HTTP_400_BAD_REQUEST
            )
        if user_type and user_type not in USER_TYPES:
            return Response(
                {
                    'error': 'invalid_query',
                    'message': f"user_type must be one of {', '.join(USER_TYPES)}."
                },
                status=status.HTTP_400_BAD_REQUEST
            )

        applications = ApplicationStore().filter_for_user(user_id, user_type)
        return Response(
            self.get_formatter().format_many(applications, fallback_to_latest=True)
        )

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        application = ApplicationStore().create_application(
            status=ApplicationStatus.PENDING,
            **serializer.validated_data
        )
        logger.info(
            f"Application {application.pk} submitted by {application.applicant_kind} "
            f"{application.applicant_cognito_id} for property {application.property_id}"
        )
        return Response(
            self.get_formatter().format(application),
            status=status.HTTP_201_CREATED
        )

    def retrieve(self, request, pk=None):
        application = ApplicationStore().find_application(pk)
        if application is None:
            return error_response(
                RecordNotFoundError(f"Application {pk} not found.", entity='application')
            )
        return Response(self.get_formatter().format(application))

    @action(detail=True, methods=['put', 'patch'], url_path='status')
    def set_status(self, request, pk=None):
        """
        Set the application's status.

        PUT/PATCH /api/v1/applications/{id}/status/
        Body: {"status": "Approved"}

        The first approval creates a lease from the property's rent and
        deposit, adds the applicant to the property's occupants and links
        the lease to the application. Later approvals change nothing else.
        """
        serializer = ApplicationStatusSerializer(data=request.data)
        if not serializer.is_valid():
            detail = next(iter(serializer.errors.values()))[0]
            if detail.code in ('required', 'blank', 'null'):
                return error_response(InvalidStatusError("Status is required."))
            return error_response(InvalidStatusError(str(detail)))

        workflow = ApplicationWorkflow.from_settings()
        try:
            data = workflow.set_application_status(int(pk), serializer.validated_data['status'])
        except WorkflowError as e:
            return error_response(e)
        return Response(data)


# =============================================================================
# LEASE VIEWSET
# =============================================================================

class LeaseViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for leases (read-only).

    Leases are only created by approving an application.
    """
    queryset = Lease.objects.select_related('property__location')
    serializer_class = LeaseSerializer
    lookup_value_regex = r'\d+'
    filterset_fields = ['applicant_kind', 'applicant_cognito_id', 'property']
    ordering_fields = ['start_date', 'end_date', 'rent']
    ordering = ['id']

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return LeaseDetailSerializer
        return LeaseSerializer

    @action(detail=True, methods=['get'])
    def payments(self, request, pk=None):
        """
        Payments recorded against a lease, oldest due date first.

        GET /api/v1/leases/{id}/payments/
        """
        lease = self.get_object()
        serializer = PaymentSerializer(lease.payments.all(), many=True)
        return Response(serializer.data)
