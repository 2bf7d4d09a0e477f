# ===== SERVICES INTEGRATION LAYER =====
"""
Leasing services for the Leasehold backend.

Store adapters, the application status workflow and the response formatter
live in submodules. This package root holds the exception taxonomy every
service raises, so views can translate failures in one place.
"""

from rest_framework import status


# =============================================================================
# SERVICE EXCEPTIONS
# =============================================================================

class WorkflowError(Exception):
    """Base exception for leasing workflow failures."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = 'workflow_error'

    def __init__(self, message, entity=None):
        super().__init__(message)
        self.message = message
        self.entity = entity

    def to_dict(self):
        """Structured error body returned to API callers."""
        body = {'error': self.code, 'message': self.message}
        if self.entity:
            body['entity'] = self.entity
        return body


class InvalidStatusError(WorkflowError):
    """Raised when the requested application status is empty or not allowed."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = 'invalid_status'


class RecordNotFoundError(WorkflowError):
    """Raised when an application or its property does not resolve."""

    status_code = status.HTTP_404_NOT_FOUND
    code = 'not_found'


class DataIntegrityError(WorkflowError):
    """Raised when a stored reference on an application is missing or malformed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = 'data_integrity_error'


class StoreError(WorkflowError):
    """Raised when the underlying database call fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = 'store_error'
