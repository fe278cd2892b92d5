"""
Contact Submission Views

API endpoints for public form intake and admin management.
"""
import logging

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdmin
from . import services
from .serializers import SubmissionFormSerializer, SubmissionListQuerySerializer
from .storage import StorageError, SubmissionNotFound, get_submission_store

logger = logging.getLogger(__name__)


NOT_FOUND_MESSAGE = 'Submission not found'


def not_found_response():
    return Response(
        {'success': False, 'message': NOT_FOUND_MESSAGE},
        status=status.HTTP_404_NOT_FOUND
    )


def storage_error_response(message):
    return Response(
        {'success': False, 'message': message},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


class SubmitFormView(APIView):
    """
    Public endpoint for contact form submissions.

    POST /api/submit-form

    No authentication required. Rate limited with the rest of the API.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        """Submit a contact form."""
        serializer = SubmissionFormSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {
                    'success': False,
                    'error': 'Validation failed',
                    'fields': serializer.errors
                },
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            submission_id = services.submit(serializer.validated_data, get_submission_store())
        except services.ValidationError:
            return Response(
                {'success': False, 'error': 'Name and phone are required fields'},
                status=status.HTTP_400_BAD_REQUEST
            )
        except StorageError:
            logger.exception("Error saving form submission")
            return Response(
                {
                    'success': False,
                    'error': 'We could not process your request. Please try again later.'
                },
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response(
            {
                'success': True,
                'message': "Thank you for your request! We'll get in touch with you soon.",
                'submissionId': submission_id
            },
            status=status.HTTP_200_OK
        )


class SubmissionListView(APIView):
    """
    List submissions with status counts (admin only).

    GET /api/admin/submissions

    Query Parameters:
    - status: Return only Pending, Completed or Urgent submissions

    Counts always cover every stored submission; at most
    SUBMISSIONS_LIST_LIMIT submissions are returned, newest first.
    """

    permission_classes = [IsAdmin]

    def get(self, request):
        query = SubmissionListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(
                {'success': False, 'message': 'Invalid status filter', 'fields': query.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            records = get_submission_store().list()
        except StorageError:
            logger.exception("Error fetching submissions")
            return storage_error_response('Error loading submissions')

        summary = services.summarize(
            records,
            limit=settings.SUBMISSIONS_LIST_LIMIT,
            status=query.validated_data.get('status'),
        )
        return Response({'success': True, **summary})


class SubmissionDetailView(APIView):
    """
    Get or delete a single submission (admin only).

    GET /api/admin/submissions/:id
    DELETE /api/admin/submissions/:id
    """

    permission_classes = [IsAdmin]

    def get(self, request, id):
        try:
            record = get_submission_store().get(id)
        except SubmissionNotFound:
            return not_found_response()
        except StorageError:
            logger.exception("Error fetching submission %s", id)
            return storage_error_response('Error loading submission')

        return Response({'success': True, **record})

    def delete(self, request, id):
        try:
            services.delete(id, get_submission_store())
        except SubmissionNotFound:
            return not_found_response()
        except StorageError:
            logger.exception("Error deleting submission %s", id)
            return storage_error_response('Error deleting submission')

        return Response({'success': True, 'message': 'Submission deleted successfully'})


class SubmissionCompleteView(APIView):
    """
    Mark a submission as completed (admin only).

    PUT /api/admin/submissions/:id/complete
    """

    permission_classes = [IsAdmin]

    def put(self, request, id):
        try:
            services.complete(id, get_submission_store())
        except SubmissionNotFound:
            return not_found_response()
        except StorageError:
            logger.exception("Error updating submission %s", id)
            return storage_error_response('Error updating submission')

        return Response({'success': True, 'message': 'Submission updated successfully'})
