"""
Contact Submission Serializers

Validates the shape of public form submissions and the admin list query.
"""
from collections.abc import Mapping

from django.utils.html import strip_tags
from rest_framework import serializers

from .services import STATUS_CHOICES


class SubmissionFormSerializer(serializers.Serializer):
    """
    Public contact form submission serializer.

    Accepts a flat object of arbitrary form fields. Scalar values are
    stringified and sanitized; nested values are rejected. Required-field
    checks live in services.submit.
    """

    default_error_messages = {
        'not_a_mapping': 'Expected a flat object of form fields',
        'nested': 'Nested values are not allowed',
    }

    def to_internal_value(self, data):
        if hasattr(data, 'dict'):
            # Form-encoded QueryDict
            data = data.dict()
        if not isinstance(data, Mapping):
            raise serializers.ValidationError({
                'non_field_errors': [self.error_messages['not_a_mapping']]
            })

        flat = {}
        errors = {}
        for key, value in data.items():
            if isinstance(value, (Mapping, list, tuple)):
                errors[key] = [self.error_messages['nested']]
            elif value is None:
                flat[key] = ''
            elif isinstance(value, bool):
                # JSON spelling, as a checkbox sends it
                flat[key] = 'true' if value else 'false'
            else:
                flat[key] = value
        if errors:
            raise serializers.ValidationError(errors)

        values = serializers.DictField(
            child=serializers.CharField(allow_blank=True, max_length=5000)
        ).run_validation(flat)

        return {key: strip_tags(value).strip() for key, value in values.items()}


class SubmissionListQuerySerializer(serializers.Serializer):
    """Optional filter for the admin listing."""

    status = serializers.ChoiceField(
        choices=STATUS_CHOICES,
        required=False,
        help_text="Return only submissions with this status"
    )
