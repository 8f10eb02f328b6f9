"""
Serializers shared by every resource with bulk endpoints.
"""
from rest_framework import serializers


class BulkDeleteSerializer(serializers.Serializer):
    """POST /<resource>/bulk-delete/ body"""
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)


class BulkToggleSerializer(serializers.Serializer):
    """POST /<resource>/bulk-toggle/ body"""
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)
    is_active = serializers.BooleanField()
