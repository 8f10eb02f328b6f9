"""
Serializers for Revision model
"""
from rest_framework import serializers

from core.revisions.models import Revision


class RevisionActorSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    email = serializers.EmailField(read_only=True)
    name_en = serializers.CharField(read_only=True)
    name_ar = serializers.CharField(read_only=True)


class RevisionReadSerializer(serializers.ModelSerializer):
    """Read serializer for Revision model (null modified_by means the system)"""
    modified_by = RevisionActorSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Revision
        fields = [
            'id', 'entity_type', 'entity_id', 'operation', 'field_name',
            'previous_value', 'current_value', 'modified_by', 'modification_date'
        ]
        read_only_fields = fields


class RevisionFilterSerializer(serializers.Serializer):
    """Query parameters accepted by the model-wide history endpoint"""
    operation = serializers.ChoiceField(choices=['create', 'edit', 'delete'], required=False)
    field_name = serializers.CharField(required=False)
    modified_by = serializers.IntegerField(required=False)
    entity_id = serializers.CharField(required=False)
    date_from = serializers.CharField(required=False)
    date_to = serializers.CharField(required=False)
