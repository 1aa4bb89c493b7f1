"""Serializers for profile field definitions and user profile data."""
from rest_framework import serializers

from .base import get_field_type
from .constants import FieldDataTypes
from .exceptions import UnknownFieldTypeError
from .models import ProfileFieldDefinition, ProfileFieldData

DEFINITION_SETTINGS = ("datatype", "required", "locked", "defaultdata", "param1", "param2")


class ProfileFieldDefinitionSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProfileFieldDefinition
        fields = "__all__"
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_datatype(self, value):
        try:
            get_field_type(value)
        except UnknownFieldTypeError as exc:
            raise serializers.ValidationError(str(exc))
        return value

    def validate(self, attrs):
        """Normalise and validate the type-specific settings of the definition."""
        current = {}
        if self.instance is not None:
            current = {name: getattr(self.instance, name) for name in DEFINITION_SETTINGS}

        datatype = attrs.get("datatype", current.get("datatype", FieldDataTypes.AUTOCOMPLETE.value))
        field_class = get_field_type(datatype)

        attrs = field_class.define_normalize(attrs)
        errors = field_class.define_validate({**current, **attrs})
        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class ProfileFieldDataSerializer(serializers.ModelSerializer):
    shortname = serializers.CharField(source="field.shortname", read_only=True)

    class Meta:
        model = ProfileFieldData
        fields = ("id", "user", "field", "shortname", "data", "created_at", "updated_at")
        read_only_fields = fields


class ProfileValuesSerializer(serializers.Serializer):
    """Submitted values keyed by input name, e.g. ``{"profile_field_colour": ["Red"]}``."""

    values = serializers.DictField(child=serializers.JSONField(), allow_empty=True)


class ProfileImportSerializer(serializers.Serializer):
    """Rows of ``{"username": ..., "profile_field_<shortname>": value}``."""

    rows = serializers.ListField(child=serializers.DictField(), allow_empty=False)

    def validate_rows(self, rows):
        missing = [index for index, row in enumerate(rows) if not row.get("username")]
        if missing:
            raise serializers.ValidationError(
                f"Rows missing a username: {', '.join(str(index) for index in missing)}"
            )
        return rows
