"""User profile field models."""
import uuid
from django.conf import settings
from django.db import models
from django.utils import timezone

from .constants import FieldDataTypes


class TimestampedModel(models.Model):
    """Adds created/updated timestamps."""

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ProfileFieldDefinition(TimestampedModel):
    """
    Administrator-defined profile field.

    ``param1`` holds the newline separated option labels and ``param2`` the
    multiple selection flag ("1" enables it) for option-backed datatypes.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shortname = models.SlugField(max_length=100, unique=True)
    name = models.CharField(max_length=255)
    datatype = models.CharField(max_length=64, default=FieldDataTypes.AUTOCOMPLETE.value)
    description = models.TextField(blank=True)
    required = models.BooleanField(default=False)
    locked = models.BooleanField(default=False)
    visible = models.BooleanField(default=True)
    sortorder = models.PositiveIntegerField(default=0)
    defaultdata = models.TextField(blank=True, default="")
    param1 = models.TextField(blank=True, null=True)
    param2 = models.CharField(max_length=255, blank=True, null=True)

    class Meta:
        db_table = "platform_profile_field_definitions"
        ordering = ["sortorder", "shortname"]

    def __str__(self):
        return f"{self.name} ({self.datatype})"


class ProfileFieldData(TimestampedModel):
    """Stored value of one profile field for one user."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile_field_data",
    )
    field = models.ForeignKey(
        ProfileFieldDefinition,
        on_delete=models.CASCADE,
        related_name="user_data",
    )
    data = models.TextField()

    class Meta:
        db_table = "platform_profile_field_data"
        unique_together = ("user", "field")

    def __str__(self):
        return f"{self.user} - {self.field.shortname}: {self.data}"
