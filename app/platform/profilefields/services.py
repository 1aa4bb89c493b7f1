"""
Profile field services
Drives field types through form build, save and import for one user.
"""

import logging
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from django.db import transaction
from django.utils.translation import gettext as _

from .base import ProfileFieldType, create_field
from .exceptions import ProfileFieldValidationError
from .forms import ProfileFormBuilder
from .models import ProfileFieldDefinition
from .utils import has_capability, split_value

logger = logging.getLogger(__name__)


class _SystemActor:
    """Actor used for trusted imports; holds every permission."""

    is_authenticated = True

    def has_perm(self, perm, obj=None):
        return True


SYSTEM_ACTOR = _SystemActor()


@dataclass
class ProfileForm:
    fields: List[ProfileFieldType]
    builder: ProfileFormBuilder
    form: Any


def load_profile_fields(user, definitions=None) -> List[ProfileFieldType]:
    """Instantiate every defined profile field for ``user``."""
    if definitions is None:
        definitions = ProfileFieldDefinition.objects.all().order_by("sortorder", "shortname")
    user_id = getattr(user, "pk", None)
    return [create_field(user_id=user_id, definition=definition) for definition in definitions]


def build_edit_form(user, actor, data=None) -> ProfileForm:
    """Build the profile edit form of ``user`` as seen by ``actor``."""
    fields = load_profile_fields(user)
    builder = ProfileFormBuilder()
    for profile_field in fields:
        profile_field.edit_field(builder, actor)

    user_data = SimpleNamespace()
    for profile_field in fields:
        if builder.element_exists(profile_field.inputname):
            profile_field.edit_load_user_data(user_data)

    form = builder.build(data=data, initial=vars(user_data))
    return ProfileForm(fields=fields, builder=builder, form=form)


def _is_editable(profile_field: ProfileFieldType, actor, enforce_locks: bool) -> bool:
    if not enforce_locks:
        return True
    if profile_field.is_frozen_for(actor):
        return False
    return profile_field.is_visible() or has_capability(actor)


def save_profile_data(
    user,
    actor,
    submitted: Dict[str, Any],
    enforce_locks: bool = True,
    fields: Optional[List[ProfileFieldType]] = None,
) -> Dict[str, str]:
    """
    Validate and store submitted profile values keyed by input name.

    Nothing is written unless every submitted field validates. Locked fields
    the actor may not update are left untouched. Returns the stored values
    keyed by shortname.
    """
    if fields is None:
        fields = load_profile_fields(user)

    errors = {}
    accepted = []
    for profile_field in fields:
        if profile_field.inputname not in submitted:
            continue
        if not _is_editable(profile_field, actor, enforce_locks):
            logger.info(f"Ignoring submitted value for read-only profile field {profile_field.shortname}")
            continue

        messages = profile_field.edit_validate_field(submitted)
        if messages:
            errors[profile_field.shortname] = messages
        else:
            accepted.append(profile_field)

    if errors:
        logger.warning(f"Rejected profile data for user {user.pk}: {errors}")
        raise ProfileFieldValidationError(errors)

    save_actor = actor if enforce_locks else SYSTEM_ACTOR
    saved = {}
    with transaction.atomic():
        for profile_field in accepted:
            record = profile_field.edit_save_data(submitted, save_actor)
            if record is not None:
                saved[profile_field.shortname] = record.data
    return saved


def import_profile_data(user, row: Dict[str, Any], actor=None) -> Dict[str, str]:
    """
    Import externally supplied values (labels or keys) for ``user``.

    ``row`` is keyed by input name (``profile_field_<shortname>``); other keys
    are ignored. String values for multiple selection fields are split on the
    value delimiter. Without an actor the import runs as a trusted system job.
    """
    fields = load_profile_fields(user)

    converted = {}
    errors = {}
    for profile_field in fields:
        if profile_field.inputname not in row:
            continue
        value = row[profile_field.inputname]
        if isinstance(value, str) and getattr(profile_field, "multiple", False):
            value = split_value(value)

        converted_value = profile_field.convert_external_data(value)
        if converted_value is None:
            errors[profile_field.shortname] = [
                _("'%(value)s' does not match any option.") % {"value": row[profile_field.inputname]}
            ]
            continue
        converted[profile_field.inputname] = converted_value

    if errors:
        logger.warning(f"Rejected profile import for user {user.pk}: {errors}")
        raise ProfileFieldValidationError(errors)

    return save_profile_data(user, actor, converted, enforce_locks=actor is not None, fields=fields)


def serialize_profile(user, actor) -> List[Dict[str, Any]]:
    """Describe the edit form of ``user`` as JSON-ready dictionaries."""
    profile_form = build_edit_form(user, actor)
    builder, form = profile_form.builder, profile_form.form

    result = []
    for profile_field in profile_form.fields:
        name = profile_field.inputname
        if not builder.element_exists(name):
            continue
        element = builder.get_element(name)
        result.append({
            "shortname": profile_field.shortname,
            "inputname": name,
            "datatype": profile_field.datatype,
            "label": element.label,
            "required": profile_field.is_required(),
            "locked": profile_field.is_locked(),
            "multiple": bool(element.attributes.get("multiple", False)),
            "options": [{"key": key, "label": label} for key, label in element.choices],
            "default": builder.get_default(name),
            "value": form[name].value(),
            "frozen": builder.is_frozen(name),
            "display": profile_field.display_data(),
        })
    return result
