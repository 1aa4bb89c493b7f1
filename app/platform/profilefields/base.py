"""
Profile field type contract and registry.

A field type is selected by the ``datatype`` tag of its definition. The host
pipeline in ``services`` drives every type through the same lifecycle:
load -> edit_field_add -> edit_field_set_default -> edit_load_user_data ->
edit_field_set_locked on form build, edit_validate_field ->
edit_save_data_preprocess -> edit_save_data on submit, and
convert_external_data on import.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from django.utils.translation import gettext as _

from .constants import NullPolicy, ParamType
from .exceptions import UnknownFieldTypeError
from .utils import format_string, get_input_prefix, has_capability

logger = logging.getLogger(__name__)

_FIELD_TYPES: Dict[str, type] = {}


def register_field_type(datatype: str):
    """Class decorator registering a field type under a datatype tag."""
    def decorator(cls):
        cls.datatype = datatype
        _FIELD_TYPES[datatype] = cls
        return cls
    return decorator


def get_field_type(datatype: str) -> type:
    try:
        return _FIELD_TYPES[datatype]
    except KeyError:
        raise UnknownFieldTypeError(datatype)


def field_type_choices() -> List[Tuple[str, str]]:
    return [(datatype, cls.verbose_name) for datatype, cls in sorted(_FIELD_TYPES.items())]


def is_empty_submission(value) -> bool:
    if isinstance(value, (list, tuple)):
        return all(item in (None, "") for item in value)
    return value in (None, "")


@dataclass
class FieldContext:
    """
    Everything a field type instance works from.

    Built once per request by the host and discarded afterwards.
    """

    definition: Any
    user_id: Optional[Any] = None
    data: Optional[str] = None

    @classmethod
    def load(cls, field_id=None, user_id=None, definition=None) -> "FieldContext":
        """
        Load the definition (unless pre-fetched) and the user's stored value.

        Database errors propagate to the caller.
        """
        from .models import ProfileFieldData, ProfileFieldDefinition

        if definition is None:
            definition = ProfileFieldDefinition.objects.get(pk=field_id)

        data = None
        if user_id:
            record = ProfileFieldData.objects.filter(user_id=user_id, field=definition).first()
            if record is not None:
                data = record.data
        return cls(definition=definition, user_id=user_id, data=data)

    @property
    def field_id(self):
        return getattr(self.definition, "pk", None)

    @property
    def inputname(self) -> str:
        return f"{get_input_prefix()}{self.definition.shortname}"


def create_field(field_id=None, user_id=None, definition=None):
    """Instantiate the registered field type for a definition."""
    context = FieldContext.load(field_id=field_id, user_id=user_id, definition=definition)
    field_class = get_field_type(context.definition.datatype)
    return field_class(context)


class ProfileFieldType(ABC):
    """Base behaviour shared by every profile field type."""

    datatype: str = ""
    verbose_name: str = ""

    def __init__(self, context: FieldContext):
        self.context = context

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.inputname}>"

    @property
    def field(self):
        return self.context.definition

    @property
    def data(self) -> Optional[str]:
        return self.context.data

    @property
    def inputname(self) -> str:
        return self.context.inputname

    @property
    def shortname(self) -> str:
        return self.field.shortname

    # ---------------------------------------------------------------
    # Flags
    # ---------------------------------------------------------------
    def is_locked(self) -> bool:
        return bool(self.field.locked)

    def is_required(self) -> bool:
        return bool(self.field.required)

    def is_visible(self) -> bool:
        return bool(getattr(self.field, "visible", True))

    def is_empty(self) -> bool:
        return self.data is None or self.data == ""

    def is_frozen_for(self, actor) -> bool:
        return self.is_locked() and not has_capability(actor)

    # ---------------------------------------------------------------
    # Form build
    # ---------------------------------------------------------------
    def edit_field(self, form, actor=None) -> None:
        """Add this field to a form, with its default and lock state."""
        if not self.is_visible() and not has_capability(actor):
            return
        self.edit_field_add(form)
        self.edit_field_set_default(form)
        self.edit_field_set_locked(form, actor)

    @abstractmethod
    def edit_field_add(self, form) -> None:
        """Add the form control for this field."""

    def edit_field_set_default(self, form) -> None:
        if self.field.defaultdata:
            form.set_default(self.inputname, self.field.defaultdata)

    def edit_field_set_locked(self, form, actor=None) -> None:
        if not form.element_exists(self.inputname):
            return
        if self.is_frozen_for(actor):
            form.hard_freeze(self.inputname)
            form.set_constant(self.inputname, format_string(self.data))

    def edit_load_user_data(self, user) -> None:
        setattr(user, self.inputname, self.data)

    # ---------------------------------------------------------------
    # Submit
    # ---------------------------------------------------------------
    def edit_save_data_preprocess(self, data, datarecord):
        return data

    def edit_validate_field(self, usernew: Dict[str, Any]) -> List[str]:
        """Return error messages for the submitted value of this field."""
        if self.inputname not in usernew:
            return []

        value = usernew[self.inputname]
        if self.is_required() and is_empty_submission(value):
            return [_("This field is required.")]

        if self.edit_save_data_preprocess(value, None) is None:
            return [_("Select a valid choice.")]
        return []

    def edit_save_data(self, usernew: Dict[str, Any], actor=None):
        """
        Persist the submitted value for ``context.user_id``.

        Returns the stored record, or ``None`` when nothing was written.
        """
        from .models import ProfileFieldData

        if self.inputname not in usernew:
            return None
        if self.is_frozen_for(actor):
            logger.info(f"Skipping locked profile field {self.shortname} for user {self.context.user_id}")
            return None

        datarecord = ProfileFieldData(user_id=self.context.user_id, field=self.field)
        value = self.edit_save_data_preprocess(usernew[self.inputname], datarecord)
        if not self.check_field_properties(value):
            logger.warning(f"Rejected value for profile field {self.shortname}: {usernew[self.inputname]!r}")
            return None

        record, created = ProfileFieldData.objects.update_or_create(
            user_id=self.context.user_id,
            field=self.field,
            defaults={"data": value},
        )
        self.context.data = value
        logger.info(
            f"{'Created' if created else 'Updated'} profile field {self.shortname} for user {self.context.user_id}"
        )
        return record

    def get_field_properties(self) -> Tuple[ParamType, NullPolicy]:
        return ParamType.TEXT, NullPolicy.NULL_NOT_ALLOWED

    def check_field_properties(self, value) -> bool:
        """Validate a preprocessed value against ``get_field_properties``."""
        param_type, null_policy = self.get_field_properties()
        if value is None:
            return null_policy == NullPolicy.NULL_ALLOWED
        if param_type == ParamType.TEXT:
            return isinstance(value, str)
        if param_type == ParamType.INT:
            return isinstance(value, int) and not isinstance(value, bool)
        return False

    # ---------------------------------------------------------------
    # Import / display
    # ---------------------------------------------------------------
    def convert_external_data(self, value):
        return value

    def display_data(self) -> str:
        return format_string(self.data)

    # ---------------------------------------------------------------
    # Definition administration
    # ---------------------------------------------------------------
    @classmethod
    def define_normalize(cls, attrs: Dict[str, Any]) -> Dict[str, Any]:
        return attrs

    @classmethod
    def define_validate(cls, attrs: Dict[str, Any]) -> Dict[str, List[str]]:
        """Validate definition settings. Returns a mapping of attribute name to messages."""
        return {}
