"""
Autocomplete profile field.

Options come from the newline separated ``param1`` of the definition; ``param2``
set to 1 enables multiple selection. Selected keys are stored joined with the
value delimiter (", " by default).
"""

import logging
from typing import Any, Dict, List, Optional

from django.utils.translation import gettext as _

from .base import ProfileFieldType, register_field_type
from .constants import CHOOSE_KEY, ELEMENT_AUTOCOMPLETE, FieldDataTypes
from .options import OptionSet, parse_option_labels
from .utils import format_string, has_capability, join_values, split_value

logger = logging.getLogger(__name__)


def is_multiple_flag(param2) -> bool:
    """True for values accepted as the multiple selection setting."""
    if param2 is None or isinstance(param2, bool):
        return True
    if isinstance(param2, int):
        return param2 in (0, 1)
    return isinstance(param2, str) and param2.strip() in ("", "0", "1")


def parse_multiple_flag(param2) -> bool:
    if param2 is None:
        return False
    if isinstance(param2, bool):
        return param2
    try:
        return float(str(param2).strip()) == 1
    except ValueError:
        return False


@register_field_type(FieldDataTypes.AUTOCOMPLETE.value)
class AutocompleteProfileField(ProfileFieldType):
    verbose_name = "Autocomplete"

    def __init__(self, context):
        super().__init__(context)
        self.options = OptionSet.from_config(self.field.param1, required=self.is_required())
        self.multiple = parse_multiple_flag(self.field.param2)
        # Selected keys of the stored value, None when the user has no value
        self.datakey: Optional[List[str]] = split_value(self.data)

    def edit_field_add(self, form) -> None:
        form.add_element(
            ELEMENT_AUTOCOMPLETE,
            self.inputname,
            format_string(self.field.name),
            self.options.items(),
            {"multiple": self.multiple},
        )

    def edit_field_set_default(self, form) -> None:
        """Resolve the configured default (a key or a label) to a key."""
        key = self.options.resolve(self.field.defaultdata)
        form.set_default(self.inputname, key if key is not None else CHOOSE_KEY)

    def edit_save_data_preprocess(self, data, datarecord) -> Optional[str]:
        """
        Validate the submitted keys and join them for storage.

        Returns ``None`` when any key is not a known option.
        """
        if not isinstance(data, (list, tuple)):
            data = [data]

        for option in data:
            if option not in self.options:
                return None

        return join_values(data)

    def edit_validate_field(self, usernew: Dict[str, Any]) -> List[str]:
        value = usernew.get(self.inputname)
        if not self.multiple and isinstance(value, (list, tuple)) and len(value) > 1:
            return [_("Select only one option.")]
        return super().edit_validate_field(usernew)

    def edit_load_user_data(self, user) -> None:
        setattr(user, self.inputname, self.datakey)

    def edit_field_set_locked(self, form, actor=None) -> None:
        if not form.element_exists(self.inputname):
            return

        if self.is_locked() and not has_capability(actor):
            form.hard_freeze(self.inputname)
            # Shows the stored keys, not their formatted labels
            selection = join_values(self.datakey) if self.datakey is not None else None
            form.set_constant(self.inputname, format_string(selection))

    def convert_external_data(self, value):
        """
        Convert imported labels to option keys.

        Known keys are kept as they are and labels are swapped for their key.
        Unmatched items are dropped from a sequence; an unmatched scalar, or a
        sequence with nothing left, becomes ``None`` for the save step to reject.
        """
        if isinstance(value, (list, tuple)):
            keys = []
            for item in value:
                key = self.options.resolve(item)
                if key is not None:
                    keys.append(key)
            return keys or None

        return self.options.resolve(value)

    def display_data(self) -> str:
        if not self.datakey:
            return ""
        return join_values(
            self.options.label_for(key, format_string(key)) for key in self.datakey
        )

    @classmethod
    def define_normalize(cls, attrs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Drop blank lines and carriage returns from the option list.

        Unrecognised multiple selection values are left for ``define_validate`` to reject.
        """
        attrs = dict(attrs)
        if attrs.get("param1") is not None:
            labels = [label.strip() for label in parse_option_labels(attrs["param1"].replace("\r", ""))]
            attrs["param1"] = "\n".join(label for label in labels if label)
        if "param2" in attrs and is_multiple_flag(attrs["param2"]):
            attrs["param2"] = "1" if parse_multiple_flag(attrs["param2"]) else "0"
        if attrs.get("defaultdata") is not None:
            attrs["defaultdata"] = attrs["defaultdata"].strip()
        return attrs

    @classmethod
    def define_validate(cls, attrs: Dict[str, Any]) -> Dict[str, List[str]]:
        errors = {}
        labels = [label for label in parse_option_labels(attrs.get("param1")) if label.strip()]
        if not labels:
            errors["param1"] = [_("Provide at least one option, one per line.")]

        if not is_multiple_flag(attrs.get("param2")):
            errors["param2"] = [_("Multiple selection must be 0 or 1.")]

        default = attrs.get("defaultdata")
        if default and labels and OptionSet.from_config(attrs.get("param1")).resolve(default) is None:
            errors["defaultdata"] = [_("The default value must be one of the options.")]
        return errors
