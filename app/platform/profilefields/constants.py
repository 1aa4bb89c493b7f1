"""
Profile field constants
Datatype tags, storage properties and component defaults.
"""

from enum import Enum


class FieldDataTypes(str, Enum):
    """Datatype tags stored on a field definition."""
    AUTOCOMPLETE = "autocomplete"


class ParamType(str, Enum):
    """Type of the stored value, used by the generic save validation."""
    TEXT = "text"
    INT = "int"


class NullPolicy(str, Enum):
    NULL_ALLOWED = "null_allowed"
    NULL_NOT_ALLOWED = "null_not_allowed"


# Form element types understood by ProfileFormBuilder
ELEMENT_AUTOCOMPLETE = "autocomplete"

# Placeholder entry key for required fields
CHOOSE_KEY = ""

DEFAULT_VALUE_DELIMITER = ", "
DEFAULT_INPUT_PREFIX = "profile_field_"
DEFAULT_UPDATE_USER_PERMISSION = "auth.change_user"
