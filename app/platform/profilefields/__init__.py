"""
User Profile Fields
Admin-configurable profile attributes attached to user accounts.

Each definition carries a datatype tag that selects a field type implementation
from the registry in ``base``. The autocomplete option field is the shipped type.
"""

# Lazy imports to avoid circular dependencies during Django app loading.
# Import models, services and field types where needed:
#   from app.platform.profilefields.models import ProfileFieldDefinition, ProfileFieldData
#   from app.platform.profilefields.services import build_edit_form, save_profile_data
#   from app.platform.profilefields.base import get_field_type

from .constants import FieldDataTypes, ParamType, NullPolicy

__all__ = [
    "FieldDataTypes",
    "ParamType",
    "NullPolicy",
]
