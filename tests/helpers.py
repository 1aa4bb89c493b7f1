"""Shared builders for profile field tests."""

from types import SimpleNamespace

from app.platform.profilefields.autocomplete import AutocompleteProfileField
from app.platform.profilefields.base import FieldContext

COLOURS = "Red\nGreen\nBlue"
MULTILANG_RED = '<span lang="en" class="multilang">Red</span><span lang="fr" class="multilang">Rouge</span>'


def make_autocomplete_field(param1=COLOURS, data=None, **overrides):
    """Build an autocomplete field over an in-memory definition."""
    definition = SimpleNamespace(
        pk=1,
        shortname="colour",
        name="Favourite colour",
        datatype="autocomplete",
        required=False,
        locked=False,
        visible=True,
        defaultdata="",
        param1=param1,
        param2="0",
    )
    for key, value in overrides.items():
        setattr(definition, key, value)
    return AutocompleteProfileField(FieldContext(definition=definition, user_id=1, data=data))


def make_actor(*permissions):
    return SimpleNamespace(is_authenticated=True, has_perm=lambda perm: perm in permissions)
