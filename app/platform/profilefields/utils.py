"""
Profile field utilities
String formatting, capability checks and component settings.
"""

import re
import logging
from typing import Optional, List

from django.conf import settings
from django.utils.html import strip_tags
from django.utils.translation import get_language

from .constants import (
    DEFAULT_INPUT_PREFIX,
    DEFAULT_UPDATE_USER_PERMISSION,
    DEFAULT_VALUE_DELIMITER,
)

logger = logging.getLogger(__name__)

MULTILANG_RE = re.compile(
    r'<span\s+(?:lang="(?P<lang1>[\w-]+)"\s+class="multilang"|class="multilang"\s+lang="(?P<lang2>[\w-]+)")\s*>'
    r'(?P<text>.*?)</span>',
    re.IGNORECASE | re.DOTALL,
)


def get_value_delimiter() -> str:
    return getattr(settings, "PROFILEFIELDS_VALUE_DELIMITER", DEFAULT_VALUE_DELIMITER)


def get_input_prefix() -> str:
    return getattr(settings, "PROFILEFIELDS_INPUT_PREFIX", DEFAULT_INPUT_PREFIX)


def get_update_user_permission() -> str:
    return getattr(settings, "PROFILEFIELDS_UPDATE_USER_PERMISSION", DEFAULT_UPDATE_USER_PERMISSION)


def split_value(value: Optional[str]) -> Optional[List[str]]:
    """Split a stored value into its selected keys. ``None`` stays ``None``."""
    if value is None:
        return None
    return value.split(get_value_delimiter())


def join_values(values) -> str:
    return get_value_delimiter().join(values)


def _primary_language(code: Optional[str]) -> str:
    return (code or "").replace("_", "-").split("-")[0].lower()


def _pick_translation(translations: dict) -> str:
    """
    Choose the translation for the active language.

    Falls back to the site language, then to the first language present.
    """
    for code in (get_language(), settings.LANGUAGE_CODE):
        if not code:
            continue
        code = code.lower()
        if code in translations:
            return translations[code]
        primary = _primary_language(code)
        if primary in translations:
            return translations[primary]
    return next(iter(translations.values()))


def format_string(text, striptags: bool = True) -> str:
    """
    Format a configured string for display.

    Resolves multilang spans such as
    ``<span lang="en" class="multilang">Red</span><span lang="fr" class="multilang">Rouge</span>``
    to the active language, strips remaining tags and trims whitespace.
    """
    if text is None:
        return ""
    text = str(text)

    matches = list(MULTILANG_RE.finditer(text))
    if matches:
        translations = {}
        for match in matches:
            lang = (match.group("lang1") or match.group("lang2")).lower()
            translations.setdefault(lang, match.group("text"))
        chosen = _pick_translation(translations)

        pieces = []
        position = 0
        for index, match in enumerate(matches):
            pieces.append(text[position:match.start()])
            if index == 0:
                pieces.append(chosen)
            position = match.end()
        pieces.append(text[position:])
        text = "".join(pieces)

    if striptags:
        text = strip_tags(text)
    return text.strip()


def has_capability(actor, permission: Optional[str] = None) -> bool:
    """
    Check a site-wide permission for the acting user.

    Defaults to the "update user" permission configured for profile fields.
    """
    if not actor or not getattr(actor, "is_authenticated", False):
        return False
    permission = permission or get_update_user_permission()
    return actor.has_perm(permission)
