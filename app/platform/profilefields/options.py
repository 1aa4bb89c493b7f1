"""Option sets for option-backed profile fields."""
from typing import Iterator, List, Optional, Tuple

from django.utils.translation import gettext as _

from .constants import CHOOSE_KEY
from .utils import format_string


def parse_option_labels(param1: Optional[str]) -> List[str]:
    """Split the configured options on newlines. Missing configuration yields no labels."""
    if param1 is None:
        return []
    return param1.split("\n")


def choose_label() -> str:
    return _("Choose") + "..."


class OptionSet:
    """
    Ordered mapping of option key to display label.

    Keys are the raw configured labels. Adding an existing key replaces its
    label and keeps its original position, so duplicate labels collapse.
    """

    def __init__(self):
        self._options = {}

    @classmethod
    def from_config(cls, param1: Optional[str], required: bool = False) -> "OptionSet":
        option_set = cls()
        if required:
            option_set.add(CHOOSE_KEY, choose_label())
        for label in parse_option_labels(param1):
            option_set.add(label, format_string(label))
        return option_set

    def add(self, key: str, label: str) -> None:
        self._options[key] = label

    def __contains__(self, key) -> bool:
        try:
            return key in self._options
        except TypeError:
            return False

    def __getitem__(self, key) -> str:
        return self._options[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __repr__(self):
        return f"OptionSet({self._options!r})"

    def keys(self) -> List[str]:
        return list(self._options)

    def labels(self) -> List[str]:
        return list(self._options.values())

    def items(self) -> List[Tuple[str, str]]:
        return list(self._options.items())

    def label_for(self, key, default: Optional[str] = None) -> Optional[str]:
        if key in self:
            return self._options[key]
        return default

    def find_key(self, label) -> Optional[str]:
        """Return the key of the first entry whose label equals ``label``, or ``None``."""
        for key, option_label in self._options.items():
            if option_label == label:
                return key
        return None

    def resolve(self, value) -> Optional[str]:
        """Resolve a key or a display label to a key, or ``None`` when neither matches."""
        if value in self:
            return value
        return self.find_key(value)
