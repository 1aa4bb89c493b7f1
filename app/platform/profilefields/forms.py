"""
Profile edit form building.

ProfileFormBuilder collects element declarations, defaults and lock state from
the field types, then builds a Django form from them.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from django import forms

from .constants import ELEMENT_AUTOCOMPLETE

logger = logging.getLogger(__name__)


class AutocompleteSelect(forms.Select):
    """Select widget rendered with autocomplete hooks, single or multiple."""

    def __init__(self, attrs=None, choices=(), multiple=False):
        attrs = {"data-autocomplete": "true", **(attrs or {})}
        super().__init__(attrs=attrs, choices=choices)
        self.allow_multiple_selected = multiple

    def value_from_datadict(self, data, files, name):
        if not self.allow_multiple_selected:
            return super().value_from_datadict(data, files, name)
        try:
            getter = data.getlist
        except AttributeError:
            getter = data.get
        return getter(name)

    def value_omitted_from_data(self, data, files, name):
        if self.allow_multiple_selected:
            # Unselecting every option submits nothing
            return False
        return super().value_omitted_from_data(data, files, name)


def autocomplete_form_field(label, choices, attributes):
    multiple = bool(attributes.get("multiple"))
    field_class = forms.MultipleChoiceField if multiple else forms.ChoiceField
    return field_class(
        label=label,
        choices=list(choices),
        required=False,
        widget=AutocompleteSelect(multiple=multiple),
    )


ELEMENT_FACTORIES = {
    ELEMENT_AUTOCOMPLETE: autocomplete_form_field,
}


@dataclass
class FormElement:
    element_type: str
    name: str
    label: str
    choices: List[Tuple[str, str]] = field(default_factory=list)
    attributes: Dict[str, Any] = field(default_factory=dict)


class ProfileFormBuilder:
    """Mutable form description filled in by profile field types."""

    def __init__(self):
        self._elements: Dict[str, FormElement] = {}
        self._defaults: Dict[str, Any] = {}
        self._constants: Dict[str, Any] = {}
        self._frozen = set()

    def add_element(self, element_type, name, label, choices=None, attributes=None) -> FormElement:
        if element_type not in ELEMENT_FACTORIES:
            raise ValueError(f"Unsupported form element type: {element_type}")
        element = FormElement(
            element_type=element_type,
            name=name,
            label=label,
            choices=list(choices or []),
            attributes=dict(attributes or {}),
        )
        self._elements[name] = element
        return element

    def element_exists(self, name) -> bool:
        return name in self._elements

    def get_element(self, name) -> FormElement:
        return self._elements[name]

    def element_names(self) -> List[str]:
        return list(self._elements)

    def set_default(self, name, value) -> None:
        self._defaults[name] = value

    def get_default(self, name, default=None):
        return self._defaults.get(name, default)

    def hard_freeze(self, name) -> None:
        self._frozen.add(name)

    def is_frozen(self, name) -> bool:
        return name in self._frozen

    def set_constant(self, name, value) -> None:
        self._constants[name] = value

    def get_constant(self, name, default=None):
        return self._constants.get(name, default)

    def build(self, data=None, initial: Optional[Dict[str, Any]] = None) -> forms.Form:
        """
        Build a Django form.

        Initial values are the defaults overridden by ``initial``; frozen
        elements become disabled text fields showing their constant.
        """
        form_fields = {}
        for name, element in self._elements.items():
            if self.is_frozen(name):
                form_fields[name] = forms.CharField(
                    label=element.label,
                    required=False,
                    disabled=True,
                    initial=self._constants.get(name, ""),
                )
            else:
                factory = ELEMENT_FACTORIES[element.element_type]
                form_fields[name] = factory(element.label, element.choices, element.attributes)

        values = dict(self._defaults)
        values.update({key: value for key, value in (initial or {}).items() if value is not None})
        values.update(self._constants)

        form_class = type("ProfileEditForm", (forms.Form,), form_fields)
        return form_class(data=data, initial=values)
