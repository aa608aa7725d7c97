"""Error message templates for configured validators."""

import re
from collections.abc import Mapping
from typing import Any


class MessageInterpolator:
    """Interpolates field values into error message templates.

    Supports:
    - {fieldName} - Current value
    - {fieldName:label} - Field's display label
    - {original.fieldName} - Last persisted value (for updates)
    """

    # Pattern: {[original.]fieldName[:label]}
    PATTERN = re.compile(r"\{(?P<prefix>original\.)?(?P<field>\w+)(?::(?P<modifier>label))?\}")

    def __init__(self, field_labels: dict[str, str] | None = None):
        self.field_labels = field_labels or {}

    @classmethod
    def for_entity(cls, entity: Any) -> "MessageInterpolator":
        """Build an interpolator labelling fields from an EntityModel (or None)."""
        if entity is None:
            return cls()
        return cls(field_labels={f.name: f.display_name for f in entity.fields})

    def interpolate(
        self,
        template: str,
        record: Mapping[str, Any],
        original: Mapping[str, Any] | None = None,
    ) -> str:
        """Interpolate field values into a message template."""

        def replace(match: re.Match) -> str:
            field_name = match.group("field")

            if match.group("modifier") == "label":
                return self.field_labels.get(field_name, field_name)

            source = original if match.group("prefix") else record
            if source is None:
                return ""
            value = source.get(field_name)
            return "" if value is None else str(value)

        return self.PATTERN.sub(replace, template)
