"""Load and resolve entity metadata from YAML files."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from saveforge.core.types import modes_from_dict
from saveforge.hooks.types import VALID_HOOK_POINTS

logger = logging.getLogger(__name__)


@dataclass
class ValidationRules:
    required: bool = False
    min: float | None = None
    max: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None


@dataclass
class FieldDefinition:
    name: str
    type: str
    display_name: str
    primary_key: bool = False
    default: Any = None
    validation: ValidationRules = field(default_factory=ValidationRules)


@dataclass
class ValidatorConfig:
    """Validator definition from YAML metadata."""

    type: str
    params: dict[str, Any] = field(default_factory=dict)
    message: str = ""
    code: str = ""
    on: list[str] = field(default_factory=lambda: ["insert", "update"])


@dataclass
class HookConfig:
    """Hook definition from YAML metadata."""

    name: str
    on: list[str] = field(default_factory=lambda: ["insert", "update"])
    description: str = ""


@dataclass
class EntityModel:
    name: str
    display_name: str
    plural_name: str
    primary_key: str
    fields: list[FieldDefinition]
    abbreviation: str = ""  # 2-5 chars, uppercase, globally unique
    extends: str | None = None
    abstract: bool = False
    validators: list[ValidatorConfig] = field(default_factory=list)
    # Hook lists keyed by hook point, base entity hooks first
    hooks: dict[str, list[HookConfig]] = field(default_factory=dict)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldDefinition | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


class MetadataLoader:
    """Loads entity definitions from YAML files.

    Entities may extend another entity with `extends:`. The derived entity
    inherits the base's fields, validators and hooks; its own entries are
    appended after the inherited ones, so base behaviour always runs first.
    """

    def __init__(self, metadata_path: Path):
        self.metadata_path = metadata_path
        self.entities: dict[str, EntityModel] = {}
        self._raw: dict[str, dict] = {}

    def load_all(self) -> None:
        """Load and resolve all entities."""
        self._load_entities()
        for name in self._raw:
            self._resolve(name, ())
        self._validate_abbreviations()

    def _load_entities(self) -> None:
        entities_path = self.metadata_path / "entities"
        if not entities_path.exists():
            return

        for yaml_file in sorted(entities_path.glob("*.yaml")):
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if data and "entity" in data:
                if data["entity"] in self._raw:
                    raise ValueError(
                        f"Entity '{data['entity']}' is defined more than once "
                        f"(second definition in {yaml_file.name})"
                    )
                self._raw[data["entity"]] = data

    def _validate_abbreviations(self) -> None:
        """Validate entity abbreviations are unique and properly formatted."""
        seen: dict[str, str] = {}  # abbreviation -> entity name

        for entity_name, entity in self.entities.items():
            if entity.abstract:
                continue

            abbrev = entity.abbreviation
            if not abbrev:
                raise ValueError(f"Entity '{entity_name}' has no abbreviation")
            if len(abbrev) < 2 or len(abbrev) > 5:
                raise ValueError(
                    f"Entity '{entity_name}' abbreviation '{abbrev}' must be 2-5 characters"
                )
            if not abbrev.isalnum():
                raise ValueError(
                    f"Entity '{entity_name}' abbreviation '{abbrev}' must be alphanumeric"
                )

            if abbrev in seen:
                raise ValueError(
                    f"Duplicate abbreviation '{abbrev}' used by both "
                    f"'{seen[abbrev]}' and '{entity_name}'"
                )
            seen[abbrev] = entity_name

    def _resolve(self, name: str, chain: tuple[str, ...]) -> EntityModel:
        """Resolve an entity by name, resolving its base entities first."""
        if name in self.entities:
            return self.entities[name]
        if name in chain:
            cycle = " -> ".join(chain + (name,))
            raise ValueError(f"Inheritance cycle in entity metadata: {cycle}")
        if name not in self._raw:
            raise ValueError(
                f"Entity '{chain[-1]}' extends unknown entity '{name}'"
            )

        data = self._raw[name]
        base = None
        if data.get("extends"):
            base = self._resolve(data["extends"], chain + (name,))

        entity = self.resolve_entity(data, base)
        self.entities[name] = entity
        return entity

    def resolve_entity(
        self, data: dict, base: EntityModel | None = None
    ) -> EntityModel:
        """Build an EntityModel from a YAML dict, merged onto its base."""
        name = data["entity"]

        fields = list(base.fields) if base else []
        for raw_field in data.get("fields") or []:
            resolved = self._resolve_field(raw_field)
            # A derived field with the same name replaces the inherited one
            fields = [f for f in fields if f.name != resolved.name]
            fields.append(resolved)

        primary_key = "id"
        for f in fields:
            if f.primary_key:
                primary_key = f.name
                break

        validators = list(base.validators) if base else []
        validators.extend(self._resolve_validator(name, v) for v in data.get("validators") or [])

        hooks: dict[str, list[HookConfig]] = {}
        if base:
            hooks = {point: list(configs) for point, configs in base.hooks.items()}
        for point, configs in self._resolve_hooks(name, data.get("hooks") or {}).items():
            hooks.setdefault(point, []).extend(configs)

        abbreviation = (data.get("abbreviation") or "").upper()
        abstract = data.get("abstract", False)
        if not abbreviation and not abstract:
            # Auto-generate from name (first 3 chars, uppercase)
            abbreviation = name[:3].upper()

        return EntityModel(
            name=name,
            display_name=data.get("displayName", name),
            plural_name=data.get("pluralName", name + "s"),
            primary_key=primary_key,
            fields=fields,
            abbreviation=abbreviation,
            extends=base.name if base else None,
            abstract=abstract,
            validators=validators,
            hooks=hooks,
        )

    def _resolve_field(self, data: dict) -> FieldDefinition:
        """Convert field dict to FieldDefinition."""
        name = data["name"]

        validation_data = data.get("validation") or {}
        validation = ValidationRules(
            required=validation_data.get("required", False),
            min=validation_data.get("min"),
            max=validation_data.get("max"),
            min_length=validation_data.get("minLength"),
            max_length=validation_data.get("maxLength"),
            pattern=validation_data.get("pattern"),
        )

        return FieldDefinition(
            name=name,
            type=data.get("type", "string"),
            display_name=data.get("displayName", self._to_display_name(name)),
            primary_key=data.get("primaryKey", False),
            default=data.get("default"),
            validation=validation,
        )

    def _get_on(self, entity_name: str, data: dict) -> list[str]:
        """Extract the mode names from the 'on' field of a YAML dict."""
        try:
            modes = modes_from_dict(data)
        except ValueError as e:
            raise ValueError(f"Entity '{entity_name}': {e}") from e
        return [m.value for m in modes]

    def _resolve_validator(self, entity_name: str, data: dict) -> ValidatorConfig:
        return ValidatorConfig(
            type=data["type"],
            params=data.get("params", {}),
            message=data.get("message", ""),
            code=data.get("code", ""),
            on=self._get_on(entity_name, data),
        )

    def _resolve_hooks(self, entity_name: str, data: dict) -> dict[str, list[HookConfig]]:
        """Convert hooks dict from YAML to HookConfig lists by hook point."""
        hooks: dict[str, list[HookConfig]] = {}
        for point, hook_list in data.items():
            if point not in VALID_HOOK_POINTS:
                logger.warning(
                    "Entity '%s' declares hooks for unknown hook point '%s', ignoring",
                    entity_name,
                    point,
                )
                continue
            if isinstance(hook_list, list):
                hooks[point] = [self._resolve_hook(entity_name, h) for h in hook_list]
        return hooks

    def _resolve_hook(self, entity_name: str, data: dict) -> HookConfig:
        return HookConfig(
            name=data["name"],
            on=self._get_on(entity_name, data),
            description=data.get("description", ""),
        )

    def _to_display_name(self, name: str) -> str:
        """Convert camelCase to Title Case."""
        result = []
        for i, char in enumerate(name):
            if char.isupper() and i > 0:
                result.append(" ")
            result.append(char)
        return "".join(result).title()

    def get_entity(self, name: str) -> EntityModel | None:
        """Get a resolved entity by name."""
        return self.entities.get(name)

    def list_entities(self) -> list[str]:
        """List all entity names."""
        return list(self.entities.keys())
