"""Entity metadata - YAML definitions resolved into EntityModel objects."""

from saveforge.metadata.loader import (
    EntityModel,
    FieldDefinition,
    HookConfig,
    MetadataLoader,
    ValidationRules,
    ValidatorConfig,
)

__all__ = [
    "EntityModel",
    "FieldDefinition",
    "HookConfig",
    "MetadataLoader",
    "ValidationRules",
    "ValidatorConfig",
]
