"""
Rule option schemas and resolved option values.

Raw options come from the ``rule_configs`` section of the configuration
file. They are validated with pydantic models before any rule runs, then
resolved once into immutable values the rules read per node.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Sequence, Type

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError, field_validator

from .types import ConstructKind

SpacingPolicy = Literal["always", "never"]


class ConfigError(ValueError):
    """Raised when a rule configuration does not match its schema."""

    def __init__(self, rule_id: str, detail: str):
        super().__init__(f"Invalid configuration for rule '{rule_id}': {detail}")
        self.rule_id = rule_id
        self.detail = detail


class ObjectCurlySpacingExceptions(BaseModel):
    """Second positional option of ``style.object_curly_spacing``."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    arrays_in_objects: Optional[StrictBool] = Field(None, alias="arraysInObjects")
    objects_in_objects: Optional[StrictBool] = Field(None, alias="objectsInObjects")
    object_pattern: Optional[SpacingPolicy] = Field(None, alias="ObjectPattern")
    object_expression: Optional[SpacingPolicy] = Field(None, alias="ObjectExpression")
    import_declaration: Optional[SpacingPolicy] = Field(None, alias="ImportDeclaration")
    export_named_declaration: Optional[SpacingPolicy] = Field(None, alias="ExportNamedDeclaration")


class ObjectCurlySpacingConfig(BaseModel):
    """Rule config: ``{"options": ["always" | "never", {...}]}``."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    options: List[Any] = Field(default_factory=list, max_length=2)

    @field_validator("options")
    @classmethod
    def _check_positional(cls, value: List[Any]) -> List[Any]:
        if value and value[0] not in ("always", "never"):
            raise ValueError(f"first option must be 'always' or 'never', got {value[0]!r}")
        if len(value) > 1:
            try:
                ObjectCurlySpacingExceptions.model_validate(value[1])
            except ValidationError as e:
                raise ValueError(str(e)) from e
        return value

    def policy(self) -> Optional[str]:
        return self.options[0] if self.options else None

    def exceptions(self) -> ObjectCurlySpacingExceptions:
        if len(self.options) > 1:
            return ObjectCurlySpacingExceptions.model_validate(self.options[1])
        return ObjectCurlySpacingExceptions()


class NoTrailingSpacesConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    skip_blank_lines: StrictBool = Field(False, alias="skipBlankLines")


def _is_spaced(value: Optional[str]) -> bool:
    return value == "always"


@dataclass(frozen=True)
class SpacingOptions:
    """Resolved options for the curly spacing checker."""
    spaced: bool = False
    arrays_in_objects_exception: bool = False
    objects_in_objects_exception: bool = False
    object_pattern: bool = False
    object_expression: bool = False
    import_declaration: bool = False
    export_named_declaration: bool = False

    def for_construct(self, kind: ConstructKind) -> bool:
        return {
            ConstructKind.OBJECT_PATTERN: self.object_pattern,
            ConstructKind.OBJECT_EXPRESSION: self.object_expression,
            ConstructKind.IMPORT_DECLARATION: self.import_declaration,
            ConstructKind.EXPORT_NAMED_DECLARATION: self.export_named_declaration,
        }[kind]

    @classmethod
    def resolve(cls, options: Sequence[Any] = ()) -> "SpacingOptions":
        """Resolve positional options into a SpacingOptions value.

        An exception flag only takes effect when it is set to the opposite
        of the main policy; per-construct policies default to the main one.
        """
        config = ObjectCurlySpacingConfig(options=list(options))
        spaced = _is_spaced(config.policy())
        exceptions = config.exceptions()

        def type_default(value: Optional[str]) -> bool:
            return spaced if value is None else _is_spaced(value)

        return cls(
            spaced=spaced,
            arrays_in_objects_exception=exceptions.arrays_in_objects == (not spaced),
            objects_in_objects_exception=exceptions.objects_in_objects == (not spaced),
            object_pattern=type_default(exceptions.object_pattern),
            object_expression=type_default(exceptions.object_expression),
            import_declaration=type_default(exceptions.import_declaration),
            export_named_declaration=type_default(exceptions.export_named_declaration),
        )


def validate_rule_config(rule_id: str, model: Type[BaseModel],
                         raw: Optional[Dict[str, Any]]) -> BaseModel:
    """Validate one rule's raw config, raising ConfigError on schema violations."""
    try:
        return model.model_validate(raw or {})
    except ValidationError as e:
        raise ConfigError(rule_id, str(e)) from e
