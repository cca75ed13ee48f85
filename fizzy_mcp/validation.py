"""Tool input validation built from the declarative schemas in tool_schemas.

Each tool's JSON Schema is turned into a strict pydantic model once at
import time. Validation errors keep pydantic's per-field locations so the
router can report every failing path.
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, ValidationError, create_model

from .tool_schemas import TOOLS

_SCALAR_TYPES = {
    "string": StrictStr,
    "integer": StrictInt,
    "boolean": StrictBool,
}

# JSON Schema keyword -> pydantic Field argument
_CONSTRAINTS = {
    "minLength": "min_length",
    "maxLength": "max_length",
    "minItems": "min_length",
    "maxItems": "max_length",
    "minimum": "ge",
    "maximum": "le",
}


def _model_name(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_")) + "Input"


def _annotation(schema: dict[str, Any], name: str) -> Any:
    kind = schema.get("type")
    if kind == "object":
        base: Any = model_from_schema(name, schema)
    elif kind == "array":
        base = list[_annotation(schema["items"], f"{name}_item")]
    elif kind in _SCALAR_TYPES:
        base = _SCALAR_TYPES[kind]
    else:
        raise ValueError(f"Unsupported schema type for {name}: {kind!r}")

    constraints = {arg: schema[key] for key, arg in _CONSTRAINTS.items() if key in schema}
    if constraints:
        return Annotated[base, Field(**constraints)]
    return base


def model_from_schema(name: str, schema: dict[str, Any]) -> type[BaseModel]:
    """Build a strict pydantic model from an object JSON Schema."""
    required = set(schema.get("required", []))
    fields: dict[str, Any] = {}
    for prop, prop_schema in schema.get("properties", {}).items():
        annotation = _annotation(prop_schema, f"{name}_{prop}")
        default = ... if prop in required else prop_schema.get("default")
        fields[prop] = (annotation, default)
    return create_model(_model_name(name), __config__=ConfigDict(extra="ignore"), **fields)


INPUT_MODELS: dict[str, type[BaseModel]] = {tool["name"]: model_from_schema(tool["name"], tool["input_schema"]) for tool in TOOLS}


def validate_tool_input(tool_name: str, tool_input: dict[str, Any] | None) -> BaseModel:
    """
    Validate tool arguments against the tool's schema.

    Raises:
        KeyError: If tool_name is not in the catalog
        pydantic.ValidationError: If the arguments do not match the schema
    """
    return INPUT_MODELS[tool_name].model_validate(tool_input or {})


def format_validation_error(error: ValidationError) -> str:
    """Render every failing field as ``path: reason``."""
    issues = []
    for detail in error.errors():
        path = ".".join(str(part) for part in detail["loc"]) or "(input)"
        issues.append(f"{path}: {detail['msg']}")
    return f"Validation error: {', '.join(issues)}"
