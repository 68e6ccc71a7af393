"""Derive HTML input attributes from a schema field."""

from typing import Any, Callable

from pydantic import AnyUrl, EmailStr, NameEmail

from .engine import schema_node
from .errors import UnknownFieldError
from .schemas.input_props import InputProps
from .schemas.nodes import NodeKind, SchemaNode, is_datetime
from .utils.logging_setup import get_logger

logger = get_logger(__name__)

# Leaf kind to input type; STRING and DATE are refined below
INPUT_TYPES = {
    NodeKind.STRING: "text",
    NodeKind.NUMBER: "number",
    NodeKind.BOOLEAN: "checkbox",
    NodeKind.DATE: "date",
}


def _peel(node: SchemaNode) -> SchemaNode:
    """Strip wrappers and arrays down to the element the input edits."""
    node = node.unwrap()
    while node.kind is NodeKind.ARRAY:
        node = node.inner.unwrap()
    return node


def _string_type(node: SchemaNode) -> str:
    annotation = node.annotation
    if issubclass(annotation, (EmailStr, NameEmail)):
        return "email"
    if issubclass(annotation, AnyUrl):
        return "url"
    return "text"


def _pattern(node: SchemaNode) -> Any:
    pattern = node.constraint("pattern")
    # Compiled patterns are accepted by pydantic as well as strings
    return getattr(pattern, "pattern", pattern)


def input_props_for(name: str, node: SchemaNode) -> InputProps:
    """
    Build input props for a field node.

    Args:
        name: Input name attribute
        node: The field's schema node (wrappers included)

    Returns:
        InputProps with type, required flag and constraints
    """
    leaf = _peel(node)
    props = InputProps(name=name, type=INPUT_TYPES.get(leaf.kind, "text"))

    if leaf.kind is NodeKind.STRING:
        props.type = _string_type(leaf)
        props.min_length = leaf.constraint("min_length")
        props.max_length = leaf.constraint("max_length")
        props.pattern = _pattern(leaf)
    elif leaf.kind is NodeKind.NUMBER:
        props.min = leaf.constraint("ge")
        if props.min is None:
            props.min = leaf.constraint("gt")
        props.max = leaf.constraint("le")
        if props.max is None:
            props.max = leaf.constraint("lt")
    elif leaf.kind is NodeKind.DATE and is_datetime(leaf):
        props.type = "datetime-local"

    # Fields with a default may be left blank
    if node.kind is not NodeKind.DEFAULT:
        props.required = True
    return props


def derive_input_props(schema: Any, name: str, **overrides: Any) -> InputProps:
    """
    Input props for one field of a schema.

    Args:
        schema: Pydantic model class (or annotation resolving to one)
        name: Field input key
        **overrides: Attributes that replace the derived ones

    Returns:
        InputProps for the field

    Raises:
        UnknownFieldError: If the schema has no such field
    """
    shape = schema_node(schema).unwrap()
    if shape.kind is not NodeKind.OBJECT or name not in shape.fields:
        raise UnknownFieldError(name)
    props = input_props_for(name, shape.fields[name])
    if overrides:
        props = props.model_copy(update=_normalise_overrides(overrides))
    logger.debug("Derived input props", field=name, type=props.type)
    return props


def _normalise_overrides(overrides: dict[str, Any]) -> dict[str, Any]:
    # Accept the attribute spelling (minLength) as well as the field name
    aliases = {
        field.alias: name for name, field in InputProps.model_fields.items() if field.alias
    }
    return {aliases.get(key, key): value for key, value in overrides.items()}


def use_form_input_props(schema: Any, **defaults: Any) -> Callable[..., InputProps]:
    """
    Bind a schema once and get a ``props(name, **overrides)`` helper.

    Per-call overrides take precedence over the bound defaults.
    """

    def props(name: str, **overrides: Any) -> InputProps:
        return derive_input_props(schema, name, **{**defaults, **overrides})

    return props
