"""Coercion engine - rebuilds nested, typed input from flat request params.

Flat params use two addressing conventions:
- ``address.city`` nests into the ``address`` object
- ``tags[]`` marks a repeated key; array-ness itself comes from the schema

Each pair is routed through the schema, coerced by the leaf's kind and
written into a plain dict. The dict is then validated once by pydantic and
discarded.
"""

import functools
import math
from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from .config import settings
from .errors import ParamsValidationError, SchemaShapeError, UnexpectedSchemaNodeError
from .schemas.nodes import NodeKind, SchemaNode, describe, is_datetime, is_model
from .schemas.result import ErrorMap, ParseFailure, ParseResult, ParseSuccess
from .utils.logging_setup import get_logger

logger = get_logger(__name__)

ARRAY_MARKER = "[]"

Params = Union[Iterable[tuple[str, Any]], Mapping[str, Optional[str]]]

# Per-pair record of array slots already filled: id(list) -> index
Claims = dict[int, int]


# --- Leaf coercion ---


def _identity(node: SchemaNode, raw: str) -> Any:
    return raw


def coerce_number(node: SchemaNode, raw: str) -> Any:
    """Parse an int, then a float; unparseable input is left for the validator."""
    if issubclass(node.annotation, Decimal):
        try:
            return Decimal(raw)
        except InvalidOperation:
            return raw
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        number = float(raw)
    except ValueError:
        return raw
    return raw if math.isnan(number) else number


def coerce_boolean(node: SchemaNode, raw: str) -> bool:
    """
    ``"true"`` and ``"false"`` map to their booleans.

    Any other non-empty string (``"on"``, ``"yes"``, ``"0"``) is truthy, which
    is what a checkbox posting its default ``on`` value needs.
    """
    if raw == "true":
        return True
    if raw == "false":
        return False
    return bool(raw)


def coerce_date(node: SchemaNode, raw: str) -> Any:
    """Parse ISO-8601; date fields keep only the calendar date."""
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return raw
    return parsed if is_datetime(node) else parsed.date()


COERCERS: dict[NodeKind, Callable[[SchemaNode, str], Any]] = {
    NodeKind.STRING: _identity,
    NodeKind.LITERAL: _identity,
    NodeKind.ENUM: _identity,
    NodeKind.NUMBER: coerce_number,
    NodeKind.BOOLEAN: coerce_boolean,
    NodeKind.DATE: coerce_date,
}


def coerce_leaf(node: SchemaNode, raw: Any, key: str) -> Any:
    """
    Coerce a raw value by the kind of a leaf node.

    Args:
        node: Leaf node, already unwrapped
        raw: Value from the flat input
        key: Field key, used in the error message

    Returns:
        Coerced value, or ``raw`` when coercion does not apply

    Raises:
        UnexpectedSchemaNodeError: If the node is not a supported leaf kind
    """
    coercer = COERCERS.get(node.kind)
    if coercer is None:
        raise UnexpectedSchemaNodeError(key, node.type_name)
    if not isinstance(raw, str):
        # Uploaded files and pre-typed mapping values go to the validator as-is
        return raw
    return coercer(node, raw)


# --- Routing ---


def has_fields(node: SchemaNode) -> bool:
    """Check whether a node (or any union option) can hold nested keys."""
    shape = node.unwrap()
    if shape.kind is NodeKind.UNION:
        return any(has_fields(option) for option in shape.options)
    return shape.kind is NodeKind.OBJECT


def write_leaf(output: dict[str, Any], node: SchemaNode, key: str, value: Any, claims: Claims) -> None:
    """Coerce ``value`` by the field's node and store it under ``key``."""
    leaf = node.unwrap()
    accumulate = leaf.kind is NodeKind.ARRAY
    if accumulate:
        leaf = leaf.inner.unwrap()
        if leaf.kind is NodeKind.ARRAY:
            raise UnexpectedSchemaNodeError(key, leaf.type_name)

    if leaf.kind is NodeKind.OBJECT or (
        leaf.kind is NodeKind.UNION
        and all(option.unwrap().kind is NodeKind.OBJECT for option in leaf.options)
    ):
        logger.debug("Value posted for a nested object, dropping", key=key)
        return

    parsed = coerce_leaf(leaf, value, key)

    if not accumulate:
        output[key] = parsed
        return

    items = output.get(key)
    if not isinstance(items, list):
        items = output[key] = []
    # A union fan-out revisits the same list for the same pair: overwrite the
    # slot this pair already claimed instead of appending a duplicate
    slot = claims.get(id(items))
    if slot is None:
        claims[id(items)] = len(items)
        items.append(parsed)
    else:
        items[slot] = parsed


def assign(
    output: dict[str, Any],
    node: SchemaNode,
    key: str,
    value: Any,
    claims: Claims,
    root: bool = False,
) -> None:
    """
    Route one key/value pair into ``output`` following ``node``.

    Args:
        output: Dict being built for this level of nesting
        node: Schema node for this level
        key: Remaining key (dots and array marker still attached)
        value: Raw value
        claims: Array slots claimed by this pair so far
        root: True for the call made on the schema root

    Raises:
        SchemaShapeError: If the root schema has no field mapping
        UnexpectedSchemaNodeError: If the addressed field has an unsupported type
    """
    shape = node.unwrap()

    if shape.kind is NodeKind.UNION:
        # Every branch gets the pair; validation decides which one holds
        for option in shape.options:
            assign(output, option, key, value, claims, root=root)
        return

    if shape.kind is not NodeKind.OBJECT:
        if root:
            raise SchemaShapeError(key)
        logger.debug("No fields under key, dropping", key=key, kind=shape.kind.value)
        return

    fields = shape.fields

    if "." in key:
        parent, rest = key.split(".", 1)
        if parent not in fields or not has_fields(fields[parent]):
            logger.debug("No nested fields under key, dropping", key=parent)
            return
        child = output.get(parent)
        if not isinstance(child, dict):
            child = output[parent] = {}
        assign(child, fields[parent], rest, value, claims)
        return

    if key.endswith(ARRAY_MARKER):
        key = key[: -len(ARRAY_MARKER)]

    field = fields.get(key)
    if field is None:
        logger.debug("Unknown key, dropping", key=key)
        return

    write_leaf(output, field, key, value, claims)


# --- Entry points ---


def iter_params(params: Params) -> Iterable[tuple[str, Any]]:
    """Normalise mappings, multi-dicts and pair iterables to key/value pairs."""
    if hasattr(params, "multi_items"):
        return params.multi_items()
    if isinstance(params, Mapping):
        return params.items()
    return params


def schema_node(schema: Any) -> SchemaNode:
    """Root node for a schema (a model class or any annotation)."""
    if is_model(schema):
        return SchemaNode(NodeKind.OBJECT, schema)
    return describe(schema)


@functools.lru_cache(maxsize=128)
def _cached_adapter(schema: Any) -> TypeAdapter:
    return TypeAdapter(schema)


def validate(schema: Any, data: dict[str, Any]) -> Any:
    """Run pydantic validation for a model class or any other annotation."""
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return schema.model_validate(data)
    try:
        adapter = _cached_adapter(schema)
    except TypeError:
        # Unhashable annotation (e.g. dict metadata inside Annotated)
        adapter = TypeAdapter(schema)
    return adapter.validate_python(data)


def add_error(errors: ErrorMap, key: str, message: str) -> None:
    """Add a message; a second message turns the entry into a list."""
    if key not in errors:
        errors[key] = message
        return
    entry = errors[key]
    if not isinstance(entry, list):
        entry = errors[key] = [entry]
    entry.append(message)


def collect_errors(error: ValidationError) -> ErrorMap:
    """Group validation issues by top-level field name."""
    errors: ErrorMap = {}
    for issue in error.errors(include_url=False):
        loc = issue["loc"]
        key = str(loc[0]) if loc else settings.root_error_key
        label = f"{key}[{loc[1]}]" if len(loc) > 1 and isinstance(loc[1], int) else key
        logger.debug("Validation issue", field=label, code=issue["type"], message=issue["msg"])
        add_error(errors, key, issue["msg"])
    return errors


def build_input(params: Params, schema: Any) -> dict[str, Any]:
    """Coerce flat params into the nested dict handed to the validator."""
    root = schema_node(schema)
    output: dict[str, Any] = {}
    for key, value in iter_params(params):
        # An empty param counts as not sent at all
        if value is None or value == "":
            continue
        assign(output, root, str(key), value, claims={}, root=True)
    return output


def parse_params(params: Params, schema: Any) -> ParseResult:
    """
    Parse flat params against a schema.

    Args:
        params: Mapping, multi-dict (``multi_items()``) or iterable of pairs
        schema: Pydantic model class, pydantic dataclass or annotation

    Returns:
        ParseSuccess with the validated data, or ParseFailure with errors

    Raises:
        SchemaShapeError: If the schema root has no field mapping
        UnexpectedSchemaNodeError: If an addressed field has an unsupported type
    """
    data = build_input(params, schema)
    try:
        validated = validate(schema, data)
    except ValidationError as e:
        errors = collect_errors(e)
        logger.debug("Params failed validation", schema=schema_node(schema).type_name, fields=list(errors))
        return ParseFailure(errors=errors)
    return ParseSuccess(data=validated)


def unwrap_result(result: ParseResult) -> Any:
    """Return the data of a successful result or raise ParamsValidationError."""
    if not result.success:
        raise ParamsValidationError(result.errors)
    return result.data


def parse_params_or_fail(params: Params, schema: Any) -> Any:
    """Like parse_params, but returns the data and raises on validation errors."""
    return unwrap_result(parse_params(params, schema))
