"""Schema node view over pydantic models and type annotations.

The coercion engine never inspects pydantic internals directly. Instead every
model field is described once as a ``SchemaNode``: a small immutable record
whose ``kind`` discriminant says which shape it is (object, union, wrapper,
array or leaf). Object fields are resolved lazily and cached per model class.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import functools
import types
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union, get_args, get_origin
from uuid import UUID

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    BeforeValidator,
    EmailStr,
    NameEmail,
    PlainValidator,
    WrapValidator,
)
from pydantic.fields import FieldInfo

NoneType = type(None)

# Functional validators turn a node into an effect over the same shape
EFFECT_TYPES = (AfterValidator, BeforeValidator, PlainValidator, WrapValidator)

ARRAY_ORIGINS = {
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
}

STRING_TYPES = (str, UUID, AnyUrl, EmailStr, NameEmail)
NUMBER_TYPES = (int, float, Decimal)


class NodeKind(str, Enum):
    """Discriminant of a schema node."""

    OBJECT = "object"
    UNION = "union"
    OPTIONAL = "optional"
    DEFAULT = "default"
    EFFECT = "effect"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ENUM = "enum"
    LITERAL = "literal"
    UNSUPPORTED = "unsupported"


WRAPPER_KINDS = frozenset({NodeKind.OPTIONAL, NodeKind.DEFAULT, NodeKind.EFFECT})


@dataclass(frozen=True)
class SchemaNode:
    """
    Immutable description of one expected value.

    - ``inner`` is the wrapped node for OPTIONAL, DEFAULT and EFFECT, and the
      element node for ARRAY.
    - ``options`` holds the members of a UNION, in declaration order.
    - ``constraints`` keeps Annotated metadata (MinLen, Ge, pattern, ...).
    """

    kind: NodeKind
    annotation: Any = None
    inner: Optional[SchemaNode] = None
    options: tuple[SchemaNode, ...] = ()
    constraints: tuple[Any, ...] = ()

    @property
    def fields(self) -> dict[str, SchemaNode]:
        """Field mapping of an OBJECT node, keyed by input key."""
        if self.kind is not NodeKind.OBJECT:
            raise TypeError(f"{self.kind.value} node has no fields")
        return object_fields(self.annotation)

    @property
    def type_name(self) -> str:
        return getattr(self.annotation, "__name__", None) or repr(self.annotation)

    def constraint(self, name: str) -> Any:
        """First non-None value of a constraint attribute (``min_length``, ``ge``, ...)."""
        for item in self.constraints:
            value = getattr(item, name, None)
            if value is not None:
                return value
        return None

    def unwrap(self) -> SchemaNode:
        """Peel OPTIONAL, DEFAULT and EFFECT wrappers."""
        node = self
        while node.kind in WRAPPER_KINDS:
            node = node.inner
        return node


def is_model(annotation: Any) -> bool:
    """Check whether an annotation is a pydantic model or pydantic dataclass."""
    if not isinstance(annotation, type):
        return False
    if issubclass(annotation, BaseModel):
        return True
    return dataclasses.is_dataclass(annotation) and hasattr(annotation, "__pydantic_fields__")


def input_key(name: str, field: FieldInfo) -> str:
    """Key under which a field is read from input (validation alias wins)."""
    if isinstance(field.validation_alias, str):
        return field.validation_alias
    return field.alias or name


def model_field_infos(model: type) -> dict[str, FieldInfo]:
    if issubclass(model, BaseModel):
        return dict(model.model_fields)
    return dict(model.__pydantic_fields__)


@functools.lru_cache(maxsize=None)
def object_fields(model: type) -> dict[str, SchemaNode]:
    """Describe every field of a model, keyed by input key."""
    return {
        input_key(name, field): describe_field(field)
        for name, field in model_field_infos(model).items()
    }


def describe_field(field: FieldInfo) -> SchemaNode:
    """Describe one model field; fields with a default are wrapped in DEFAULT."""
    node = describe(field.annotation, tuple(field.metadata))
    if not field.is_required():
        node = SchemaNode(NodeKind.DEFAULT, field.annotation, inner=node)
    return node


def _flatten_metadata(metadata: tuple[Any, ...]) -> tuple[Any, ...]:
    flat: list[Any] = []
    for item in metadata:
        if isinstance(item, FieldInfo):
            flat.extend(item.metadata)
        else:
            flat.append(item)
    return tuple(flat)


def describe(annotation: Any, metadata: tuple[Any, ...] = ()) -> SchemaNode:
    """
    Build the schema node for a type annotation.

    Args:
        annotation: Any annotation pydantic accepts on a field
        metadata: Annotated metadata collected by pydantic or by outer Annotated

    Returns:
        SchemaNode describing the annotation
    """
    metadata = _flatten_metadata(metadata)
    origin = get_origin(annotation)

    if origin is Annotated:
        base, *extra = get_args(annotation)
        return describe(base, metadata + tuple(extra))

    effects = [item for item in metadata if isinstance(item, EFFECT_TYPES)]
    if effects:
        constraints = tuple(item for item in metadata if not isinstance(item, EFFECT_TYPES))
        return SchemaNode(NodeKind.EFFECT, annotation, inner=describe(annotation, constraints))

    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        members = [arg for arg in args if arg is not NoneType]
        if len(members) == 1:
            inner = describe(members[0], metadata)
        else:
            inner = SchemaNode(
                NodeKind.UNION,
                annotation,
                options=tuple(describe(member) for member in members),
            )
        if len(members) < len(args):
            return SchemaNode(NodeKind.OPTIONAL, annotation, inner=inner)
        return inner

    if origin is Literal:
        return SchemaNode(NodeKind.LITERAL, annotation, constraints=metadata)

    if origin in ARRAY_ORIGINS or origin is tuple:
        args = get_args(annotation)
        if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
            return SchemaNode(NodeKind.UNSUPPORTED, annotation)
        element = describe(args[0]) if args else describe(Any)
        return SchemaNode(NodeKind.ARRAY, annotation, inner=element, constraints=metadata)

    if not isinstance(annotation, type):
        return SchemaNode(NodeKind.UNSUPPORTED, annotation)

    if is_model(annotation):
        return SchemaNode(NodeKind.OBJECT, annotation)
    # Order matters: str enums are str, bool is int, datetime is date
    if issubclass(annotation, Enum):
        kind = NodeKind.ENUM
    elif issubclass(annotation, bool):
        kind = NodeKind.BOOLEAN
    elif issubclass(annotation, NUMBER_TYPES):
        kind = NodeKind.NUMBER
    elif issubclass(annotation, date):
        kind = NodeKind.DATE
    elif issubclass(annotation, STRING_TYPES):
        kind = NodeKind.STRING
    else:
        kind = NodeKind.UNSUPPORTED
    return SchemaNode(kind, annotation, constraints=metadata)


def is_datetime(node: SchemaNode) -> bool:
    """Check whether a DATE node carries a time component."""
    return isinstance(node.annotation, type) and issubclass(node.annotation, datetime)
