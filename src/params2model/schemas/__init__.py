"""Schema nodes and result models."""

from params2model.schemas.input_props import InputProps
from params2model.schemas.nodes import NodeKind, SchemaNode, describe, describe_field
from params2model.schemas.result import ErrorMap, ParseFailure, ParseResult, ParseSuccess

__all__ = [
    "NodeKind",
    "SchemaNode",
    "describe",
    "describe_field",
    "InputProps",
    "ErrorMap",
    "ParseSuccess",
    "ParseFailure",
    "ParseResult",
]
