"""Params2Model - parse query strings and form data into pydantic models."""

__version__ = "0.1.0"

from params2model.engine import parse_params, parse_params_or_fail
from params2model.errors import (
    Params2ModelError,
    ParamsValidationError,
    SchemaShapeError,
    UnexpectedSchemaNodeError,
    UnknownFieldError,
)
from params2model.input_props import derive_input_props, use_form_input_props
from params2model.requests import (
    parse_form_data,
    parse_form_data_or_fail,
    parse_search_params,
    parse_search_params_or_fail,
)
from params2model.schemas import InputProps, ParseFailure, ParseResult, ParseSuccess

__all__ = [
    "parse_params",
    "parse_params_or_fail",
    "parse_search_params",
    "parse_search_params_or_fail",
    "parse_form_data",
    "parse_form_data_or_fail",
    "derive_input_props",
    "use_form_input_props",
    "InputProps",
    "ParseResult",
    "ParseSuccess",
    "ParseFailure",
    "Params2ModelError",
    "ParamsValidationError",
    "SchemaShapeError",
    "UnexpectedSchemaNodeError",
    "UnknownFieldError",
]
