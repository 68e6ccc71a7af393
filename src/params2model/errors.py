"""Exception hierarchy for Params2Model."""

import json


class Params2ModelError(Exception):
    """Base class for all Params2Model errors."""

    pass


class SchemaShapeError(Params2ModelError):
    """The schema has no field mapping where a key needs one (schema authoring bug)."""

    def __init__(self, key: str):
        super().__init__(f"Could not find shape for key {key}")
        self.key = key


class UnexpectedSchemaNodeError(Params2ModelError):
    """A field's annotation is not a kind the coercion engine understands."""

    def __init__(self, key: str, type_name: str):
        super().__init__(f"Unexpected type {type_name} for key {key}")
        self.key = key
        self.type_name = type_name


class UnknownFieldError(Params2ModelError, KeyError):
    """Input props were requested for a field the schema does not declare."""

    def __init__(self, name: str):
        super().__init__(f"no such key: {name}")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class ParamsValidationError(Params2ModelError, ValueError):
    """
    Raised by the ``*_or_fail`` helpers when validation fails.

    The message is the JSON serialization of the error mapping so it
    survives being logged or re-raised as plain text.
    """

    def __init__(self, errors: dict[str, str | list[str]]):
        super().__init__(json.dumps(errors))
        self.errors = errors
