"""ParseResult schema - the output of every parse operation."""

from typing import Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")

ErrorMap = dict[str, Union[str, list[str]]]


class ParseSuccess(BaseModel, Generic[T]):
    """Validated data. ``errors`` is always None."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    success: Literal[True] = True
    data: T
    errors: None = None


class ParseFailure(BaseModel):
    """
    Validation errors keyed by top-level field name.

    A field with one issue maps to its message; a field with several maps to
    the messages in the order the validator reported them.
    """

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    data: None = None
    errors: ErrorMap

    def messages(self, field: str) -> list[str]:
        """All messages for a field as a list (empty when the field is clean)."""
        entry = self.errors.get(field)
        if entry is None:
            return []
        return list(entry) if isinstance(entry, list) else [entry]


ParseResult = Union[ParseSuccess[T], ParseFailure]
