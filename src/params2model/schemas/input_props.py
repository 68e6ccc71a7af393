"""InputProps schema - HTML input attributes derived from a field."""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class InputProps(BaseModel):
    """Attributes for an ``<input>`` element, named the way JSX spells them."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: str = "text"
    required: Optional[bool] = None
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    min_length: Optional[int] = Field(default=None, alias="minLength")
    max_length: Optional[int] = Field(default=None, alias="maxLength")
    pattern: Optional[str] = None

    def as_attrs(self) -> dict[str, Any]:
        """Attribute dict with unset attributes omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)
