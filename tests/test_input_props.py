"""Tests for HTML input attribute derivation."""

from datetime import date, datetime
from typing import Annotated, Optional

import pytest
from pydantic import BaseModel, EmailStr, Field, HttpUrl

from params2model import InputProps, UnknownFieldError, derive_input_props, use_form_input_props


class Signup(BaseModel):
    username: str = Field(min_length=3, max_length=20, pattern=r"^[a-z0-9_]+$")
    email: EmailStr
    website: Optional[HttpUrl] = None
    age: int = Field(ge=13, le=120)
    rating: Annotated[float, Field(gt=0, lt=5)] = 1.0
    newsletter: bool = False
    birthday: Optional[date] = None
    appointment: datetime
    interests: list[Annotated[str, Field(max_length=30)]] = Field(default_factory=list)
    note: Optional[str] = None
    nickname: Optional[str]


def test_string_constraints():
    props = derive_input_props(Signup, "username")
    assert props.as_attrs() == {
        "name": "username",
        "type": "text",
        "required": True,
        "minLength": 3,
        "maxLength": 20,
        "pattern": "^[a-z0-9_]+$",
    }


def test_email_and_url_types():
    assert derive_input_props(Signup, "email").type == "email"
    website = derive_input_props(Signup, "website")
    assert website.type == "url"
    assert website.required is None


def test_number_bounds():
    assert derive_input_props(Signup, "age").as_attrs() == {
        "name": "age",
        "type": "number",
        "required": True,
        "min": 13,
        "max": 120,
    }


def test_exclusive_bounds_used_when_inclusive_missing():
    props = derive_input_props(Signup, "rating")
    assert (props.min, props.max) == (0, 5)
    assert props.required is None


def test_checkbox_and_dates():
    assert derive_input_props(Signup, "newsletter").as_attrs() == {"name": "newsletter", "type": "checkbox"}
    assert derive_input_props(Signup, "birthday").type == "date"
    assert derive_input_props(Signup, "appointment").type == "datetime-local"


def test_array_uses_element():
    props = derive_input_props(Signup, "interests")
    assert props.type == "text"
    assert props.max_length == 30
    assert props.required is None


def test_optional_without_constraints():
    assert derive_input_props(Signup, "note").as_attrs() == {"name": "note", "type": "text"}


def test_optional_without_default_is_required():
    """None is an accepted value, but the key itself must be sent."""
    assert derive_input_props(Signup, "nickname").as_attrs() == {"name": "nickname", "type": "text", "required": True}


def test_overrides_replace_derived_values():
    props = derive_input_props(Signup, "username", type="search", minLength=5)
    assert props.type == "search"
    assert props.min_length == 5
    assert props.max_length == 20


def test_unknown_field():
    with pytest.raises(UnknownFieldError, match="no such key: nope"):
        derive_input_props(Signup, "nope")


def test_unknown_field_is_key_error():
    with pytest.raises(KeyError):
        derive_input_props(Signup, "nope")


def test_use_form_input_props_merges_defaults():
    props = use_form_input_props(Signup, required=False)
    assert props("username").required is False
    assert props("username", required=True).required is True
    assert isinstance(props("age"), InputProps)
