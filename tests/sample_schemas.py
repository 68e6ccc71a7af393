"""Schemas shared by the test modules (also imported by the CLI tests)."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, Field, model_validator


class Color(str, Enum):
    RED = "red"
    GREEN = "green"


class Address(BaseModel):
    city: str
    zip: str


class Person(BaseModel):
    name: str
    age: Optional[int] = None
    address: Optional[Address] = None
    tags: list[str] = Field(default_factory=list)


class Profile(BaseModel):
    name: Optional[str] = None


class Order(BaseModel):
    quantity: int
    price: float = 0.0
    total: Optional[Decimal] = None
    gift: bool = False
    placed_on: Optional[date] = None
    deliver_at: Optional[datetime] = None
    color: Optional[Color] = None
    size: Literal["s", "m", "l"] = "m"
    codes: list[int] = Field(default_factory=list)


class Slugged(BaseModel):
    slug: Annotated[str, AfterValidator(str.lower)]
    doubled: Annotated[int, AfterValidator(lambda v: v * 2)] = 0


class Card(BaseModel):
    kind: Literal["card"]
    number: str


class Bank(BaseModel):
    kind: Literal["bank"]
    iban: str


class Checkout(BaseModel):
    payment: Union[Card, Bank]


class PasswordChange(BaseModel):
    password: str
    confirm: str

    @model_validator(mode="after")
    def passwords_match(self) -> PasswordChange:
        if self.password != self.confirm:
            raise ValueError("passwords do not match")
        return self


class Category(BaseModel):
    name: str
    children: list[Category] = Field(default_factory=list)


class Contact(BaseModel):
    email_address: str = Field(alias="email")
