from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Annotated, Any, ClassVar, Dict, Iterable, List, Optional, Union

from bson import ObjectId
from pydantic import (
    AfterValidator,
    BaseModel,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    ValidationError,
    field_validator,
    model_validator,
)

from utils.exceptions import InvalidInput

from . import DietType, ORMModel


def new_object_id() -> str:
    return str(ObjectId())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def finite_number(value: Union[int, float]) -> float:
    try:
        number = float(value)
    except OverflowError:
        raise ValueError("must be a finite number")
    if not math.isfinite(number):
        raise ValueError("must be a finite number")
    return number


def not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


def normalise_child_id(value: str) -> str:
    # Round-tripped children keep their identifier, always as lowercase hex
    if not ObjectId.is_valid(value):
        raise ValueError("must be a 24 character hex ObjectId")
    return str(ObjectId(value))


def ensure_distinct_ids(nodes: Iterable[Any], label: str) -> None:
    ids = [node.id for node in nodes if node.id is not None]
    if len(ids) != len(set(ids)):
        raise ValueError(f"has duplicate {label} ids")


class MenuNode(ORMModel):
    def to_public_dict(self) -> Dict[str, Any]:
        # Wire names, absent optionals dropped
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Price(MenuNode):
    standard: float = 0
    happy_hour: Optional[float] = Field(None, alias="happyHour")
    is_happy_hour_active: bool = Field(False, alias="isHappyHourActive")

    @classmethod
    def zero(cls) -> "Price":
        return cls(standard=0, happy_hour=0, is_happy_hour_active=False)


# 1. VARIANT
class Variant(MenuNode):
    id: str = Field(default_factory=new_object_id, alias="_id")
    name: str
    price: Price
    diet_type: DietType = Field(DietType.NONE, alias="type")


# 2. OPTION GROUP
class OptionGroup(MenuNode):
    id: str = Field(default_factory=new_object_id, alias="_id")
    title: Optional[str] = None
    description: Optional[str] = None
    variants: List[Variant] = Field(default_factory=list)


# 3. ITEM
class Item(MenuNode):
    """A menu entry priced either flat (``price``) or through ``option_groups``, never both."""

    id: str = Field(default_factory=new_object_id, alias="_id")
    name: str
    image: Optional[str] = None
    description: Optional[str] = None
    diet_type: DietType = Field(DietType.VEG, alias="type")
    has_options: bool = Field(False, alias="hasOptions")
    price: Optional[Price] = None
    option_groups: Optional[List[OptionGroup]] = Field(None, alias="optionGroups")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")

    def use_price(self, price: Price) -> None:
        self.has_options = False
        self.price = price
        self.option_groups = None

    def use_option_groups(self, option_groups: List[OptionGroup]) -> None:
        self.has_options = True
        self.option_groups = option_groups
        self.price = None


# 4. SUBCATEGORY
class Subcategory(MenuNode):
    id: str = Field(default_factory=new_object_id, alias="_id")
    name: str
    items: List[Item] = Field(default_factory=list)


# 5. CATEGORY
class Category(MenuNode):
    # Assigned by the store on insert
    id: Optional[str] = Field(None, alias="_id")
    name: str = Field(..., alias="category")
    image: str
    subcategories: List[Subcategory] = Field(default_factory=list)


class MenuResponse(BaseModel):
    message: Optional[str] = None
    data: Any = None


# 6. REQUEST BODIES
FiniteNumber = Annotated[Union[StrictInt, StrictFloat], AfterValidator(finite_number)]
Name = Annotated[str, AfterValidator(not_blank)]
ChildId = Annotated[str, AfterValidator(normalise_child_id)]


class MenuInput(ORMModel):
    """Base for request bodies. ``subject`` names the entity in InvalidInput messages."""

    subject: ClassVar[str] = "Request"

    @classmethod
    def parse(cls, data: Any):
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidInput.from_errors(exc.errors(), cls.subject) from exc


class PriceIn(MenuInput):
    standard: FiniteNumber
    happy_hour: Optional[FiniteNumber] = Field(None, alias="happyHour")
    is_happy_hour_active: Optional[StrictBool] = Field(None, alias="isHappyHourActive")

    def to_price(self) -> Price:
        return Price(
            standard=self.standard,
            happy_hour=self.happy_hour,
            is_happy_hour_active=bool(self.is_happy_hour_active),
        )


class VariantIn(MenuInput):
    id: Optional[ChildId] = Field(None, alias="_id")
    name: Name
    price: PriceIn
    diet_type: Optional[DietType] = Field(None, alias="type")

    def to_variant(self) -> Variant:
        return Variant(
            id=self.id or new_object_id(),
            name=self.name,
            price=self.price.to_price(),
            diet_type=self.diet_type or DietType.NONE,
        )


class OptionGroupIn(MenuInput):
    id: Optional[ChildId] = Field(None, alias="_id")
    title: Optional[str] = None
    description: Optional[str] = None
    variants: List[VariantIn] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_variant_ids(self):
        ensure_distinct_ids(self.variants, "variant")
        return self

    def to_option_group(self) -> OptionGroup:
        return OptionGroup(
            id=self.id or new_object_id(),
            title=self.title,
            description=self.description,
            variants=[variant.to_variant() for variant in self.variants],
        )


class ItemBase(MenuInput):
    subject: ClassVar[str] = "Item"

    image: Optional[str] = None
    description: Optional[str] = None
    diet_type: Optional[DietType] = Field(None, alias="type")
    has_options: Optional[StrictBool] = Field(None, alias="hasOptions")
    price: Optional[PriceIn] = None
    option_groups: Optional[List[OptionGroupIn]] = Field(None, alias="optionGroups")

    @model_validator(mode="after")
    def check_option_group_ids(self):
        ensure_distinct_ids(self.option_groups or [], "option group")
        return self


class ItemCreate(ItemBase):
    name: Name


class ItemUpdate(ItemBase):
    """Partial update: only fields present in the body (``model_fields_set``) change."""

    name: Optional[Name] = None

    @field_validator("name", "has_options")
    @classmethod
    def reject_null(cls, value):
        # Runs only for fields sent in the body
        if value is None:
            raise ValueError("must not be null")
        return value


class SubcategoryUpdate(MenuInput):
    subject: ClassVar[str] = "Subcategory"

    name: Name


class SubcategoryIn(SubcategoryUpdate):
    items: Optional[List[ItemCreate]] = None


class CategoryUpdate(MenuInput):
    subject: ClassVar[str] = "Category"

    name: Name = Field(..., alias="category")
    image: Name


class CategoryIn(CategoryUpdate):
    subcategories: Optional[List[SubcategoryIn]] = None
