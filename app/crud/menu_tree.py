"""Lookup and mode rules over the category -> subcategory -> item -> option group -> variant tree.

Request bodies arrive already typed (``schemas.menu_schema`` input models);
the builders here apply the pricing-mode rules pydantic cannot express and
turn them into stored nodes, raising ``InvalidInput``/``Conflict``. Resolvers
walk an already loaded category and raise ``NotFound`` naming the first level
that does not resolve. Nothing in this module touches storage.
"""
from typing import Any, Iterable, List, Optional, Sequence, TypeVar

from bson import ObjectId

from schemas import DietType
from schemas.menu_schema import (
    Category,
    Item,
    ItemCreate,
    ItemUpdate,
    OptionGroup,
    OptionGroupIn,
    Price,
    PriceIn,
    Subcategory,
    SubcategoryIn,
    Variant,
    utcnow,
)
from utils.exceptions import Conflict, InvalidInput, NotFound

NodeType = TypeVar("NodeType")

OPTION_GROUPS_REQUIRED = "Option groups are required when hasOptions is true."
PRICE_REQUIRED = "Standard price is required when hasOptions is false."


# ---------------- IDENTIFIERS ----------------
def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and ObjectId.is_valid(value)


def ensure_id(level: str, value: Any) -> str:
    """Reject a malformed identifier; return it in canonical lowercase hex."""
    if not is_valid_id(value):
        raise InvalidInput(f"Invalid {level.replace('_', ' ')} ID.")
    return str(ObjectId(value))


def ensure_ids(**ids: Optional[str]) -> List[str]:
    """Check every identifier before any lookup; values come back normalised, in argument order."""
    return [ensure_id(level, value) for level, value in ids.items()]


# ---------------- ORDERED CONTAINERS ----------------
def find_by_id(nodes: Sequence[NodeType], node_id: str) -> Optional[NodeType]:
    return next((node for node in nodes if node.id == node_id), None)


def remove_by_id(nodes: List[NodeType], node_id: str) -> NodeType:
    for index, node in enumerate(nodes):
        if node.id == node_id:
            return nodes.pop(index)
    raise KeyError(node_id)


def resolve_subcategory(category: Category, subcategory_id: str) -> Subcategory:
    subcategory = find_by_id(category.subcategories, subcategory_id)
    if subcategory is None:
        raise NotFound("subcategory")
    return subcategory


def resolve_item(subcategory: Subcategory, item_id: str) -> Item:
    item = find_by_id(subcategory.items, item_id)
    if item is None:
        raise NotFound("item")
    return item


def resolve_option_group(item: Item, option_group_id: str) -> OptionGroup:
    if not item.has_options or not item.option_groups:
        raise InvalidInput("Item does not have option groups.")
    group = find_by_id(item.option_groups, option_group_id)
    if group is None:
        raise NotFound("option group")
    return group


def resolve_variant(group: OptionGroup, variant_id: str) -> Variant:
    variant = find_by_id(group.variants, variant_id)
    if variant is None:
        raise NotFound("variant")
    return variant


def ensure_unique_name(nodes: Iterable[Any], name: str, message: str, exclude_id: Optional[str] = None) -> None:
    for node in nodes:
        if node.name == name and node.id != exclude_id:
            raise Conflict(message)


# ---------------- PRICING BLOCKS ----------------
def build_price(price: Optional[PriceIn], message: str) -> Price:
    if price is None:
        raise InvalidInput(message)
    return price.to_price()


def build_option_groups(groups: Optional[List[OptionGroupIn]], message: str = OPTION_GROUPS_REQUIRED) -> List[OptionGroup]:
    if not groups:
        raise InvalidInput(message)
    return [group.to_option_group() for group in groups]


# ---------------- ITEMS ----------------
def build_item(obj_in: ItemCreate) -> Item:
    item = Item(
        name=obj_in.name,
        image=obj_in.image,
        description=obj_in.description,
        diet_type=obj_in.diet_type or DietType.VEG,
    )
    if obj_in.has_options:
        item.use_option_groups(build_option_groups(obj_in.option_groups))
    else:
        item.use_price(build_price(obj_in.price, PRICE_REQUIRED))
    return item


def item_changes(item: Item, obj_in: ItemUpdate) -> dict:
    """Plan a partial item update against the item's current pricing mode.

    Returns the attribute changes to apply; a key is present only when the
    matching field was sent. ``price`` and ``option_groups`` are checked
    together with ``has_options`` so the caller switches the whole pricing
    block at once.
    """
    sent = obj_in.model_fields_set
    changes: dict = {}

    for attr in ("name", "image", "description"):
        if attr in sent:
            changes[attr] = getattr(obj_in, attr)
    if "diet_type" in sent:
        changes["diet_type"] = obj_in.diet_type or DietType.VEG

    if "has_options" in sent:
        if obj_in.has_options:
            changes["option_groups"] = build_option_groups(obj_in.option_groups)
        else:
            changes["price"] = build_price(obj_in.price, PRICE_REQUIRED)
    elif item.has_options:
        if "price" in sent:
            raise InvalidInput("Set hasOptions to false to give an item with options a standard price.")
        if "option_groups" in sent:
            changes["option_groups"] = build_option_groups(
                obj_in.option_groups, "Option groups array cannot be empty for items with options."
            )
    else:
        if "option_groups" in sent:
            raise InvalidInput("Set hasOptions to true to give an item without options option groups.")
        if "price" in sent:
            changes["price"] = build_price(obj_in.price, "Standard price must be a number.")
    return changes


def apply_item_changes(item: Item, changes: dict) -> Item:
    for attr in ("name", "image", "description", "diet_type"):
        if attr in changes:
            setattr(item, attr, changes[attr])
    if "option_groups" in changes:
        item.use_option_groups(changes["option_groups"])
    elif "price" in changes:
        item.use_price(changes["price"])
    item.updated_at = utcnow()
    return item


# ---------------- SUBCATEGORIES ----------------
def build_items(items: Optional[List[ItemCreate]], label: str) -> List[Item]:
    built: List[Item] = []
    for item_no, obj_in in enumerate(items or [], start=1):
        try:
            item = build_item(obj_in)
        except InvalidInput as exc:
            raise InvalidInput(f"Item {item_no} in {label.lower()}: {exc.message}") from exc
        ensure_unique_name(built, item.name, f"Item '{item.name}' appears more than once in {label.lower()}.")
        built.append(item)
    return built


def build_subcategories(subcategories: Optional[List[SubcategoryIn]]) -> List[Subcategory]:
    built: List[Subcategory] = []
    for sub_no, obj_in in enumerate(subcategories or [], start=1):
        ensure_unique_name(built, obj_in.name, f"Subcategory '{obj_in.name}' appears more than once.")
        built.append(Subcategory(name=obj_in.name, items=build_items(obj_in.items, f"Subcategory {sub_no}")))
    return built
