import pytest

from conftest import flat_item, option_item
from schemas.menu_schema import CategoryIn, ItemCreate, ItemUpdate, SubcategoryIn, new_object_id
from utils.exceptions import InvalidInput, describe_error


def _message(model, payload) -> str:
    with pytest.raises(InvalidInput) as exc:
        model.parse(payload)
    return exc.value.message


def _groups(*groups) -> dict:
    return {"name": "Pasta", "hasOptions": True, "optionGroups": list(groups)}


def _variant(name="Small", standard=1, **extra) -> dict:
    return {"name": name, "price": {"standard": standard}, **extra}


# ---------------- ITEM BODIES ----------------
@pytest.mark.parametrize(
    "payload, message",
    [
        ({"price": {"standard": 1}}, "Item must have a name."),
        ({"name": "", "price": {"standard": 1}}, "Item has an invalid name: must not be blank."),
        ({"name": "   ", "price": {"standard": 1}}, "Item has an invalid name: must not be blank."),
        ({"name": "Tea", "price": {"standard": "5"}}, "Item must have a valid standard price."),
        ({"name": "Tea", "price": {"standard": True}}, "Item must have a valid standard price."),
        ({"name": "Tea", "price": {}}, "Item must have a standard price."),
        ({"name": "Tea", "price": {"standard": 5, "happyHour": "cheap"}}, "Item must have a valid happy hour price."),
        (["Tea"], "Item must be a JSON object."),
    ],
)
def test_item_body_rejections(payload, message):
    assert _message(ItemCreate, payload) == message


def test_flags_and_types_are_strict():
    assert _message(ItemCreate, flat_item(hasOptions="yes")).startswith("Item has an invalid hasOptions flag:")
    assert _message(ItemCreate, flat_item(type="Vegan")).startswith("Item has an invalid type:")
    assert _message(ItemCreate, option_item(type="Vegan")).startswith("Item has an invalid type:")
    assert _message(ItemCreate, flat_item(price={"standard": 1, "isHappyHourActive": 1})).startswith(
        "Item has an invalid isHappyHourActive flag:"
    )


def test_oversized_and_non_finite_prices_are_rejected():
    message = _message(ItemCreate, flat_item(price={"standard": 10**400}))
    assert "standard price" in message

    message = _message(ItemCreate, flat_item(price={"standard": float("inf")}))
    assert message == "Item has an invalid standard price: must be a finite number."

    message = _message(ItemCreate, _groups({"variants": [_variant(standard=float("nan"))]}))
    assert message == "Variant 1 in option group 1 has an invalid standard price: must be a finite number."


def test_option_group_messages_name_the_offending_index():
    message = _message(ItemCreate, _groups({"variants": [_variant()]}, {"variants": [_variant(), {"price": {"standard": 2}}]}))
    assert message == "Variant 2 in option group 2 must have a name."

    assert _message(ItemCreate, _groups({"variants": []})) == "Option group 1 must have at least one variant."
    assert _message(ItemCreate, _groups({"title": "Size"})) == "Option group 1 must have at least one variant."
    assert _message(ItemCreate, _groups({"variants": [{"name": "Large", "price": {}}]})) == (
        "Variant 1 in option group 1 must have a standard price."
    )
    assert _message(ItemCreate, _groups({"variants": [_variant(type="Fish")]})).startswith(
        "Variant 1 in option group 1 has an invalid type:"
    )
    assert _message(ItemCreate, _groups({"variants": ["Large"]})) == "Variant 1 in option group 1 must be a JSON object."


def test_child_ids_are_checked_and_normalised():
    group_id, variant_id = new_object_id(), new_object_id()
    obj_in = ItemCreate.parse(_groups({"_id": group_id.upper(), "variants": [_variant(_id=variant_id.upper())]}))
    group = obj_in.option_groups[0].to_option_group()
    assert group.id == group_id
    assert group.variants[0].id == variant_id

    assert _message(ItemCreate, _groups({"_id": "bad", "variants": [_variant()]})) == (
        "Option group 1 has an invalid id: must be a 24 character hex ObjectId."
    )


def test_repeated_child_ids_are_rejected():
    shared = "65a000000000000000000001"
    message = _message(ItemCreate, _groups({"variants": [_variant("A", _id=shared), _variant("B", _id=shared)]}))
    assert message == "Option group 1 has duplicate variant ids."

    # Case differences name the same ObjectId
    message = _message(
        ItemCreate, _groups({"variants": [_variant("A", _id="65a00000000000000000000a"), _variant("B", _id="65A00000000000000000000A")]})
    )
    assert message == "Option group 1 has duplicate variant ids."

    message = _message(
        ItemCreate, _groups({"_id": shared, "variants": [_variant()]}, {"_id": shared, "variants": [_variant()]})
    )
    assert message == "Item has duplicate option group ids."

    message = _message(ItemUpdate, {"optionGroups": [{"_id": shared, "variants": [_variant()]}] * 2})
    assert message == "Item has duplicate option group ids."


def test_update_presence_and_nulls():
    obj_in = ItemUpdate.parse({"description": None, "type": None})
    assert obj_in.model_fields_set == {"description", "diet_type"}
    assert ItemUpdate.parse({}).model_fields_set == set()

    assert _message(ItemUpdate, {"name": None}) == "Item has an invalid name: must not be null."
    assert _message(ItemUpdate, {"name": " "}) == "Item has an invalid name: must not be blank."
    assert _message(ItemUpdate, {"hasOptions": None}) == "Item has an invalid hasOptions flag: must not be null."
    assert _message(ItemUpdate, {"type": "Raw"}).startswith("Item has an invalid type:")


# ---------------- CATEGORY / SUBCATEGORY BODIES ----------------
@pytest.mark.parametrize(
    "payload, message",
    [
        ({"image": "img"}, "Category must have a name."),
        ({"category": "Pizza"}, "Category must have an image."),
        ({"category": "   ", "image": "img"}, "Category has an invalid name: must not be blank."),
        ({"category": "Pizza", "image": " "}, "Category has an invalid image: must not be blank."),
        (None, "Category must be a JSON object."),
    ],
)
def test_category_body_rejections(payload, message):
    assert _message(CategoryIn, payload) == message


def test_nested_item_errors_name_subcategory_and_item():
    payload = {
        "category": "Drinks",
        "image": "drinks.png",
        "subcategories": [{"name": "Hot", "items": [flat_item("Tea"), flat_item("Coffee", price={"standard": "x"})]}],
    }
    assert _message(CategoryIn, payload) == "Item 2 in subcategory 1 must have a valid standard price."
    assert _message(SubcategoryIn, {"name": "\t"}) == "Subcategory has an invalid name: must not be blank."


def test_describe_error_reads_request_locations():
    error = {
        "type": "float_type",
        "loc": ("body", "optionGroups", 0, "variants", 2, "price", "standard", "float"),
        "msg": "Input should be a valid number",
    }
    assert describe_error(error, "Item") == "Variant 3 in option group 1 must have a valid standard price."

    error = {"type": "missing", "loc": ("body",), "msg": "Field required"}
    assert describe_error(error, "Category") == "Category details are required."

    error = {"type": "json_invalid", "loc": ("body", 7), "msg": "JSON decode error"}
    assert describe_error(error, "Item") == "Request body must be valid JSON."
