from typing import Any, Optional

from fastapi import APIRouter, Depends, status

from crud.menu_crud import MenuCRUD
from crud.menu_store import MenuStore
from database import get_menu_store
from schemas.menu_schema import (
    CategoryIn,
    CategoryUpdate,
    ItemCreate,
    ItemUpdate,
    MenuResponse,
    SubcategoryIn,
    SubcategoryUpdate,
)

router = APIRouter(prefix="/menu", tags=["Menu"])


def get_menu_crud(store: MenuStore = Depends(get_menu_store)) -> MenuCRUD:
    return MenuCRUD(store)


def _public(data: Any) -> Any:
    if isinstance(data, list):
        return [node.to_public_dict() for node in data]
    return data.to_public_dict()


def _envelope(data: Any, message: Optional[str] = None) -> dict:
    return {"message": message, "data": _public(data)}


# ---------------- CREATE ----------------
@router.post("/create", response_model=MenuResponse, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def create_category(obj_in: CategoryIn, crud: MenuCRUD = Depends(get_menu_crud)):
    category = await crud.create_category(obj_in)
    return _envelope(category, "Category created successfully.")


@router.post("/subcategory/create/{category_id}", response_model=MenuResponse, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def create_subcategory(category_id: str, obj_in: SubcategoryIn, crud: MenuCRUD = Depends(get_menu_crud)):
    category = await crud.create_subcategory(category_id, obj_in)
    return _envelope(category, "Subcategory added successfully.")


@router.post("/item/create/{category_id}/{subcategory_id}", response_model=MenuResponse, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def create_item(category_id: str, subcategory_id: str, obj_in: ItemCreate, crud: MenuCRUD = Depends(get_menu_crud)):
    items = await crud.create_item(category_id, subcategory_id, obj_in)
    return _envelope(items, "Item added successfully.")


# ---------------- UPDATE ----------------
@router.put("/updatecategory/{category_id}", response_model=MenuResponse, response_model_exclude_none=True)
async def update_category(category_id: str, obj_in: CategoryUpdate, crud: MenuCRUD = Depends(get_menu_crud)):
    category = await crud.update_category(category_id, obj_in)
    return _envelope(category, "Category updated successfully.")


@router.put("/updatesubcategory/{category_id}/{subcategory_id}", response_model=MenuResponse, response_model_exclude_none=True)
async def update_subcategory(category_id: str, subcategory_id: str, obj_in: SubcategoryUpdate, crud: MenuCRUD = Depends(get_menu_crud)):
    subcategory = await crud.update_subcategory(category_id, subcategory_id, obj_in)
    return _envelope(subcategory, "Subcategory updated successfully.")


@router.put("/updateitem/{category_id}/{subcategory_id}/{item_id}", response_model=MenuResponse, response_model_exclude_none=True)
async def update_item(
    category_id: str,
    subcategory_id: str,
    item_id: str,
    obj_in: ItemUpdate,
    crud: MenuCRUD = Depends(get_menu_crud),
):
    item = await crud.update_item(category_id, subcategory_id, item_id, obj_in)
    return _envelope(item, "Food item updated successfully.")


# ---------------- DELETE ----------------
@router.delete("/category/{category_id}", response_model=MenuResponse, response_model_exclude_none=True)
async def delete_category(category_id: str, crud: MenuCRUD = Depends(get_menu_crud)):
    category = await crud.delete_category(category_id)
    return _envelope(category, "Category deleted successfully.")


@router.delete("/subcategory/{category_id}/{subcategory_id}", response_model=MenuResponse, response_model_exclude_none=True)
async def delete_subcategory(category_id: str, subcategory_id: str, crud: MenuCRUD = Depends(get_menu_crud)):
    category = await crud.delete_subcategory(category_id, subcategory_id)
    return _envelope(category, "Subcategory deleted successfully.")


@router.delete("/item/{category_id}/{subcategory_id}/{item_id}", response_model=MenuResponse, response_model_exclude_none=True)
async def delete_item(category_id: str, subcategory_id: str, item_id: str, crud: MenuCRUD = Depends(get_menu_crud)):
    items = await crud.delete_item(category_id, subcategory_id, item_id)
    return _envelope(items, "Item deleted successfully.")


@router.delete(
    "/item/{category_id}/{subcategory_id}/{item_id}/optiongroup/{option_group_id}",
    response_model=MenuResponse,
    response_model_exclude_none=True,
)
async def delete_option_group(
    category_id: str,
    subcategory_id: str,
    item_id: str,
    option_group_id: str,
    crud: MenuCRUD = Depends(get_menu_crud),
):
    item = await crud.delete_option_group(category_id, subcategory_id, item_id, option_group_id)
    return _envelope(item, "Option group deleted successfully.")


@router.delete(
    "/item/{category_id}/{subcategory_id}/{item_id}/optiongroup/{option_group_id}/variant/{variant_id}",
    response_model=MenuResponse,
    response_model_exclude_none=True,
)
async def delete_variant(
    category_id: str,
    subcategory_id: str,
    item_id: str,
    option_group_id: str,
    variant_id: str,
    crud: MenuCRUD = Depends(get_menu_crud),
):
    item = await crud.delete_variant(category_id, subcategory_id, item_id, option_group_id, variant_id)
    return _envelope(item, "Variant deleted successfully.")


# ---------------- READ ----------------
@router.get("/categories", response_model=MenuResponse, response_model_exclude_none=True)
async def list_categories(crud: MenuCRUD = Depends(get_menu_crud)):
    return _envelope(await crud.list_categories())


@router.get("/category/{category_id}", response_model=MenuResponse, response_model_exclude_none=True)
async def get_category(category_id: str, crud: MenuCRUD = Depends(get_menu_crud)):
    return _envelope(await crud.get_category(category_id))


@router.get("/category/{category_id}/subcategories", response_model=MenuResponse, response_model_exclude_none=True)
async def get_subcategories(category_id: str, crud: MenuCRUD = Depends(get_menu_crud)):
    return _envelope(await crud.get_subcategories(category_id))


@router.get("/category/{category_id}/subcategory/{subcategory_id}/items", response_model=MenuResponse, response_model_exclude_none=True)
async def get_items(category_id: str, subcategory_id: str, crud: MenuCRUD = Depends(get_menu_crud)):
    return _envelope(await crud.get_items(category_id, subcategory_id))


@router.get("/category/{category_id}/subcategory/{subcategory_id}/item/{item_id}", response_model=MenuResponse, response_model_exclude_none=True)
async def get_item(category_id: str, subcategory_id: str, item_id: str, crud: MenuCRUD = Depends(get_menu_crud)):
    return _envelope(await crud.get_item(category_id, subcategory_id, item_id))
