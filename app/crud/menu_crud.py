import logging
from typing import List

from crud.menu_store import MenuStore
from crud.menu_tree import (
    apply_item_changes,
    build_item,
    build_items,
    build_subcategories,
    ensure_id,
    ensure_ids,
    ensure_unique_name,
    item_changes,
    remove_by_id,
    resolve_item,
    resolve_option_group,
    resolve_subcategory,
    resolve_variant,
)
from schemas.menu_schema import (
    Category,
    CategoryIn,
    CategoryUpdate,
    Item,
    ItemCreate,
    ItemUpdate,
    Price,
    Subcategory,
    SubcategoryIn,
    SubcategoryUpdate,
    utcnow,
)
from utils.exceptions import Conflict, InternalError, InvalidInput, MenuError, NotFound

logger = logging.getLogger("menu.crud")


class MenuCRUD:
    """Validate-then-mutate operations on menu categories.

    Every write loads the owning category, checks the whole request against the
    in-memory tree, mutates it and saves it back in one replace. Nothing is
    written when a check fails. Concurrent writers to the same category race at
    the document level; the last replace wins.
    """

    def __init__(self, store: MenuStore):
        self.store = store

    # ---------------- STORAGE ----------------
    async def _call_store(self, operation: str, *args):
        try:
            return await getattr(self.store, operation)(*args)
        except MenuError:
            raise
        except Exception as exc:
            logger.exception("Menu store %s failed", operation)
            raise InternalError(f"Storage failure during {operation}: {exc}") from exc

    async def _load(self, category_id: str) -> Category:
        category = await self._call_store("find_category_by_id", category_id)
        if category is None:
            raise NotFound("category")
        return category

    async def _save(self, category: Category) -> Category:
        return await self._call_store("replace_category", category)

    # ---------------- READ ----------------
    async def list_categories(self) -> List[Category]:
        return await self._call_store("find_all_categories")

    async def get_category(self, category_id: str) -> Category:
        category_id = ensure_id("category", category_id)
        return await self._load(category_id)

    async def get_subcategories(self, category_id: str) -> List[Subcategory]:
        category = await self.get_category(category_id)
        return category.subcategories

    async def get_items(self, category_id: str, subcategory_id: str) -> List[Item]:
        category_id, subcategory_id = ensure_ids(category=category_id, subcategory=subcategory_id)
        category = await self._load(category_id)
        return resolve_subcategory(category, subcategory_id).items

    async def get_item(self, category_id: str, subcategory_id: str, item_id: str) -> Item:
        category_id, subcategory_id, item_id = ensure_ids(category=category_id, subcategory=subcategory_id, item=item_id)
        category = await self._load(category_id)
        return resolve_item(resolve_subcategory(category, subcategory_id), item_id)
    # ---------------- CREATE ----------------
    async def create_category(self, obj_in: CategoryIn) -> Category:
        subcategories = build_subcategories(obj_in.subcategories)

        if await self._call_store("find_category_by_name", obj_in.name):
            raise Conflict("Category already exists.")

        category = await self._call_store(
            "insert_category", Category(name=obj_in.name, image=obj_in.image, subcategories=subcategories)
        )
        logger.info("Created category %s (%s)", category.id, obj_in.name)
        return category

    async def create_subcategory(self, category_id: str, obj_in: SubcategoryIn) -> Category:
        category_id = ensure_id("category", category_id)
        items = build_items(obj_in.items, "Subcategory")

        category = await self._load(category_id)
        ensure_unique_name(category.subcategories, obj_in.name, "Subcategory already exists in this category.")

        subcategory = Subcategory(name=obj_in.name, items=items)
        category.subcategories.append(subcategory)
        category = await self._save(category)
        logger.info("Created subcategory %s in category %s", subcategory.id, category_id)
        return category

    async def create_item(self, category_id: str, subcategory_id: str, obj_in: ItemCreate) -> List[Item]:
        category_id, subcategory_id = ensure_ids(category=category_id, subcategory=subcategory_id)
        item = build_item(obj_in)

        category = await self._load(category_id)
        subcategory = resolve_subcategory(category, subcategory_id)
        ensure_unique_name(subcategory.items, item.name, "Item already exists in this subcategory.")

        subcategory.items.append(item)
        category = await self._save(category)
        logger.info("Created item %s in subcategory %s", item.id, subcategory_id)
        return resolve_subcategory(category, subcategory_id).items

    # ---------------- UPDATE ----------------
    async def update_category(self, category_id: str, obj_in: CategoryUpdate) -> Category:
        category_id = ensure_id("category", category_id)

        existing = await self._call_store("find_category_by_name", obj_in.name)
        if existing is not None and existing.id != category_id:
            raise Conflict("Another category with this name already exists.")

        category = await self._load(category_id)
        category.name = obj_in.name
        category.image = obj_in.image
        category = await self._save(category)
        logger.info("Updated category %s", category_id)
        return category

    async def update_subcategory(
        self, category_id: str, subcategory_id: str, obj_in: SubcategoryUpdate
    ) -> Subcategory:
        category_id, subcategory_id = ensure_ids(category=category_id, subcategory=subcategory_id)

        category = await self._load(category_id)
        subcategory = resolve_subcategory(category, subcategory_id)
        ensure_unique_name(
            category.subcategories,
            obj_in.name,
            "Subcategory with same name already exists.",
            exclude_id=subcategory_id,
        )

        subcategory.name = obj_in.name
        category = await self._save(category)
        logger.info("Renamed subcategory %s in category %s", subcategory_id, category_id)
        return resolve_subcategory(category, subcategory_id)

    async def update_item(self, category_id: str, subcategory_id: str, item_id: str, obj_in: ItemUpdate) -> Item:
        category_id, subcategory_id, item_id = ensure_ids(category=category_id, subcategory=subcategory_id, item=item_id)

        category = await self._load(category_id)
        subcategory = resolve_subcategory(category, subcategory_id)
        item = resolve_item(subcategory, item_id)

        changes = item_changes(item, obj_in)
        if "name" in changes:
            ensure_unique_name(
                subcategory.items, changes["name"], "Another item with this name already exists.", exclude_id=item_id
            )

        apply_item_changes(item, changes)
        category = await self._save(category)
        logger.info("Updated item %s in subcategory %s", item_id, subcategory_id)
        return resolve_item(resolve_subcategory(category, subcategory_id), item_id)

    # ---------------- DELETE ----------------
    async def delete_category(self, category_id: str) -> Category:
        category_id = ensure_id("category", category_id)
        deleted = await self._call_store("delete_category_by_id", category_id)
        if deleted is None:
            raise NotFound("category")
        logger.info("Deleted category %s", category_id)
        return deleted

    async def delete_subcategory(self, category_id: str, subcategory_id: str) -> Category:
        category_id, subcategory_id = ensure_ids(category=category_id, subcategory=subcategory_id)
        category = await self._load(category_id)
        resolve_subcategory(category, subcategory_id)

        remove_by_id(category.subcategories, subcategory_id)
        category = await self._save(category)
        logger.info("Deleted subcategory %s from category %s", subcategory_id, category_id)
        return category

    async def delete_item(self, category_id: str, subcategory_id: str, item_id: str) -> List[Item]:
        category_id, subcategory_id, item_id = ensure_ids(category=category_id, subcategory=subcategory_id, item=item_id)
        category = await self._load(category_id)
        subcategory = resolve_subcategory(category, subcategory_id)
        resolve_item(subcategory, item_id)

        remove_by_id(subcategory.items, item_id)
        category = await self._save(category)
        logger.info("Deleted item %s from subcategory %s", item_id, subcategory_id)
        return resolve_subcategory(category, subcategory_id).items

    async def delete_option_group(
        self, category_id: str, subcategory_id: str, item_id: str, option_group_id: str
    ) -> Item:
        category_id, subcategory_id, item_id, option_group_id = ensure_ids(
            category=category_id, subcategory=subcategory_id, item=item_id, option_group=option_group_id
        )
        category = await self._load(category_id)
        item = resolve_item(resolve_subcategory(category, subcategory_id), item_id)
        resolve_option_group(item, option_group_id)

        remove_by_id(item.option_groups, option_group_id)
        if not item.option_groups:
            # Last group gone: the item falls back to a zeroed flat price
            item.use_price(Price.zero())
        item.updated_at = utcnow()

        category = await self._save(category)
        logger.info("Deleted option group %s from item %s", option_group_id, item_id)
        return resolve_item(resolve_subcategory(category, subcategory_id), item_id)

    async def delete_variant(
        self,
        category_id: str,
        subcategory_id: str,
        item_id: str,
        option_group_id: str,
        variant_id: str,
    ) -> Item:
        category_id, subcategory_id, item_id, option_group_id, variant_id = ensure_ids(
            category=category_id,
            subcategory=subcategory_id,
            item=item_id,
            option_group=option_group_id,
            variant=variant_id,
        )
        category = await self._load(category_id)
        item = resolve_item(resolve_subcategory(category, subcategory_id), item_id)
        group = resolve_option_group(item, option_group_id)
        resolve_variant(group, variant_id)

        if len(group.variants) == 1:
            raise InvalidInput(
                "Cannot delete the last variant. Delete the option group instead or add another variant first."
            )

        remove_by_id(group.variants, variant_id)
        item.updated_at = utcnow()
        category = await self._save(category)
        logger.info("Deleted variant %s from option group %s", variant_id, option_group_id)
        return resolve_item(resolve_subcategory(category, subcategory_id), item_id)
