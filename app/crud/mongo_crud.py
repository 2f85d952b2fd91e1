from typing import List, Optional

from beanie import PydanticObjectId

from crud.menu_store import MenuStore
from model.menu import MenuDocument
from schemas.menu_schema import Category


def _to_category(doc: MenuDocument) -> Category:
    return Category(
        id=str(doc.id),
        name=doc.category,
        image=doc.image,
        subcategories=[sub.model_copy(deep=True) for sub in doc.subcategories],
    )


def _to_document(category: Category) -> MenuDocument:
    doc = MenuDocument(
        category=category.name,
        image=category.image,
        subcategories=category.subcategories,
    )
    if category.id is not None:
        doc.id = PydanticObjectId(category.id)
    return doc


class MongoMenuStore(MenuStore):
    """Menu store on the beanie ``MenuDocument`` collection; saves are whole-document replaces."""

    # -------- GET BY NAME --------
    async def find_category_by_name(self, name: str) -> Optional[Category]:
        doc = await MenuDocument.find_one(MenuDocument.category == name)
        return _to_category(doc) if doc else None

    # -------- GET BY ID --------
    async def find_category_by_id(self, category_id: str) -> Optional[Category]:
        doc = await MenuDocument.get(PydanticObjectId(category_id))
        return _to_category(doc) if doc else None

    # -------- GET ALL --------
    async def find_all_categories(self) -> List[Category]:
        docs = await MenuDocument.find_all().to_list()
        return [_to_category(doc) for doc in docs]

    # -------- CREATE --------
    async def insert_category(self, category: Category) -> Category:
        doc = _to_document(category)
        await doc.insert()
        return _to_category(doc)

    # -------- REPLACE --------
    async def replace_category(self, category: Category) -> Category:
        doc = _to_document(category)
        await doc.replace()
        return _to_category(doc)

    # -------- DELETE --------
    async def delete_category_by_id(self, category_id: str) -> Optional[Category]:
        doc = await MenuDocument.get(PydanticObjectId(category_id))
        if not doc:
            return None
        await doc.delete()
        return _to_category(doc)
