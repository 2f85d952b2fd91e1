from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from schemas.menu_schema import Category, new_object_id


class MenuStore(ABC):
    """Storage collaborator: whole-category load and save, nothing finer."""

    @abstractmethod
    async def find_category_by_name(self, name: str) -> Optional[Category]: ...

    @abstractmethod
    async def find_category_by_id(self, category_id: str) -> Optional[Category]: ...

    @abstractmethod
    async def find_all_categories(self) -> List[Category]: ...

    @abstractmethod
    async def insert_category(self, category: Category) -> Category: ...

    @abstractmethod
    async def replace_category(self, category: Category) -> Category: ...

    @abstractmethod
    async def delete_category_by_id(self, category_id: str) -> Optional[Category]: ...


class InMemoryMenuStore(MenuStore):
    """Dictionary-backed store. Hands out copies so callers never share state with it."""

    def __init__(self):
        self._categories: Dict[str, Category] = {}

    async def find_category_by_name(self, name: str) -> Optional[Category]:
        for category in self._categories.values():
            if category.name == name:
                return category.model_copy(deep=True)
        return None

    async def find_category_by_id(self, category_id: str) -> Optional[Category]:
        category = self._categories.get(category_id)
        return category.model_copy(deep=True) if category else None

    async def find_all_categories(self) -> List[Category]:
        return [category.model_copy(deep=True) for category in self._categories.values()]

    async def insert_category(self, category: Category) -> Category:
        stored = category.model_copy(deep=True)
        stored.id = new_object_id()
        self._categories[stored.id] = stored
        return stored.model_copy(deep=True)

    async def replace_category(self, category: Category) -> Category:
        if category.id not in self._categories:
            raise KeyError(f"Category {category.id} is not stored")
        self._categories[category.id] = category.model_copy(deep=True)
        return category.model_copy(deep=True)

    async def delete_category_by_id(self, category_id: str) -> Optional[Category]:
        return self._categories.pop(category_id, None)
