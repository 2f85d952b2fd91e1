from typing import List

from beanie import Document
from pydantic import Field

from schemas.menu_schema import Subcategory
from utils.config import settings


class MenuDocument(Document):
    """Persisted form of a Category; children are embedded, one document per category."""

    category: str = Field(..., description="Category name, unique across the collection")
    image: str
    subcategories: List[Subcategory] = Field(default_factory=list)

    class Settings:
        name = settings.MENU_COLLECTION
