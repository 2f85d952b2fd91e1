import pytest
from fastapi.testclient import TestClient

from crud.menu_crud import MenuCRUD
from crud.menu_store import InMemoryMenuStore
from database import get_menu_store
from main import app


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def store() -> InMemoryMenuStore:
    return InMemoryMenuStore()


@pytest.fixture
def crud(store) -> MenuCRUD:
    return MenuCRUD(store)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_menu_store] = lambda: store
    # Not entered as a context manager: startup would try to reach Mongo
    yield TestClient(app)
    app.dependency_overrides.clear()


def flat_item(name: str = "Margherita", standard: float = 10, **extra) -> dict:
    return {"name": name, "hasOptions": False, "price": {"standard": standard}, **extra}


def option_item(name: str = "Pasta", variants: int = 1, groups: int = 1, **extra) -> dict:
    return {
        "name": name,
        "hasOptions": True,
        "optionGroups": [
            {
                "title": f"Group {g + 1}",
                "variants": [
                    {"name": f"Variant {v + 1}", "price": {"standard": 8 + v}} for v in range(variants)
                ],
            }
            for g in range(groups)
        ],
        **extra,
    }
