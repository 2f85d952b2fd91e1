from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from crud.menu_store import MenuStore
from crud.mongo_crud import MongoMenuStore
from model.menu import MenuDocument
from utils.config import settings

client = AsyncIOMotorClient(settings.MONGODB_URL)
db = client[settings.MONGODB_DB]

menu_store = MongoMenuStore()


async def init_mongo():
    await init_beanie(
        database=db,
        document_models=[MenuDocument]
    )


def get_menu_store() -> MenuStore:
    return menu_store
