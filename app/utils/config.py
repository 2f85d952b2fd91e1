import os
from dotenv import load_dotenv

load_dotenv()

class Settings():
    # Database
    MONGODB_URL: str = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
    MONGODB_DB: str = os.getenv("MONGODB_DB", "menu")
    MENU_COLLECTION: str = os.getenv("MENU_COLLECTION", "menus")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS
    ALLOWED_ORIGINS: list = os.getenv("ALLOWED_ORIGINS", "*").split(",")

    # Server
    PORT: int = int(os.getenv("PORT", "8000"))


settings = Settings()
