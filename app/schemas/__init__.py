from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


# Shared Pydantic base with ORM support (Pydantic v2)
class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


# Enums shared across schemas
class DietType(str, Enum):
    VEG = "Veg"
    NON_VEG = "Non-Veg"
    EGG = "Egg"
    NONE = "None"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]
