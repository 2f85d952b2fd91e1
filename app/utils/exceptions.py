from typing import Iterable, List, Optional

from fastapi import status

# List fields whose elements are named by position in messages
ENTITY_LISTS = {
    "subcategories": "subcategory",
    "items": "item",
    "optionGroups": "option group",
    "variants": "variant",
}

FIELD_LABELS = {
    "_id": "id",
    "category": "name",
    "name": "name",
    "image": "image",
    "description": "description",
    "title": "title",
    "type": "type",
    "hasOptions": "hasOptions flag",
    "price": "price",
    "standard": "standard price",
    "happyHour": "happy hour price",
    "isHappyHourActive": "isHappyHourActive flag",
    "subcategories": "subcategories",
    "items": "items",
    "optionGroups": "option groups",
    "variants": "variants",
}

NUMBER_ERRORS = {"int_type", "float_type", "int_parsing", "float_parsing"}


class MenuError(Exception):
    """Base failure raised by menu operations; carries the HTTP status it maps to."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind = "InternalError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "error": self.kind}


def describe_error(error: dict, subject: str) -> str:
    """Render one pydantic error as a sentence naming the offending node.

    ``("optionGroups", 1, "variants", 0, "name")`` becomes
    "Variant 1 in option group 2 must have a name.". Locations from FastAPI
    carry a leading ``"body"``; union member tags are skipped.
    """
    kind = error["type"]
    if kind == "json_invalid":
        return "Request body must be valid JSON."

    owners: List[str] = []
    fields: List[str] = []
    for part in error.get("loc", ()):
        if isinstance(part, int):
            if fields and fields[-1] in ENTITY_LISTS:
                owners.append(f"{ENTITY_LISTS[fields.pop()]} {part + 1}")
        elif part in FIELD_LABELS:
            fields.append(part)

    owner = " in ".join(reversed(owners)).capitalize() if owners else subject
    field: Optional[str] = fields[-1] if fields else None
    reason = str(error.get("ctx", {}).get("error", error.get("msg", "")))

    if field is None:
        if kind == "missing":
            return f"{owner} details are required."
        if kind == "value_error":
            return f"{owner} {reason}."
        return f"{owner} must be a JSON object."

    label = FIELD_LABELS[field]
    if field in ENTITY_LISTS and kind in ("missing", "too_short"):
        return f"{owner} must have at least one {ENTITY_LISTS[field]}."
    if kind == "missing":
        article = "an" if label[0] in "aeiou" else "a"
        return f"{owner} must have {article} {label}."
    if kind in NUMBER_ERRORS:
        return f"{owner} must have a valid {label}."
    if kind == "value_error":
        return f"{owner} has an invalid {label}: {reason}."
    return f"{owner} has an invalid {label}: {error.get('msg', '')}."


class InvalidInput(MenuError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "InvalidInput"

    @classmethod
    def from_errors(cls, errors: Iterable[dict], subject: str = "Request") -> "InvalidInput":
        # First error only, matching the one-message-per-failure contract
        first = next(iter(errors), None)
        if first is None:
            return cls(f"{subject} is invalid.")
        return cls(describe_error(first, subject))


class Conflict(MenuError):
    status_code = status.HTTP_409_CONFLICT
    kind = "Conflict"


class NotFound(MenuError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "NotFound"

    def __init__(self, level: str, message: str | None = None):
        super().__init__(message or f"{level.capitalize()} not found.")
        self.level = level

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["level"] = self.level
        return data


class InternalError(MenuError):
    pass
