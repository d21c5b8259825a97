"""
Category schema.
"""

from dataclasses import dataclass


@dataclass
class Category:
    """Category node. `parent_id` may point at another category."""

    id: str
    description: str
    description_translated: str | None = None
    parent_id: str | None = None
    parent_description: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        return cls(
            id=str(data["id"]),
            description=data.get("description", ""),
            description_translated=data.get("descriptionTranslated"),
            parent_id=data.get("parentId"),
            parent_description=data.get("parentDescription"),
        )
