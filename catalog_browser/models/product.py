# catalog_browser/models/product.py

"""Product and category data models for inter-module data flow."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Product:
    """A single catalog product as served by ``/api/products``."""

    id: str
    name: str
    original_price: float = 0.0
    discounted_price: float = 0.0
    category_name: str = ""
    is_stock: bool = True
    rating: float = 0.0
    reviews: int = 0
    trending: bool = False
    img: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Build a Product from its wire representation.

        The identity is read from ``_id`` and falls back to ``id``.
        Raises ``ValueError`` when the identity or name is missing.
        """
        raw_id = data.get("_id", data.get("id"))
        name = data.get("name")
        if raw_id is None or name is None:
            msg = f"Product payload missing _id or name: {data!r}"
            raise ValueError(msg)
        return cls(
            id=str(raw_id),
            name=str(name),
            original_price=float(data.get("original_price") or 0),
            discounted_price=float(data.get("discounted_price") or 0),
            category_name=str(data.get("category_name") or ""),
            is_stock=bool(data.get("is_stock", True)),
            rating=float(data.get("rating") or 0),
            reviews=int(data.get("reviews") or 0),
            trending=bool(data.get("trending", False)),
            img=str(data.get("img") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise back to the wire keys used by the API and the cache."""
        return {
            "_id": self.id,
            "name": self.name,
            "original_price": self.original_price,
            "discounted_price": self.discounted_price,
            "category_name": self.category_name,
            "is_stock": self.is_stock,
            "rating": self.rating,
            "reviews": self.reviews,
            "trending": self.trending,
            "img": self.img,
        }


@dataclass(frozen=True)
class Category:
    """A product category as served by ``/api/categories``."""

    id: str
    category_name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Category":
        """Build a Category from ``{"_id": ..., "categoryName": ...}``."""
        raw_id = data.get("_id", data.get("id"))
        name = data.get("categoryName")
        if raw_id is None or name is None:
            msg = f"Category payload missing _id or categoryName: {data!r}"
            raise ValueError(msg)
        return cls(id=str(raw_id), category_name=str(name))

    def to_dict(self) -> dict[str, Any]:
        """Serialise back to the wire keys."""
        return {"_id": self.id, "categoryName": self.category_name}
