"""
Product ORM model.

Dependencies: sqlalchemy, copilot.boundary.db.base
System role: Product catalog persistence for retrieval
"""

from sqlalchemy import JSON, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from copilot.boundary.db.base import Base, StringIdMixin
from copilot.models.product import Product


class ProductModel(Base, StringIdMixin):
    """
    Product ORM model partitioned by category_id.

    Tags and reviews are stored as JSON documents alongside the
    embedding vector.
    """

    __tablename__ = "products"

    category_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    category_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    sku: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    reviews: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    vectors: Mapped[list[float] | None] = mapped_column(JSON, nullable=True)

    @classmethod
    def from_entity(cls, product: Product) -> "ProductModel":
        return cls(
            id=product.id,
            category_id=product.category_id,
            category_name=product.category_name,
            sku=product.sku,
            name=product.name,
            description=product.description,
            price=product.price,
            tags=[tag.model_dump() for tag in product.tags],
            reviews=[review.model_dump() for review in product.reviews],
            vectors=list(product.vectors) if product.vectors is not None else None,
        )

    def to_entity(self) -> Product:
        return Product(
            id=self.id,
            category_id=self.category_id,
            category_name=self.category_name,
            sku=self.sku,
            name=self.name,
            description=self.description,
            price=self.price,
            tags=self.tags,
            reviews=self.reviews,
            vectors=self.vectors,
        )
