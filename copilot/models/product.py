"""
Product catalog entities.

Field names accept the camelCase aliases used by the catalog JSON
document as well as snake_case.

Dependencies: pydantic
System role: Retrieved product records for RAG completions
"""

from pydantic import BaseModel, ConfigDict, Field


class Tag(BaseModel):
    """Product tag."""

    id: str
    name: str


class Review(BaseModel):
    """Customer review of a product."""

    customer: str
    rating: int
    review: str


class Product(BaseModel):
    """Catalog product partitioned by category."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    category_id: str = Field(alias="categoryId")
    category_name: str = Field(default="", alias="categoryName")
    sku: str = ""
    name: str
    description: str = ""
    price: float = Field(default=0.0, ge=0.0)
    tags: list[Tag] = Field(default_factory=list)
    reviews: list[Review] = Field(default_factory=list)
    vectors: list[float] | None = None

    def search_text(self) -> str:
        """Text indexed for full-text search and embedded when vectors are missing."""
        tag_names = " ".join(tag.name for tag in self.tags)
        return f"{self.name} {self.category_name} {self.description} {tag_names}".strip()

    def to_prompt_dict(self) -> dict:
        """Fields sent to the model; ids and vectors are left out."""
        return self.model_dump(
            mode="json",
            include={"category_name", "sku", "name", "description", "price", "tags", "reviews"},
            exclude={"tags": {"__all__": {"id"}}},
        )
