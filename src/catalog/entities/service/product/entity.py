"""Entity: Product."""

from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from src.catalog.entities.core._base import Entity


class Product(Entity):
    """Product entity representing a catalog entry.

    ``image_key`` is the only link to the product's image object; the public
    URL is derived from it at read time and never persisted.
    """

    name: str = Field(description="Product name")
    category: str = Field(description="Free-form category label")
    price: float = Field(description="Unit price")
    stock: int = Field(description="Units in stock")
    volume: float | None = Field(default=None, description="Optional volume")
    weight: float | None = Field(default=None, description="Optional weight")
    image_key: str | None = Field(
        default=None, description="Object key of the product image"
    )

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.category == other.category
            and self.price == other.price
            and self.stock == other.stock
            and self.volume == other.volume
            and self.weight == other.weight
            and self.image_key == other.image_key
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.name,
            self.category,
            self.price,
            self.stock,
            self.volume,
            self.weight,
            self.image_key,
        ))


class ProductRead(Product):
    """Product enriched with the public URL of its image."""

    image_url: str | None = Field(default=None, description="Public image URL")


def _two_decimals(value: float) -> float:
    if round(value, 2) != value:
        raise ValueError("must have at most 2 decimal places")
    return value


# Stored as Numeric(10, 2) and Integer columns
Amount = Annotated[float, Field(gt=0, lt=10**8), AfterValidator(_two_decimals)]
Stock = Annotated[int, Field(ge=0, le=2**31 - 1)]


class ProductCreate(BaseModel):
    """Fields accepted when creating a product."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    price: Amount
    stock: Stock
    volume: Amount | None = None
    weight: Amount | None = None


_REQUIRED_COLUMNS = ("name", "category", "price", "stock")


class ProductUpdate(BaseModel):
    """Partial update of a product.

    A field that is omitted is left untouched. ``volume`` and ``weight`` may
    be explicitly set to ``None`` to clear them; the other fields may not.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    price: Amount | None = None
    stock: Stock | None = None
    volume: Amount | None = None
    weight: Amount | None = None

    @model_validator(mode="after")
    def _reject_null_required(self) -> "ProductUpdate":
        for field in _REQUIRED_COLUMNS:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Explicitly provided fields, keyed by column name."""
        return self.model_dump(exclude_unset=True)


class ProductQuery(BaseModel):
    """Filtering, sorting and pagination options for product listings."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    search: str | None = None
    category: str | None = None
    sort_by: Literal["name", "price"] = "name"
    sort_order: Literal["asc", "desc"] = "asc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
