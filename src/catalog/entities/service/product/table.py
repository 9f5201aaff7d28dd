"""Product database table model."""

from sqlalchemy import Numeric
from sqlmodel import Field

from src.catalog.entities.core._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    This represents how the Product entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "products"

    name: str = Field(nullable=False, index=True)
    category: str = Field(nullable=False, index=True)
    price: float = Field(sa_type=Numeric(10, 2, asdecimal=False), nullable=False)
    stock: int = Field(default=0, nullable=False)
    volume: float | None = Field(
        default=None, sa_type=Numeric(10, 2, asdecimal=False), nullable=True
    )
    weight: float | None = Field(
        default=None, sa_type=Numeric(10, 2, asdecimal=False), nullable=True
    )
    image_key: str | None = Field(default=None, nullable=True)
