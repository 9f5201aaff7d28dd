"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model and update/query records
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .core.user import User, UserCredentials, UserRepository, UserTable, UserUpdate
from .service.product import (
    Product,
    ProductCreate,
    ProductQuery,
    ProductRead,
    ProductRepository,
    ProductTable,
    ProductUpdate,
)

__all__ = [
    "User",
    "UserCredentials",
    "UserUpdate",
    "UserTable",
    "UserRepository",
    "Product",
    "ProductCreate",
    "ProductQuery",
    "ProductRead",
    "ProductUpdate",
    "ProductTable",
    "ProductRepository",
]
