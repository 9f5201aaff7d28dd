"""Entity package: Product."""

from .entity import Product, ProductCreate, ProductQuery, ProductRead, ProductUpdate
from .repository import ProductRepository
from .table import ProductTable

__all__ = [
    "Product",
    "ProductCreate",
    "ProductQuery",
    "ProductRead",
    "ProductUpdate",
    "ProductRepository",
    "ProductTable",
]
