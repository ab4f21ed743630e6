"""Entities organised by business concept.

Each entity package holds the domain model (``entity.py``), the database
model (``table.py``) and the data-access layer (``repository.py``).
"""

from .catalog.category import Category, CategoryRepository, CategoryTable
from .catalog.product import Product, ProductRepository, ProductTable

__all__ = [
    "Category",
    "CategoryTable",
    "CategoryRepository",
    "Product",
    "ProductTable",
    "ProductRepository",
]
