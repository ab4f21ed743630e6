"""Catalog Admin.

Server-rendered admin dashboard for managing the product catalog.
"""

__version__ = "0.1.0"
