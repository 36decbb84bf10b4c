"""
Cookbook Services — Package Initializer
=========================================

Two FastAPI services share this package:

    metadata service   /api/v2/tag, /api/v2/category
    recipe service     /api/v2/recipes

Layers, composed per request (leaves first):

    ┌─────────────────────────────────────┐
    │   Routes + auth dependency          │  ← URL binding, role assertion
    ├─────────────────────────────────────┤
    │   Handlers                          │  ← HTTP parsing, status codes
    ├─────────────────────────────────────┤
    │   Services                          │  ← merge rules, error translation
    ├─────────────────────────────────────┤
    │   Repositories                      │  ← SQL, soft delete
    └─────────────────────────────────────┘

Everything resource-specific lives in ``cookbook.resources``.
"""

__version__ = "2.0.0"
