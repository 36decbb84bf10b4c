"""
Cookbook Services — API Routes
================================

Route Inventory:
    - resources.py:  /api/v2/<resource> CRUD routes, built per ResourceDefinition
    - health.py:     GET /health

Routes stay thin: they bind URLs to ResourceHandlers and nothing else.
"""
