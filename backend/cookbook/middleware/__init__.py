"""
Cookbook Services — Middleware Package
========================================

Middleware Chain (outer → inner):
    Request → [Request ID] → [Logging] → [Recovery] → [CORS] → Route

    - Request ID first, so the access log and the recovery log carry it.
    - Recovery inside Logging, so a crashed request is still logged as 500.
    - CORS innermost; preflight requests never reach the routes.
"""
