# Middleware package init
"""
Mchic Setlist — Middleware Package
====================================

Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs before Logging so the access line carries the
    correlation ID; the auth gate is a route dependency, not middleware,
    because /api/login, /api/health and static files stay public.
"""
