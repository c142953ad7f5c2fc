# Routes package init
"""
Mchic Setlist — API Routes Package
====================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource or concern.

Route Inventory:
    - auth.py:      POST /api/login              (public)
    - health.py:    GET  /api/health             (public)
    - songs.py:     GET/POST /api/songs          (gated)
                    PUT/DELETE /api/songs/{id}   (gated)
    - reset.py:     POST /api/reset              (gated, file backend only)
    - frontend.py:  /api/* fallback (gated, 404) and the static front-end

Design Principle:
    Routes stay thin: read the request, call the normalization pipeline
    and the active SongStore, map None / False to NotFoundError.
"""
