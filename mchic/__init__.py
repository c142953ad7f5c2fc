"""
Mchic Setlist — Application Package Initializer
=================================================

What: Marks the `mchic` directory as a Python package.
Why:  Enables module imports like `from mchic.config import Settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows the same layered split end to end:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, auth gate
    ├─────────────────────────────────────┤
    │   Services (validation + stores)    │  ← Normalization, SongStore backends
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │    Persistence (JSON file or SQL)   │  ← Chosen once at startup
    └─────────────────────────────────────┘

    Routes never know which persistence backend is active; they only talk
    to the SongStore interface handed to them through app.state.
"""

__version__ = "1.0.0"
