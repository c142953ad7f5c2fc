# Services package init
"""
Mchic Setlist — Services Layer
================================

What:  Business logic between routes (HTTP) and storage (file or database).
Why:   Routes handle HTTP; services handle the song rules and persistence.

Service Inventory:
    - song_validation: Normalization pipeline for untrusted song bodies
    - SongStore / SeededSongStore (abstract): Persistence contract
    - JsonFileSongStore: Whole collection in one JSON document
    - SqlSongStore: One row per song through async SQLAlchemy

Why stores sit behind an interface:
    1. Testability: the pipeline and each backend are tested without HTTP
    2. Replaceability: STORAGE_BACKEND picks the backend; routes don't change
"""
