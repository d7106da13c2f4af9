"""
Notes API — Application Package Initializer
=============================================

What: Marks the `notes_api` directory as a Python package.
Why:  Enables module imports like `from notes_api.config import get_settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      NoteService (Store Facade)     │  ← create / list / update / archive / delete
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │     Database handle (Persistence)   │  ← Async SQLAlchemy engine + sessions
    └─────────────────────────────────────┘

    The database handle is created by the application lifespan and passed
    down explicitly (app.state → request dependency → service call).
    No module holds a live connection at import time.
"""

__version__ = "1.0.0"
