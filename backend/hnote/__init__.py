"""
hnote Backend — Application Package Initializer
================================================

What: Marks the `hnote` directory as a Python package.
Who:  Used by uvicorn (`hnote.main:app`), the `hnote` console script, Alembic and pytest.

Architecture Note:
    The backend is a small layered service:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      NoteService (wire mapping)     │  ← timestamps, record → JSON shape
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │    NoteStore (notes collection)     │  ← async SQLAlchemy engine + sessions
    └─────────────────────────────────────┘

    The store is built once at startup and handed to the app; routes reach it
    through `request.app.state.store`.
"""

__version__ = "1.0.0"
