"""
ShipTrack Backend — Application Package Initializer
====================================================

What: Marks the `shiptrack` directory as a Python package.
Who:  Used by uvicorn (`shiptrack.main:app`), Alembic and pytest.

Architecture Note:
    The backend follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, auth dependencies
    ├─────────────────────────────────────┤
    │   Services (Business Logic)         │  ← users, shipments
    ├─────────────────────────────────────┤
    │   Security (hashing, tokens)        │  ← bcrypt, JWT
    ├─────────────────────────────────────┤
    │   Store, Models & Schemas (Data)    │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch the ORM directly; services never build HTTP responses.
"""

__version__ = "1.0.0"
