"""
NoteApp Backend — Application Package Initializer
==================================================

What: Marks the `noteapp` directory as a Python package.
Who:  Used by uvicorn (`noteapp.main:app`), pytest, and the `noteapp` console script.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← merge rules, like arithmetic, stats
    ├─────────────────────────────────────┤
    │     Repositories (Note Store)       │  ← queries over an AsyncSession
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
