"""
Microblog Backend: Application Package
======================================

What: Marks the `microblog` directory as a Python package.
Who:  Imported by uvicorn (`microblog.main:app`), pytest, and every module
      via `from microblog.<module> import ...`.

Architecture Note:
    The backend is split into three layers, leaf-first:

    ┌─────────────────────────────────────┐
    │      Routes (Request Handling)      │  <- HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Domain Rules)        │  <- validation, ownership, uniqueness
    ├─────────────────────────────────────┤
    │    Repositories (Persistence)       │  <- parameterized SQL, error wrapping
    ├─────────────────────────────────────┤
    │   Models & Schemas / Database       │  <- SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Routes never touch SQL; repositories never decide business rules.
"""

__version__ = "1.0.0"
