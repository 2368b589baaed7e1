"""
notestack: Application Package
================================

What: Two small note services sharing one code base.
Who:  Imported by uvicorn (via notestack.cli), pytest, and the app factories.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services                    │  ← trimming, presence checks
    ├─────────────────────────────────────┤
    │       Storage                       │  ← SQL table, in-memory fake, flat file
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy engine + bootstrap
    └─────────────────────────────────────┘

Variants:
    - notestack.main:        notes API backed by PostgreSQL
    - notestack.journal_app: journal service backed by a text file
"""

__version__ = "1.0.0"
