"""
ReviewShare Backend — Application Package Initializer
======================================================

What: Marks the `reviewshare` directory as a Python package.
Who:  Imported by uvicorn (`reviewshare.main:app`), pytest and the services.

Architecture Note:
    The backend follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Data Access Logic)   │  ← table operations, domain errors
    ├─────────────────────────────────────┤
    │            Schemas (Data)           │  ← Pydantic request/response models
    ├─────────────────────────────────────┤
    │          Store (Persistence)        │  ← DynamoDB client + table handles
    └─────────────────────────────────────┘

    Routes receive the store through dependency injection and pass it to the
    services. Services never build their own client.
"""

__version__ = "1.0.0"
