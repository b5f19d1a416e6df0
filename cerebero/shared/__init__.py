"""
Shared Module

Everything below the HTTP layer:
- Models: SQLAlchemy ORM models (relational backend)
- Repositories: Storage port and its SQL implementation
- Backends: SQL and Convex implementations of the storage backend
- Services: Business logic layer
- Schemas: Pydantic request/response models and storage records
- Core: Logging, exceptions
- Adapters: External service integrations (Convex, OpenAI)

Package Structure:
==================
    shared/
    ├── core/           ← Logging, exceptions
    ├── db/             ← Database engine and session factories
    ├── models/         ← SQLAlchemy models
    ├── repositories/   ← Storage port + SQL repositories
    ├── backends/       ← SqlBackend, ConvexBackend
    ├── services/       ← Business logic
    ├── schemas/        ← Pydantic schemas and records
    ├── adapters/       ← External services
    ├── migrations/     ← Alembic environment and revisions
    └── utils/          ← Utilities

Usage:
======
    from cerebero.shared.backends import build_backend
    from cerebero.shared.services import ContentService
    from cerebero.shared.core import get_logger, CereberoException
"""
