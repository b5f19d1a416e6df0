"""
Cerebero Backend

Personal knowledge-management API: saved content, tags, search, sharing, todos.

Package Structure:
==================
    cerebero/
    ├── api/        ← FastAPI application
    ├── shared/     ← Shared code (models, services, storage backends, etc.)
    └── config/     ← Configuration

Running the Application:
========================
    # API Server
    uvicorn cerebero.api.main:app --reload
"""
