"""Bedtime Stories - parent-authored bedtime stories with admin review.

Parents sign in with a bearer token from the identity provider, write
stories and submit them for review. Admins approve or reject submissions,
and published stories feed the PIN-locked child-mode reader.

Quick Start:
    uvicorn bedtime.api.main:app --reload

Layout:
    core      - settings, PIN hashing, token verification
    models    - SQLAlchemy tables (stories, parent settings, bookmarks)
    services  - moderation workflow and supporting services
    api       - FastAPI application, dependencies and routers
"""

__version__ = "0.1.0"
