"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from worknexus.crud import (
    application,
    bookmark,
    checkin,
    job,
    message,
    notification,
    payment,
    profile,
    role_request,
    user,
    worker,
)

__all__ = [
    "application",
    "bookmark",
    "checkin",
    "job",
    "message",
    "notification",
    "payment",
    "profile",
    "role_request",
    "user",
    "worker",
]
