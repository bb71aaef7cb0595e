"""Routers package."""

from . import (
    health,
    auth,
    profile,
    users,
    catalog,
    ratings,
    stats,
    admin,
)
