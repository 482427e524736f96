"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from closurewatch.api import app

    uvicorn closurewatch.api:app --reload
"""

from closurewatch.api.app import app

__all__ = ["app"]
