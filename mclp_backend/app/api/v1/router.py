"""
API Router.

Aggregates all resource endpoints.
"""

from fastapi import APIRouter
from mclp_backend.app.api.v1.endpoints import accounts, documents, files

router = APIRouter()

router.include_router(files.router)
router.include_router(accounts.router)
router.include_router(documents.router)
