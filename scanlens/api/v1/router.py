"""
Main API v1 router.
"""

from fastapi import APIRouter
from scanlens.api.v1 import products, scans

api_router = APIRouter()

api_router.include_router(
    products.router,
    prefix="/products",
    tags=["products"]
)

api_router.include_router(
    scans.router,
    prefix="/scans",
    tags=["scans"]
)
