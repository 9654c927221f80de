"""API routes."""

from fastapi import APIRouter

from app.routes import deals

api_router = APIRouter()

# Deals snapshot (board bootstrap + manual refresh)
api_router.include_router(deals.router, prefix="/deals", tags=["deals"])
