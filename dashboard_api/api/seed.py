"""Populate an empty database with demo data."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.api.errors import store_errors
from dashboard_api.db.seed import seed_database
from dashboard_api.db.session import get_session

router = APIRouter()


@router.post("")
async def seed(session: AsyncSession = Depends(get_session)) -> dict:
    async with store_errors("Seed failed"):
        counts = await seed_database(session)
    return {"success": True, "message": "Database seeded with sample data!", "created": counts}
