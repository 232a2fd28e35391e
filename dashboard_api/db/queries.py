"""Small query helpers shared by the routers."""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


async def count_rows(session: AsyncSession, model, *criteria) -> int:
    result = await session.execute(select(func.count()).select_from(model).where(*criteria))
    return result.scalar_one()
