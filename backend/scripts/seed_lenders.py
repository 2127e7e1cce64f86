"""
Seed the sample lenders, programs, criteria, metros and pricing.
Run: python -m scripts.seed_lenders (from backend dir, after alembic upgrade head).
"""
import asyncio
import os
import sys

# Add parent so we can import from backend
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from lendermatch.db.seed_data import build_reference_data
from lendermatch.db.session import SessionLocal
from lendermatch.models.domain.lender import Metro
from lendermatch.repositories.lender_repository import LenderRepository


async def seed():
    data = build_reference_data()

    async with SessionLocal() as session:
        repo = LenderRepository(session)

        for metro in data.metros:
            existing = await session.execute(select(Metro).where(Metro.name == metro.name))
            if existing.scalar_one_or_none():
                continue
            session.add(metro)
        await session.flush()

        for lender in data.lenders:
            if await repo.get_by_name(lender.name):
                print(f"Lender {lender.name} already exists, skipping")
                continue

            programs = [p for p in data.programs if p.lender_id == lender.lender_id]
            program_keys = {(p.program_id, p.program_version) for p in programs}

            session.add(lender)
            session.add_all(s for s in data.lender_states if s.lender_id == lender.lender_id)
            session.add_all(programs)
            await session.flush()

            for rows in (data.criteria, data.program_metros, data.pricing_rows):
                session.add_all(
                    row for row in rows if (row.program_id, row.program_version) in program_keys
                )
            await session.flush()
            print(f"Seeded lender: {lender.name} ({len(programs)} programs)")

        await session.commit()
    print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
