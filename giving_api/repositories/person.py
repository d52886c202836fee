"""
Person repository
"""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from giving_api.models import Person


class PersonRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, person: Person) -> Person:
        self.db.add(person)
        await self.db.flush()
        await self.db.refresh(person)
        return person

    async def get(self, person_id: str) -> Optional[Person]:
        result = await self.db.execute(
            select(Person).where(Person.id == person_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[Person]:
        result = await self.db.execute(
            select(Person).where(Person.email == email)
        )
        return result.scalar_one_or_none()
