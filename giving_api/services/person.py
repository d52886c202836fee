from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from giving_api.core.errors import ConflictError, NotFoundError
from giving_api.models import Person
from giving_api.repositories import PersonRepository
from giving_api.schemas.person import CreatePersonRequest

logger = structlog.get_logger(__name__)


class PersonService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.persons = PersonRepository(db)

    async def create_person(self, person_data: CreatePersonRequest) -> Person:
        if person_data.email and await self.persons.get_by_email(person_data.email):
            raise ConflictError(f"Person with email '{person_data.email}' already exists")

        try:
            person = await self.persons.create(Person(**person_data.model_dump()))
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(f"Person with email '{person_data.email}' already exists")
        except Exception as e:
            await self.db.rollback()
            logger.error("Failed to create person", error=str(e))
            raise

        logger.info("Person created successfully", person_id=person.id)
        return person

    async def get_person(self, person_id: str) -> Person:
        person = await self.persons.get(person_id)
        if not person:
            logger.warning("Person not found", person_id=person_id)
            raise NotFoundError(f"No Person record with ID: {person_id}")
        return person
