from fastapi import APIRouter, Depends, HTTPException
import structlog

from giving_api.api.dependencies import get_person_service
from giving_api.core.errors import ServiceError
from giving_api.schemas.person import CreatePersonRequest, PersonResponse
from giving_api.services.person import PersonService

router = APIRouter(prefix="/persons", tags=["persons"])
logger = structlog.get_logger(__name__)


@router.post("", response_model=PersonResponse, status_code=201)
async def create_person(
    person_data: CreatePersonRequest,
    person_service: PersonService = Depends(get_person_service)
):
    """Create a person"""
    try:
        return await person_service.create_person(person_data)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("Failed to create person", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{person_id}", response_model=PersonResponse)
async def get_person(
    person_id: str,
    person_service: PersonService = Depends(get_person_service)
):
    """Get a person by ID"""
    try:
        return await person_service.get_person(person_id)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("Failed to get person", error=str(e), person_id=person_id)
        raise HTTPException(status_code=500, detail="Internal server error")
