"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..db.session import get_db
from ..services.evaluation_service import EvaluationService
from ..services.registry_service import RegistryService
from ..services.summary_service import SummaryService

# Database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


# Service factory dependencies
def get_evaluation_service(db: DbSession) -> EvaluationService:
    return EvaluationService(db)


def get_registry_service(db: DbSession) -> RegistryService:
    return RegistryService(db)


def get_summary_service(db: DbSession, settings: SettingsDep) -> SummaryService:
    return SummaryService(db, settings)


# Service type aliases
EvaluationServiceDep = Annotated[EvaluationService, Depends(get_evaluation_service)]
RegistryServiceDep = Annotated[RegistryService, Depends(get_registry_service)]
SummaryServiceDep = Annotated[SummaryService, Depends(get_summary_service)]
