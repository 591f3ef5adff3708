"""Student API endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from ..deps import RegistryServiceDep, SummaryServiceDep
from ...schemas.student import StudentCreate, StudentResponse, StudentSummaryResponse

router = APIRouter(prefix="/students", tags=["students"])


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_student(data: StudentCreate, service: RegistryServiceDep):
    """Register a student."""
    student = await service.create_student(data)
    return StudentResponse.model_validate(student)


@router.get("", response_model=List[StudentResponse])
async def list_students(service: RegistryServiceDep):
    students = await service.list_students()
    return [StudentResponse.model_validate(s) for s in students]


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(student_id: UUID, service: RegistryServiceDep):
    student = await service.get_student(student_id)
    if not student:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )
    return StudentResponse.model_validate(student)


@router.get("/{student_id}/summary", response_model=StudentSummaryResponse)
async def get_student_summary(
    student_id: UUID,
    registry: RegistryServiceDep,
    service: SummaryServiceDep,
):
    """
    Grade statistics over the student's current evaluations.

    Only graded records count; the average is also returned rounded and
    formatted according to the display settings.
    """
    if not await registry.get_student(student_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )
    return await service.student_summary(student_id)
