"""Registry service for exercises and students (reference data)."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.exercise import Exercise
from ..models.student import Student
from ..schemas.exercise import ExerciseCreate
from ..schemas.student import StudentCreate

logger = logging.getLogger(__name__)


class StudentNotFoundError(Exception):
    """Raised when a student id is not registered."""

    def __init__(self, student_id: UUID):
        self.student_id = student_id
        super().__init__(f"Student {student_id} not found")


class ExerciseNotFoundError(Exception):
    """Raised when an exercise id is not registered."""

    def __init__(self, exercise_id: UUID):
        self.exercise_id = exercise_id
        super().__init__(f"Exercise {exercise_id} not found")


class RegistryService:
    """Service for registering and reading exercises and students."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_exercise(self, data: ExerciseCreate) -> Exercise:
        """Register an exercise with its rule tables."""
        exercise = Exercise(
            name=data.name,
            unit=data.unit,
            evaluation_mode=data.evaluation_mode,
            max_score=data.max_score,
            ranges={
                gender.value: [band.model_dump(mode="json") for band in bands]
                for gender, bands in data.ranges.items()
            },
            criteria=[criterion.model_dump(mode="json") for criterion in data.criteria],
            requires_teamwork=data.requires_teamwork,
        )
        self.db.add(exercise)
        await self.db.commit()
        await self.db.refresh(exercise)

        logger.info(f"Registered exercise '{exercise.name}' ({exercise.evaluation_mode.value})")
        return exercise

    async def get_exercise(self, exercise_id: UUID) -> Optional[Exercise]:
        return await self.db.get(Exercise, exercise_id)

    async def list_exercises(self) -> list[Exercise]:
        result = await self.db.execute(select(Exercise).order_by(Exercise.name.asc()))
        return list(result.scalars().all())

    async def create_student(self, data: StudentCreate) -> Student:
        """Register a student."""
        student = Student(
            first_name=data.first_name,
            last_name=data.last_name,
            gender=data.gender.value,
        )
        self.db.add(student)
        await self.db.commit()
        await self.db.refresh(student)
        return student

    async def get_student(self, student_id: UUID) -> Optional[Student]:
        return await self.db.get(Student, student_id)

    async def list_students(self) -> list[Student]:
        result = await self.db.execute(
            select(Student).order_by(Student.last_name.asc(), Student.first_name.asc())
        )
        return list(result.scalars().all())
