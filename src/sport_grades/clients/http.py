"""HTTP record store client built on httpx."""

import logging
from decimal import Decimal
from typing import Any, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from ..config import get_settings
from ..grading.records import EvaluationRecord
from ..grading.rules import ExerciseRules, StudentRef
from ..schemas.evaluation import EvaluationCreate, EvaluationResponse
from ..schemas.exercise import ExerciseResponse
from ..schemas.student import StudentResponse
from .base import RecordNotFoundError, StoreError

logger = logging.getLogger(__name__)

_evaluations = TypeAdapter(List[EvaluationResponse])
_exercises = TypeAdapter(List[ExerciseResponse])
_students = TypeAdapter(List[StudentResponse])


class HttpEvaluationStore:
    """
    Talks to the ``/api/v1`` service.

    Every failure (connection problems, timeouts, non-2xx responses,
    malformed bodies) surfaces as ``StoreError``.

    Usage:
        async with HttpEvaluationStore() as store:
            records = await store.list_evaluations()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        default_max_score: Optional[Decimal] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.store_base_url).rstrip("/")
        self.default_max_score = default_max_score or settings.default_max_score
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.store_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "HttpEvaluationStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_evaluation(self, payload: EvaluationCreate) -> EvaluationRecord:
        response = await self._request("POST", "/evaluations", json=payload.model_dump(mode="json"))
        return self._parse(EvaluationResponse.model_validate, response).to_record()

    async def list_evaluations(self) -> List[EvaluationRecord]:
        response = await self._request("GET", "/evaluations")
        return [item.to_record() for item in self._parse(_evaluations.validate_python, response)]

    async def delete_evaluation(self, record_id: Any) -> None:
        response = await self._request("DELETE", f"/evaluations/{record_id}", allow_404=True)
        if response.status_code == 404:
            raise RecordNotFoundError(record_id)

    async def fetch_exercises(self) -> List[ExerciseRules]:
        """Exercise rule tables from the registry (read-only)."""
        response = await self._request("GET", "/exercises")
        return [
            item.to_rules(self.default_max_score)
            for item in self._parse(_exercises.validate_python, response)
        ]

    async def fetch_students(self) -> List[StudentRef]:
        """Student references from the registry (read-only)."""
        response = await self._request("GET", "/students")
        return [item.to_ref() for item in self._parse(_students.validate_python, response)]

    async def _request(
        self,
        method: str,
        path: str,
        allow_404: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise StoreError(f"{method} {path} failed: {e}") from e

        if response.status_code == 404 and allow_404:
            return response
        if response.is_error:
            detail = response.text[:200]
            logger.warning(f"{method} {path} returned {response.status_code}: {detail}")
            raise StoreError(
                f"{method} {path} returned {response.status_code}: {detail}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _parse(validate, response: httpx.Response):
        try:
            return validate(response.json())
        except (ValueError, ValidationError) as e:
            raise StoreError(f"Malformed response from record store: {e}") from e
