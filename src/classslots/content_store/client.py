"""ContentStoreClient - reads and writes course slot lists in the remote CMS."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

import httpx

from classslots.content_store.exceptions import (
    ContentStoreError,
    ContentStoreTimeoutError,
    CourseNotFoundError,
    StaleCourseError,
)
from classslots.logging import sanitize_for_log
from classslots.schedule.models import (
    DEFAULT_TIME_PREFIX,
    CourseRecord,
    EnrollmentRecord,
    ScheduleOptions,
    Slot,
    strip_time_prefix,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("classslots.content_store")

SCHEDULE_COMPONENT = "components.cronograma.cronograma"

# Fields managed by the store; they must never be echoed back on update
MANAGED_FIELDS = frozenset(
    {
        "id",
        "documentId",
        "createdAt",
        "updatedAt",
        "publishedAt",
        "alunos",
        "cupons",
        "localizations",
        "createdBy",
        "updatedBy",
        "locale",
    }
)

_SLOT_FIELDS = ("dia_semana", "horario_aula", "data_inicio", "data_fim", "link_aula")


def clean_payload(data: Any) -> Any:
    """Recursively drop store-managed fields from a course payload."""
    if isinstance(data, list):
        return [clean_payload(item) for item in data]
    if isinstance(data, dict):
        return {
            key: clean_payload(value) if isinstance(value, dict | list) else value
            for key, value in data.items()
            if key not in MANAGED_FIELDS
        }
    return data


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _unwrap(node: Any) -> dict[str, Any]:
    """Flatten ``{"id", "attributes": {...}}`` entries into a single mapping."""
    if not isinstance(node, dict):
        return {}
    attributes = node.get("attributes")
    if isinstance(attributes, dict):
        return {**attributes, "id": node.get("id"), "documentId": node.get("documentId")}
    return node


def slot_from_item(item: dict[str, Any]) -> Slot:
    """Build a Slot from one stored schedule item."""
    extra = {k: v for k, v in item.items() if k not in _SLOT_FIELDS and k != "id"}
    start_date = _parse_date(item.get("data_inicio"))
    end_date = _parse_date(item.get("data_fim"))
    # Keep unparseable dates verbatim so they survive a write-back
    if item.get("data_inicio") and start_date is None:
        extra["data_inicio"] = item["data_inicio"]
    if item.get("data_fim") and end_date is None:
        extra["data_fim"] = item["data_fim"]
    return Slot(
        day_label=item.get("dia_semana"),
        time_label=item.get("horario_aula"),
        start_date=start_date,
        end_date=end_date,
        join_link=item.get("link_aula"),
        extra=extra,
    )


def slot_to_item(slot: Slot) -> dict[str, Any]:
    """Serialize a Slot into a stored schedule item, omitting empty fields."""
    item: dict[str, Any] = {
        "dia_semana": slot.day_label,
        "horario_aula": slot.time_label,
        "data_inicio": slot.start_date.isoformat() if slot.start_date else None,
        "data_fim": slot.end_date.isoformat() if slot.end_date else None,
        "link_aula": slot.join_link,
    }
    item = {k: v for k, v in item.items() if v is not None}
    item.update(slot.extra)
    return item


def _enrollment_from_item(item: Any) -> EnrollmentRecord | None:
    node = _unwrap(item)
    if not node:
        return None
    assignment = node.get("turma")
    if isinstance(assignment, str) and assignment.strip().isdigit():
        assignment = int(assignment)
    if not isinstance(assignment, int) or isinstance(assignment, bool):
        assignment = None
    return EnrollmentRecord(
        student_id=str(node.get("documentId") or node.get("id") or ""),
        class_assignment=assignment,
        enabled=node.get("habilitado", True) is not False,
    )


class ContentStoreClient:
    """Client for the course collection of the content store.

    Implements the course repository interface used by SlotStore.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        locale: str = "pt-BR",
        timeout: float = 10.0,
        time_prefix: str = DEFAULT_TIME_PREFIX,
        fallback_times: Sequence[str] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Content store root URL (no trailing /api).
            token: API token with read/write access to courses.
            locale: Locale of the course documents.
            timeout: Per-request timeout in seconds. Requests are never retried.
            time_prefix: Regional prefix on stored time labels.
            fallback_times: Offerable times when the schema cannot be read.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.locale = locale
        self.timeout = timeout
        self.time_prefix = time_prefix
        self.fallback_times = list(fallback_times) if fallback_times else None
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Raises:
            ContentStoreTimeoutError: If the request timed out.
            ContentStoreError: On transport errors or non-2xx responses.
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.client.request(method, url, params=params, json=json)
        except httpx.TimeoutException as e:
            raise ContentStoreTimeoutError(f"{method} {path} timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise ContentStoreError(f"{method} {path} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            body = sanitize_for_log(response.text)
            logger.warning("%s %s -> %d: %s", method, path, response.status_code, body)
            raise ContentStoreError(
                f"{method} {path} failed: {response.status_code}",
                status_code=response.status_code,
            )

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise ContentStoreError(f"{method} {path} returned invalid JSON") from e
        return data if isinstance(data, dict) else {"data": data}

    def _course_params(self, course_id: str, include_enrollments: bool) -> dict[str, Any]:
        params: dict[str, Any] = {
            "filters[id][$eq]": course_id,
            "locale": self.locale,
            "populate[cronograma]": "*",
        }
        if include_enrollments:
            params.update(
                {
                    "populate[alunos][filters][habilitado][$eq]": "true",
                    "populate[alunos][fields][0]": "id",
                    "populate[alunos][fields][1]": "turma",
                }
            )
        return params

    def _fetch_course_node(self, course_id: str, include_enrollments: bool) -> dict[str, Any]:
        data = self._request(
            "GET", "/api/cursos", params=self._course_params(course_id, include_enrollments)
        )
        nodes = data.get("data")
        if isinstance(nodes, list):
            node = nodes[0] if nodes else None
        else:
            node = nodes
        if not node:
            raise CourseNotFoundError(f"Course with id '{course_id}' not found", status_code=404)
        return dict(node)

    def load_course(self, course_id: str) -> CourseRecord:
        """Read a course with its schedule and enabled enrollments.

        Raises:
            CourseNotFoundError: If no course has this id.
            ContentStoreError: If the request fails.
        """
        node = self._fetch_course_node(course_id, include_enrollments=True)
        attributes = node.get("attributes") if isinstance(node.get("attributes"), dict) else node

        schedule = attributes.get("cronograma") or []
        raw_students = attributes.get("alunos") or node.get("alunos") or []
        if isinstance(raw_students, dict):
            raw_students = raw_students.get("data") or []

        enrollments = [
            record
            for record in (_enrollment_from_item(item) for item in raw_students)
            if record is not None
        ]
        logger.debug(
            "Loaded course %s: %d slots, %d enrollments",
            course_id,
            len(schedule),
            len(enrollments),
        )
        return CourseRecord(
            course_id=str(course_id),
            document_id=str(node.get("documentId") or node.get("id") or course_id),
            slots=[slot_from_item(item) for item in schedule if isinstance(item, dict)],
            enrollments=enrollments,
            version=attributes.get("updatedAt") or node.get("updatedAt"),
            badge=attributes.get("badge"),
            start_date=_parse_date(attributes.get("data_inicio")),
            attributes=dict(attributes),
        )

    def load_schedule_options(self) -> ScheduleOptions:
        """Read the offerable weekdays and times from the schedule component schema.

        Falls back to the default options when the schema cannot be read.
        """
        try:
            data = self._request(
                "GET", f"/api/content-type-builder/components/{SCHEDULE_COMPONENT}"
            )
        except ContentStoreError as e:
            logger.warning("Schedule options unavailable, using defaults: %s", e)
            return ScheduleOptions.defaults(self.fallback_times, self.time_prefix)

        attributes = (data.get("data") or {}).get("attributes") or data.get("attributes") or {}
        weekdays = (attributes.get("dia_semana") or {}).get("enum") or []
        times = (attributes.get("horario_aula") or {}).get("enum") or []
        if not times:
            logger.warning("Schedule component has no time options, using defaults")
            return ScheduleOptions.defaults(self.fallback_times, self.time_prefix)

        options = ScheduleOptions(
            times=[strip_time_prefix(t) for t in times],
            time_prefix=self.time_prefix,
        )
        if weekdays:
            options.weekdays = list(weekdays)
        return options

    def replace_slots(self, course: CourseRecord, slots: Sequence[Slot]) -> None:
        """Replace the course's whole schedule with ``slots``.

        The course is re-read first; if its update timestamp moved since
        ``course`` was loaded the write is refused.

        Raises:
            StaleCourseError: If the course changed since it was read.
            ContentStoreError: If the request fails.
        """
        if course.version is not None:
            current = self._fetch_course_node(course.course_id, include_enrollments=False)
            attributes = current.get("attributes") or current
            current_version = attributes.get("updatedAt") or current.get("updatedAt")
            if current_version != course.version:
                raise StaleCourseError(
                    f"Course '{course.course_id}' changed since it was read "
                    f"({course.version} -> {current_version})",
                    status_code=409,
                )

        payload = clean_payload(course.attributes)
        payload["cronograma"] = clean_payload([slot_to_item(slot) for slot in slots])

        # Relations are written back by id only
        image = course.attributes.get("imagem")
        if isinstance(image, dict) and image.get("id"):
            payload["imagem"] = image["id"]

        self._request(
            "PUT",
            f"/api/cursos/{course.document_id}",
            params={"locale": self.locale},
            json={"data": payload},
        )
        logger.info("Wrote %d slots to course %s", len(slots), course.course_id)
