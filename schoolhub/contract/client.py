"""Typed async client for the school administration API.

Every response is checked against the shape the contract declares for its
status code before it is handed back, so a server drifting from the contract
fails fast here instead of deep inside a caller.
"""
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

from .routes import ContractError, Route, api

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """The server answered with a declared, non-success status."""

    def __init__(self, status_code: int, message: str, field: Optional[str] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.field = field


def _clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None}


class SchoolHubClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.token = token
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    async def request(
        self,
        route: Route,
        path_params: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ):
        payload = None
        if route.input is not None:
            parsed = route.parse_input(body if body is not None else {})
            payload = parsed.model_dump(mode="json", exclude_unset=True) if isinstance(parsed, BaseModel) else parsed

        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        response = await self._http.request(
            route.method,
            route.url(**(path_params or {})),
            params=_clean_params(params),
            json=payload,
            headers=headers,
        )

        if route.response_model is Any and response.is_success:
            content_type = response.headers.get("content-type", "")
            if "application/json" in content_type:
                return response.json()
            if content_type.startswith("text/"):
                return response.text
            return response.content

        try:
            data = response.json()
        except ValueError as exc:
            raise ContractError(
                f"{route.method} {route.path} returned a non-JSON {response.status_code} body") from exc

        parsed = route.parse_response(response.status_code, data)
        if not response.is_success:
            raise ApiError(response.status_code, parsed.message, getattr(parsed, "field", None))
        return parsed

    # ============= AUTH =============

    async def login(self, username: str, password: str):
        token = await self.request(api.auth.login, body={"username": username, "password": password})
        self.token = token.access_token
        return token

    async def me(self):
        return await self.request(api.auth.me)

    # ============= SCHOOLS =============

    async def list_schools(self):
        return await self.request(api.schools.list)

    async def get_school(self, school_id: int):
        return await self.request(api.schools.get, {"id": school_id})

    async def create_school(self, school: Dict[str, Any]):
        return await self.request(api.schools.create, body=school)

    async def update_school(self, school_id: int, **patch):
        return await self.request(api.schools.update, {"id": school_id}, body=patch)

    async def delete_school(self, school_id: int):
        return await self.request(api.schools.delete, {"id": school_id})

    # ============= STUDENTS =============

    async def list_students(self, school_id: Optional[int] = None):
        return await self.request(api.students.list, params={"school_id": school_id})

    async def get_student(self, student_id: int):
        return await self.request(api.students.get, {"id": student_id})

    async def create_student(self, student: Dict[str, Any]):
        return await self.request(api.students.create, body=student)

    async def update_student_result(self, student_id: int, marks: float, **extra):
        return await self.request(api.students.update_result, {"id": student_id}, body={"marks": marks, **extra})

    async def set_student_face(self, student_id: int, image_base64: str):
        return await self.request(api.students.set_face_data, {"id": student_id}, body={"image_base64": image_base64})

    # ============= TEACHERS =============

    async def list_teachers(self, school_id: Optional[int] = None):
        return await self.request(api.teachers.list, params={"school_id": school_id})

    async def get_teacher(self, teacher_id: int):
        return await self.request(api.teachers.get, {"id": teacher_id})

    async def create_teacher(self, teacher: Dict[str, Any]):
        return await self.request(api.teachers.create, body=teacher)

    async def update_teacher(self, teacher_id: int, **patch):
        return await self.request(api.teachers.update, {"id": teacher_id}, body=patch)

    async def delete_teacher(self, teacher_id: int):
        return await self.request(api.teachers.delete, {"id": teacher_id})

    # ============= ATTENDANCE =============

    async def list_attendance(self, student_id: Optional[int] = None, school_id: Optional[int] = None):
        return await self.request(api.attendance.list, params={"student_id": student_id, "school_id": school_id})

    async def mark_attendance(self, student_id: int, status: str, **extra):
        return await self.request(api.attendance.create, body={"student_id": student_id, "status": status, **extra})

    async def verify_face(self, student_id: int, image_base64: str):
        return await self.request(
            api.attendance.face_verify, body={"student_id": student_id, "image_base64": image_base64})

    # ============= ADMIN =============

    async def list_users(self, role: Optional[str] = None, q: Optional[str] = None,
                         school_id: Optional[int] = None):
        return await self.request(api.admin.users.list, params={"role": role, "q": q, "school_id": school_id})

    async def update_user_role(self, user_id: int, role: str):
        return await self.request(api.admin.users.update_role, {"id": user_id}, body={"role": role})

    # ============= ANALYTICS =============

    async def dashboard_analytics(self):
        return await self.request(api.dashboard.analytics)

    async def schools_summary(self, district: Optional[str] = None):
        return await self.request(api.analytics.schools, params={"district": district})

    async def teacher_shortages(self, district: Optional[str] = None):
        return await self.request(api.analytics.teacher_shortages, params={"district": district})

    async def district_summary(self):
        return await self.request(api.analytics.districts)

    async def student_trends(self, district: Optional[str] = None):
        return await self.request(api.analytics.student_trends, params={"district": district})

    # ============= SCHOLARSHIP =============

    async def get_rule(self):
        return await self.request(api.scholarship.rules.get)

    async def update_rule(self, **patch):
        return await self.request(api.scholarship.rules.update, body=patch)

    async def evaluate(self, student_id: int):
        return await self.request(api.scholarship.evaluate, body={"student_id": student_id})

    async def recommendations(self, district: Optional[str] = None):
        return await self.request(api.scholarship.recommendations, params={"district": district})

    # ============= REPORTS =============

    async def export_report(self, report_type: str, format: str = "json", district: Optional[str] = None):
        return await self.request(
            api.reports.export, params={"type": report_type, "format": format, "district": district})
