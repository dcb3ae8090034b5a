"""HTTP contract shared by the server routers and the typed client.

Each route is declared once: method, path, input shape and the response shape
for every status code it may answer with. Routers take their paths and response
models from here; the client validates what it receives against the same shapes.
"""
import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import SimpleNamespace
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..models.analytics import DashboardAnalytics, DistrictSummary, SchoolSummary, ShortageRow, StudentTrends
from ..models.scholarship import (
    EvaluateRequest,
    EvaluationResult,
    ScholarshipRecommendation,
    ScholarshipRule,
    ScholarshipRuleUpdate,
)
from ..models.school import (
    Attendance,
    AttendanceCreate,
    BlockchainResult,
    Complaint,
    ComplaintCreate,
    ComplaintStatusUpdate,
    Course,
    FaceCompareRequest,
    FaceCompareResult,
    FaceData,
    FaceVerifyRequest,
    FaceVerifyResult,
    School,
    SchoolCreate,
    SchoolUpdate,
    Student,
    StudentCreate,
    StudentResultUpdate,
    Teacher,
    TeacherCreate,
    TeacherUpdate,
    VerifyHashRequest,
    VerifyHashResult,
)
from ..models.user import LoginRequest, RoleUpdate, Token, User

PATH_PARAM = re.compile(r"\{(\w+)\}")


class ContractError(Exception):
    """A response did not match the shape declared for its status code."""


# ============= ERROR BODIES =============

class ValidationErrorBody(BaseModel):
    message: str
    field: Optional[str] = None


class MessageBody(BaseModel):
    message: str


@lru_cache(maxsize=None)
def _adapter(shape) -> TypeAdapter:
    return TypeAdapter(shape)


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    responses: Mapping[int, Any] = field(default_factory=dict)
    input: Optional[Any] = None

    @property
    def success_status(self) -> int:
        return min(code for code in self.responses if 200 <= code < 300)

    @property
    def response_model(self):
        return self.responses[self.success_status]

    def url(self, **params) -> str:
        return build_url(self.path, params)

    def parse_input(self, data: Any):
        if self.input is None:
            raise ContractError(f"{self.method} {self.path} declares no input")
        return _adapter(self.input).validate_python(data)

    def parse_response(self, status_code: int, data: Any):
        shape = self.responses.get(status_code)
        if shape is None:
            raise ContractError(f"{self.method} {self.path} does not declare status {status_code}")
        if shape is Any:
            return data
        try:
            return _adapter(shape).validate_python(data)
        except ValidationError as exc:
            raise ContractError(f"{self.method} {self.path} returned a malformed {status_code} body: {exc}") from exc


def build_url(path: str, params: Optional[Mapping[str, Union[str, int]]] = None) -> str:
    """Substitute ``{name}`` placeholders present in ``path``; other params are ignored."""
    if not params:
        return path
    return PATH_PARAM.sub(lambda m: str(params[m.group(1)]) if m.group(1) in params else m.group(0), path)


VALIDATION = ValidationErrorBody
NOT_FOUND = MessageBody
UNAUTHORIZED = MessageBody
FORBIDDEN = MessageBody


api = SimpleNamespace(
    auth=SimpleNamespace(
        login=Route("POST", "/api/auth/login", input=LoginRequest,
                    responses={200: Token, 400: VALIDATION, 401: UNAUTHORIZED}),
        me=Route("GET", "/api/auth/me", responses={200: User, 401: UNAUTHORIZED}),
        logout=Route("POST", "/api/auth/logout", responses={200: MessageBody}),
    ),
    schools=SimpleNamespace(
        list=Route("GET", "/api/schools", responses={200: List[School]}),
        get=Route("GET", "/api/schools/{id}", responses={200: School, 404: NOT_FOUND}),
        create=Route("POST", "/api/schools", input=SchoolCreate,
                     responses={201: School, 400: VALIDATION}),
        update=Route("PUT", "/api/schools/{id}", input=SchoolUpdate,
                     responses={200: School, 400: VALIDATION, 404: NOT_FOUND}),
        delete=Route("DELETE", "/api/schools/{id}", responses={200: MessageBody, 404: NOT_FOUND}),
    ),
    students=SimpleNamespace(
        list=Route("GET", "/api/students", responses={200: List[Student]}),
        get=Route("GET", "/api/students/{id}", responses={200: Student, 404: NOT_FOUND}),
        create=Route("POST", "/api/students", input=StudentCreate,
                     responses={201: Student, 400: VALIDATION}),
        update_result=Route("PUT", "/api/students/{id}/result", input=StudentResultUpdate,
                            responses={200: Student, 400: VALIDATION, 404: NOT_FOUND}),
        set_face_data=Route("POST", "/api/students/{id}/face-data", input=FaceData,
                            responses={200: MessageBody, 400: VALIDATION, 404: NOT_FOUND}),
    ),
    teachers=SimpleNamespace(
        list=Route("GET", "/api/teachers", responses={200: List[Teacher]}),
        get=Route("GET", "/api/teachers/{id}", responses={200: Teacher, 404: NOT_FOUND}),
        create=Route("POST", "/api/teachers", input=TeacherCreate,
                     responses={201: Teacher, 400: VALIDATION}),
        update=Route("PUT", "/api/teachers/{id}", input=TeacherUpdate,
                     responses={200: Teacher, 400: VALIDATION, 404: NOT_FOUND}),
        delete=Route("DELETE", "/api/teachers/{id}", responses={200: MessageBody, 404: NOT_FOUND}),
        set_face_data=Route("POST", "/api/teachers/{id}/face-data", input=FaceData,
                            responses={200: MessageBody, 400: VALIDATION, 404: NOT_FOUND}),
    ),
    attendance=SimpleNamespace(
        list=Route("GET", "/api/attendance", responses={200: List[Attendance]}),
        create=Route("POST", "/api/attendance", input=AttendanceCreate,
                     responses={201: Attendance, 400: VALIDATION}),
        face_verify=Route("POST", "/api/attendance/face-verify", input=FaceVerifyRequest,
                          responses={200: FaceVerifyResult, 400: VALIDATION, 404: NOT_FOUND}),
    ),
    face_test=SimpleNamespace(
        compare=Route("POST", "/api/face-test/compare", input=FaceCompareRequest,
                      responses={200: FaceCompareResult, 400: VALIDATION}),
    ),
    complaints=SimpleNamespace(
        list=Route("GET", "/api/complaints", responses={200: List[Complaint]}),
        create=Route("POST", "/api/complaints", input=ComplaintCreate,
                     responses={201: Complaint, 400: VALIDATION}),
        update_status=Route("PUT", "/api/complaints/{id}/status", input=ComplaintStatusUpdate,
                            responses={200: Complaint, 400: VALIDATION, 404: NOT_FOUND}),
    ),
    courses=SimpleNamespace(
        list=Route("GET", "/api/courses", responses={200: List[Course]}),
    ),
    blockchain=SimpleNamespace(
        list=Route("GET", "/api/blockchain-results", responses={200: List[BlockchainResult]}),
        verify=Route("POST", "/api/blockchain-results/verify", input=VerifyHashRequest,
                     responses={200: VerifyHashResult, 400: VALIDATION, 404: NOT_FOUND}),
    ),
    dashboard=SimpleNamespace(
        analytics=Route("GET", "/api/dashboard/analytics", responses={200: DashboardAnalytics}),
    ),
    analytics=SimpleNamespace(
        schools=Route("GET", "/api/analytics/schools", responses={200: List[SchoolSummary]}),
        teacher_shortages=Route("GET", "/api/analytics/teachers/shortages",
                                responses={200: List[ShortageRow]}),
        districts=Route("GET", "/api/analytics/districts", responses={200: List[DistrictSummary]}),
        student_trends=Route("GET", "/api/analytics/trends/students", responses={200: StudentTrends}),
    ),
    scholarship=SimpleNamespace(
        rules=SimpleNamespace(
            get=Route("GET", "/api/scholarship/rules", responses={200: ScholarshipRule}),
            update=Route("PUT", "/api/scholarship/rules", input=ScholarshipRuleUpdate,
                         responses={200: ScholarshipRule, 400: VALIDATION}),
        ),
        evaluate=Route("POST", "/api/scholarship/evaluate", input=EvaluateRequest,
                       responses={200: EvaluationResult, 400: VALIDATION}),
        recommendations=Route("GET", "/api/scholarship/recommendations",
                              responses={200: List[ScholarshipRecommendation]}),
    ),
    admin=SimpleNamespace(
        users=SimpleNamespace(
            list=Route("GET", "/api/admin/users",
                       responses={200: List[User], 401: UNAUTHORIZED, 403: FORBIDDEN}),
            update_role=Route("PUT", "/api/admin/users/{id}/role", input=RoleUpdate,
                              responses={200: User, 400: VALIDATION, 401: UNAUTHORIZED,
                                         403: FORBIDDEN, 404: NOT_FOUND}),
        ),
    ),
    reports=SimpleNamespace(
        export=Route("GET", "/api/reports",
                     responses={200: Any, 400: VALIDATION, 401: UNAUTHORIZED, 403: FORBIDDEN}),
    ),
)


def iter_routes(group: Any = api) -> Iterator[Route]:
    """Walk every declared route."""
    for value in vars(group).values():
        if isinstance(value, Route):
            yield value
        elif isinstance(value, SimpleNamespace):
            yield from iter_routes(value)


def route_table() -> Dict[tuple, Route]:
    return {(r.method, r.path): r for r in iter_routes()}
