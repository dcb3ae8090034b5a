"""Typed client against the in-process app"""
import pytest
from httpx import ASGITransport
from pydantic import ValidationError

from schoolhub.contract.client import ApiError, SchoolHubClient
from schoolhub.models.scholarship import EvaluationResult, ScholarshipRule
from schoolhub.models.user import Token
from tests.conftest import student_payload


@pytest.fixture
async def api_client(app, seeded_store):
    async with SchoolHubClient(base_url="http://test", transport=ASGITransport(app=app)) as client:
        yield client


async def test_login_keeps_the_token(api_client):
    token = await api_client.login("admin", "password")

    assert isinstance(token, Token)
    assert api_client.token == token.access_token
    me = await api_client.me()
    assert me.username == "admin"
    assert me.role.value == "gov_admin"


async def test_bad_login_raises_api_error(api_client):
    with pytest.raises(ApiError) as excinfo:
        await api_client.login("admin", "wrong")
    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Invalid credentials"


async def test_missing_school_raises_not_found(api_client):
    with pytest.raises(ApiError) as excinfo:
        await api_client.get_school(999)
    assert excinfo.value.status_code == 404


async def test_rule_round_trip(api_client):
    rule = await api_client.get_rule()
    assert isinstance(rule, ScholarshipRule)
    assert (rule.min_marks, rule.min_attendance) == (85, 90)

    updated = await api_client.update_rule(min_attendance=95)
    assert updated.min_attendance == 95
    assert updated.min_marks == 85


async def test_invalid_rule_update_is_rejected_before_sending(api_client):
    with pytest.raises(ValidationError):
        await api_client.update_rule(min_marks=150)


async def test_evaluate_unknown_student(api_client):
    result = await api_client.evaluate(999999)
    assert result == EvaluationResult(eligible=False, reason="Student not found")


async def test_analytics(api_client):
    summary = await api_client.schools_summary()
    assert [(s.name, s.complaints) for s in summary] == [("Springfield High", 1)]

    shortages = await api_client.teacher_shortages("Central")
    assert {(r.subject, r.count) for r in shortages} == {("Math", 2), ("Science", 1)}

    districts = await api_client.district_summary()
    assert districts[0].district == "Central"

    dashboard = await api_client.dashboard_analytics()
    assert dashboard.total_schools == 1

    trends = await api_client.student_trends()
    assert trends.academic_by_term[0].term == "2024-T1"


async def test_recommendations(api_client):
    rows = await api_client.recommendations("Central")
    assert [r.name for r in rows] == ["Bart Simpson"]


async def test_export_report_formats(api_client):
    await api_client.login("admin", "password")

    rows = await api_client.export_report("schools", "json")
    assert rows[0]["name"] == "Springfield High"

    text = await api_client.export_report("schools", "csv")
    assert text.splitlines()[0] == "id,name,district,performance_score,teacher_shortage,complaints"

    workbook = await api_client.export_report("schools", "xlsx")
    assert workbook[:2] == b"PK"


async def test_export_requires_gov_admin(api_client):
    with pytest.raises(ApiError) as excinfo:
        await api_client.export_report("schools")
    assert excinfo.value.status_code == 401


async def test_student_and_teacher_methods(api_client):
    created = await api_client.create_student(student_payload(
        1, user={"username": "lisa", "password": "secret", "name": "Lisa"}))
    assert created.user.username == "lisa"

    students = await api_client.list_students(school_id=1)
    assert [s.id for s in students] == [1, created.id]

    result = await api_client.update_student_result(created.id, 93, scholarship_eligible=True)
    assert (result.marks, result.scholarship_eligible) == (93, True)

    await api_client.set_student_face(created.id, "A" * 1200)
    verified = await api_client.verify_face(created.id, "A" * 1200)
    assert verified.success is True
    assert verified.student_name == "Lisa"

    teacher = await api_client.create_teacher({"school_id": 1, "subject": "Art"})
    updated = await api_client.update_teacher(teacher.id, assigned_classes=["7C"])
    assert updated.assigned_classes == ["7C"]
    assert len(await api_client.list_teachers(school_id=1)) == 2

    await api_client.delete_teacher(teacher.id)
    with pytest.raises(ApiError) as excinfo:
        await api_client.get_teacher(teacher.id)
    assert excinfo.value.status_code == 404


async def test_attendance_methods(api_client):
    first = await api_client.mark_attendance(1, "absent")
    second = await api_client.mark_attendance(1, "present")

    assert second.id == first.id
    records = await api_client.list_attendance(student_id=1)
    assert [r.status for r in records] == ["present"]


async def test_admin_user_methods(api_client):
    await api_client.login("admin", "password")

    students = await api_client.list_users(role="student")
    assert [u.username for u in students] == ["student"]

    promoted = await api_client.update_user_role(students[0].id, "school_admin")
    assert promoted.role.value == "school_admin"
