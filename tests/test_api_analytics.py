"""Dashboard and analytics endpoints"""
import pytest
from httpx import AsyncClient

from tests.conftest import school_payload
from tests.fakes import UnavailableDocumentStore
from schoolhub import server


@pytest.mark.asyncio
async def test_dashboard(client: AsyncClient, seeded_store):
    response = await client.get("/api/dashboard/analytics")

    assert response.status_code == 200
    assert response.json() == {
        "total_schools": 1,
        "total_students": 1,
        "total_teachers": 1,
        "average_attendance": 92.0,
        "teacher_shortage_count": 1,
        "recent_complaints": 1,
        "by_district": [
            {"district": "Central", "schools": 1, "avg_performance": 78.5, "teacher_shortages": 1},
        ],
    }


@pytest.mark.asyncio
async def test_schools_summary_reports_zero_complaints(client: AsyncClient, seeded_store):
    await client.post("/api/schools", json=school_payload(district="North"))

    response = await client.get("/api/analytics/schools")

    assert [(s["name"], s["complaints"]) for s in response.json()] == [
        ("Springfield High", 1),
        ("Riverside School", 0),
    ]

    north = await client.get("/api/analytics/schools", params={"district": "North"})
    assert [s["name"] for s in north.json()] == ["Riverside School"]


@pytest.mark.asyncio
async def test_teacher_shortages(client: AsyncClient, seeded_store):
    await client.post("/api/schools", json=school_payload(
        district=None, shortage_details=[{"subject": "Math", "count": 4}]))

    response = await client.get("/api/analytics/teachers/shortages")

    assert response.json() == [
        {"district": "Central", "subject": "Math", "count": 2},
        {"district": "Central", "subject": "Science", "count": 1},
        {"district": None, "subject": "Math", "count": 4},
    ]


@pytest.mark.asyncio
async def test_district_summary_covers_every_school(client: AsyncClient, seeded_store):
    await client.post("/api/schools", json=school_payload(district=None))
    await client.post("/api/schools", json=school_payload(district="Central", performance_score=81.5))

    rows = (await client.get("/api/analytics/districts")).json()

    assert sum(r["schools"] for r in rows) == 3
    central = next(r for r in rows if r["district"] == "Central")
    assert central["avg_performance"] == 80.0
    assert any(r["district"] == "Unknown" for r in rows)


@pytest.mark.asyncio
async def test_student_trends(client: AsyncClient, seeded_store):
    await client.post("/api/attendance", json={"student_id": 1, "status": "late"})

    response = await client.get("/api/analytics/trends/students", params={"district": "Central"})

    trends = response.json()
    assert trends["academic_by_term"] == [{"term": "2024-T1", "avg_marks": 88.0}]
    assert [m["avg_attendance"] for m in trends["attendance_by_month"]] == [80.0]


@pytest.mark.asyncio
async def test_storage_failure_answers_503(client: AsyncClient):
    server.init_routers(UnavailableDocumentStore())

    response = await client.get("/api/analytics/schools")

    assert response.status_code == 503
    assert response.json() == {"message": "Storage unavailable"}
