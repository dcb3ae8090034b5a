"""Demo data for a fresh database"""
import hashlib
import logging
from datetime import datetime, timezone

from .services.accounts import create_user

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password"


async def _ensure_user(store, username: str, role: str, name: str, school_id=None) -> dict:
    existing = await store.find_one("users", {"username": username})
    if existing:
        return existing
    return await create_user(store, username=username, password=DEMO_PASSWORD,
                             role=role, name=name, school_id=school_id)


async def seed_database(store) -> bool:
    """Seed one demo school with its people and records; no-op unless schools is empty"""
    if await store.count("schools"):
        return False

    now = datetime.now(timezone.utc)
    school = await store.insert("schools", {
        "name": "Springfield High",
        "location": "Springfield",
        "district": "Central",
        "performance_score": 78.5,
        "teacher_shortage": True,
        "shortage_details": [{"subject": "Math", "count": 2}, {"subject": "Science", "count": 1}],
    })

    await _ensure_user(store, "admin", "gov_admin", "Government Admin")
    teacher_user = await _ensure_user(store, "teacher", "teacher", "Edna Krabappel", school["id"])
    student_user = await _ensure_user(store, "student", "student", "Bart Simpson", school["id"])

    await store.insert("teachers", {
        "user_id": teacher_user["id"],
        "school_id": school["id"],
        "subject": "Math",
        "assigned_classes": ["10A", "10B"],
    })
    student = await store.insert("students", {
        "user_id": student_user["id"],
        "school_id": school["id"],
        "registration_no": "SPR-2024-001",
        "father_name": "Homer Simpson",
        "mother_name": "Marge Simpson",
        "mobile_number": None,
        "address": "742 Evergreen Terrace",
        "permanent_address": "742 Evergreen Terrace",
        "gender": "male",
        "age": 15,
        "parent_mobile_number": "5550100",
        "grade": "10",
        "attendance_rate": 92,
        "marks": 88,
        "scholarship_eligible": False,
        "ai_performance_summary": None,
    })

    await store.insert("complaints", {
        "school_id": school["id"],
        "student_id": None,
        "title": "Broken lab equipment",
        "content": "Several microscopes in the science lab do not work.",
        "is_anonymous": True,
        "ai_classification": "infrastructure",
        "status": "pending",
        "created_at": now,
    })
    await store.insert("courses", {
        "title": "Algebra Basics",
        "description": "Linear equations and inequalities.",
        "thumbnail_url": None,
        "video_url": None,
    })
    await store.insert("blockchain_results", {
        "student_id": student["id"],
        "term": "2024-T1",
        "report_hash": hashlib.sha256(f"{student['id']}:2024-T1:88".encode()).hexdigest(),
        "is_verified": True,
        "ai_explanation": None,
        "created_at": now,
    })

    logger.info("Seeded demo data: school %s, users admin/teacher/student", school["id"])
    return True
