"""Academic and attendance trends"""
from typing import Dict, List, Optional

import pandas as pd

from ..utils.scope import build_scope_match

ATTENDANCE_SCORES = {"present": 100, "late": 80, "absent": 0}


def academic_by_term(results: List[dict], marks_by_student: Dict[int, float]) -> List[dict]:
    """Mean marks of the students holding a result in each term."""
    rows = [
        {"term": r["term"], "student_id": r["student_id"], "marks": marks_by_student[r["student_id"]]}
        for r in results
        if r.get("student_id") in marks_by_student
    ]
    if not rows:
        return []
    df = pd.DataFrame(rows).drop_duplicates(subset=["term", "student_id"])
    grouped = df.groupby("term", sort=True)["marks"].mean()
    return [{"term": term, "avg_marks": round(float(avg), 1)} for term, avg in grouped.items()]


def attendance_by_month(records: List[dict]) -> List[dict]:
    """Average attendance score per calendar month (present=100, late=80, absent=0)."""
    if not records:
        return []
    df = pd.DataFrame(records, columns=["date", "status"])
    df["score"] = df["status"].map(ATTENDANCE_SCORES).fillna(0)
    df["month"] = pd.to_datetime(df["date"], utc=True).dt.strftime("%Y-%m")
    grouped = df.groupby("month", sort=True)["score"].mean()
    return [{"month": month, "avg_attendance": round(float(avg), 1)} for month, avg in grouped.items()]


async def student_trends(store, district: Optional[str] = None) -> dict:
    student_query = {}
    if district:
        schools = await store.find("schools", build_scope_match(district=district), fields=["id"])
        student_query = build_scope_match(school_ids=[s["id"] for s in schools])

    students = await store.find("students", student_query, fields=["id", "marks"])
    marks_by_student = {s["id"]: s.get("marks") or 0 for s in students}

    scope = build_scope_match(student_ids=list(marks_by_student)) if district else {}
    results = await store.find("blockchain_results", scope, fields=["term", "student_id"])
    attendance = await store.find("attendance", scope, sort=None, fields=["date", "status"])

    return {
        "academic_by_term": academic_by_term(results, marks_by_student),
        "attendance_by_month": attendance_by_month(attendance),
    }
