"""District and school rollups, recomputed from current documents on every call."""
import json
from collections import OrderedDict
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from ..utils.scope import build_scope_match

UNKNOWN_DISTRICT = "Unknown"


def _district_key(district: Optional[str]) -> str:
    return district or UNKNOWN_DISTRICT


# ============= PURE ROLLUPS =============

def schools_summary(schools: Iterable[dict], complaint_counts: Dict[Any, int]) -> List[dict]:
    """One row per school with its complaint count; schools without complaints get 0."""
    rows = []
    for school in sorted(schools, key=lambda s: s["id"]):
        rows.append({
            "id": school["id"],
            "name": school["name"],
            "district": school.get("district") or None,
            "performance_score": school.get("performance_score") or 0,
            "teacher_shortage": bool(school.get("teacher_shortage")),
            "complaints": complaint_counts.get(school["id"], 0),
        })
    return rows


def teacher_shortages(schools: Iterable[dict]) -> List[dict]:
    """Sum shortage counts per (district, subject)."""
    grouped: "OrderedDict[tuple, int]" = OrderedDict()
    for school in schools:
        district = _district_key(school.get("district"))
        for detail in school.get("shortage_details") or []:
            key = (district, detail["subject"])
            grouped[key] = grouped.get(key, 0) + (detail.get("count") or 0)

    return [
        {
            "district": None if district == UNKNOWN_DISTRICT else district,
            "subject": subject,
            "count": count,
        }
        for (district, subject), count in grouped.items()
    ]


def district_summary(schools: Iterable[dict]) -> List[dict]:
    """Group schools by district; absent districts land in the 'Unknown' bucket."""
    buckets: "OrderedDict[str, dict]" = OrderedDict()
    for school in schools:
        bucket = buckets.setdefault(_district_key(school.get("district")),
                                    {"schools": 0, "perf_sum": 0.0, "shortages": 0})
        bucket["schools"] += 1
        bucket["perf_sum"] += school.get("performance_score") or 0
        if school.get("teacher_shortage"):
            bucket["shortages"] += 1

    # every bucket holds at least the school that created it
    return [
        {
            "district": district,
            "schools": b["schools"],
            "avg_performance": round(b["perf_sum"] / b["schools"], 1),
            "teacher_shortages": b["shortages"],
        }
        for district, b in buckets.items()
    ]


# ============= CSV =============

def _csv_cell(value: Any) -> str:
    if value is None:
        value = ""
    elif isinstance(value, (datetime, date)):
        value = value.isoformat()
    elif isinstance(value, float) and value.is_integer():
        value = int(value)
    return json.dumps(value, ensure_ascii=False)


def to_csv(rows: List[dict]) -> str:
    """Render flat rows as CSV with a header taken from the first row's keys.

    Cells are JSON encoded, so strings are always quoted and embedded commas
    survive; None renders as an empty quoted string. No rows, no output.
    """
    if not rows:
        return ""
    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(_csv_cell(row.get(h)) for h in headers))
    return "\n".join(lines)


# ============= STORE-BACKED REPORTER =============

class AggregationReporter:
    def __init__(self, store):
        self.store = store

    async def _schools(self, district: Optional[str] = None) -> List[dict]:
        return await self.store.find("schools", build_scope_match(district=district))

    async def schools_summary(self, district: Optional[str] = None) -> List[dict]:
        schools = await self._schools(district)
        counts = await self.store.group_count("complaints", "school_id")
        return schools_summary(schools, counts)

    async def teacher_shortages(self, district: Optional[str] = None) -> List[dict]:
        return teacher_shortages(await self._schools(district))

    async def district_summary(self) -> List[dict]:
        return district_summary(await self._schools())

    async def dashboard(self) -> dict:
        by_district = await self.district_summary()
        students = await self.store.find("students", fields=["attendance_rate"])
        total_students = len(students)
        average_attendance = 0.0
        if total_students:
            average_attendance = round(
                sum(s.get("attendance_rate") or 0 for s in students) / total_students, 1)

        return {
            "total_schools": await self.store.count("schools"),
            "total_students": total_students,
            "total_teachers": await self.store.count("teachers"),
            "average_attendance": average_attendance,
            "teacher_shortage_count": sum(d["teacher_shortages"] for d in by_district),
            "recent_complaints": await self.store.count("complaints"),
            "by_district": by_district,
        }
