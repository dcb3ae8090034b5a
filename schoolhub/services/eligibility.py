"""Scholarship eligibility evaluation.

A student is eligible when marks and attendance both reach the effective
thresholds: the global rule, with any district override applied field by field.
Evaluation only reads; the cached ``scholarship_eligible`` flag on the student
document is left as it is.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models.scholarship import ScholarshipRule
from ..utils.scope import build_scope_match
from .rules import RuleStore

logger = logging.getLogger(__name__)

STUDENT_NOT_FOUND = "Student not found"


def format_number(value) -> str:
    """Render 85.0 as '85' and 84.5 as '84.5'."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class Thresholds:
    min_marks: float
    min_attendance: float


@dataclass(frozen=True)
class EligibilityDecision:
    found: bool
    eligible: bool
    reason: str
    thresholds: Optional[Thresholds] = None

    def as_response(self) -> Dict[str, object]:
        return {"eligible": self.eligible, "reason": self.reason}


NOT_FOUND = EligibilityDecision(found=False, eligible=False, reason=STUDENT_NOT_FOUND)


def effective_thresholds(rule: ScholarshipRule, district: Optional[str]) -> Thresholds:
    min_marks = rule.min_marks
    min_attendance = rule.min_attendance
    override = rule.override_for(district)
    if override is not None:
        if override.min_marks is not None:
            min_marks = override.min_marks
        if override.min_attendance is not None:
            min_attendance = override.min_attendance
    return Thresholds(min_marks=min_marks, min_attendance=min_attendance)


def evaluate_student(student: dict, district: Optional[str], rule: ScholarshipRule) -> EligibilityDecision:
    marks = student.get("marks") or 0
    attendance = student.get("attendance_rate") or 0
    t = effective_thresholds(rule, district)

    eligible = marks >= t.min_marks and attendance >= t.min_attendance
    if eligible:
        reason = (f"Meets thresholds (marks>={format_number(t.min_marks)}, "
                  f"attendance>={format_number(t.min_attendance)})")
    else:
        reason = (f"Below thresholds (marks {format_number(marks)}/{format_number(t.min_marks)}, "
                  f"attendance {format_number(attendance)}/{format_number(t.min_attendance)})")
    return EligibilityDecision(found=True, eligible=eligible, reason=reason, thresholds=t)


class ScholarshipEvaluator:
    def __init__(self, store, rules: Optional[RuleStore] = None):
        self.store = store
        self.rules = rules or RuleStore(store)

    async def _district_of(self, student: dict) -> Optional[str]:
        school_id = student.get("school_id")
        if school_id is None:
            return None
        school = await self.store.get("schools", school_id)
        return (school or {}).get("district") or None

    async def evaluate(self, student_id: int) -> EligibilityDecision:
        rule = await self.rules.get_rule()
        student = await self.store.get("students", student_id)
        if student is None:
            logger.info("Scholarship evaluation for unknown student %s", student_id)
            return NOT_FOUND
        return evaluate_student(student, await self._district_of(student), rule)

    async def recommend(self, district: Optional[str] = None) -> List[dict]:
        """Evaluate every student (optionally within one district) and keep the eligible ones."""
        rule = await self.rules.get_rule()
        schools = await self.store.find("schools", build_scope_match(district=district))
        districts = {s["id"]: s.get("district") for s in schools}
        query = build_scope_match(school_ids=list(districts)) if district else None
        students = await self.store.find("students", query)

        users = {u["id"]: u for u in await self.store.find(
            "users", {"id": {"$in": [s.get("user_id") for s in students]}})}

        recommendations = []
        for student in students:
            decision = evaluate_student(student, districts.get(student.get("school_id")), rule)
            if not decision.eligible:
                continue
            recommendations.append({
                "student_id": student["id"],
                "school_id": student["school_id"],
                "name": users.get(student.get("user_id"), {}).get("name"),
                "marks": student.get("marks") or 0,
                "attendance_rate": student.get("attendance_rate") or 0,
                "reason": decision.reason,
            })
        return recommendations
