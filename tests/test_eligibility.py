"""Scholarship eligibility evaluation"""
from datetime import datetime, timezone

import pytest

from schoolhub.models.scholarship import DistrictOverride, ScholarshipRule
from schoolhub.services.eligibility import (
    STUDENT_NOT_FOUND,
    ScholarshipEvaluator,
    effective_thresholds,
    evaluate_student,
    format_number,
)
from schoolhub.services.rules import RuleStore


def make_rule(**kwargs) -> ScholarshipRule:
    return ScholarshipRule(updated_at=datetime.now(timezone.utc), **kwargs)


class TestThresholds:
    def test_student_exactly_at_thresholds_is_eligible(self):
        decision = evaluate_student({"marks": 85, "attendance_rate": 90}, None, make_rule())
        assert decision.eligible is True
        assert decision.reason == "Meets thresholds (marks>=85, attendance>=90)"

    def test_both_thresholds_are_required(self):
        decision = evaluate_student({"marks": 84, "attendance_rate": 95}, None, make_rule())
        assert decision.eligible is False
        assert "marks 84/85" in decision.reason
        assert decision.reason == "Below thresholds (marks 84/85, attendance 95/90)"

    def test_failing_attendance_alone_is_ineligible(self):
        decision = evaluate_student({"marks": 99, "attendance_rate": 89.5}, None, make_rule())
        assert decision.eligible is False
        assert "attendance 89.5/90" in decision.reason

    @pytest.mark.parametrize("marks,attendance,expected", [
        (85, 90, True),
        (100, 100, True),
        (84.9, 90, False),
        (85, 89.9, False),
        (0, 0, False),
    ])
    def test_and_semantics(self, marks, attendance, expected):
        decision = evaluate_student({"marks": marks, "attendance_rate": attendance}, None, make_rule())
        assert decision.eligible is expected

    def test_missing_values_count_as_zero(self):
        decision = evaluate_student({}, None, make_rule())
        assert decision.eligible is False
        assert decision.reason == "Below thresholds (marks 0/85, attendance 0/90)"


class TestDistrictOverrides:
    def test_override_fields_apply_independently(self):
        rule = make_rule(district_overrides=[DistrictOverride(district="Central", min_marks=70)])
        thresholds = effective_thresholds(rule, "Central")
        assert thresholds.min_marks == 70
        assert thresholds.min_attendance == 90

    def test_passing_overridden_marks_but_failing_global_attendance(self):
        rule = make_rule(district_overrides=[DistrictOverride(district="Central", min_marks=70)])
        decision = evaluate_student({"marks": 72, "attendance_rate": 85}, "Central", rule)
        assert decision.eligible is False
        assert decision.reason == "Below thresholds (marks 72/70, attendance 85/90)"

    def test_passing_overridden_marks_and_global_attendance(self):
        rule = make_rule(district_overrides=[DistrictOverride(district="Central", min_marks=70)])
        decision = evaluate_student({"marks": 72, "attendance_rate": 90}, "Central", rule)
        assert decision.eligible is True
        assert decision.reason == "Meets thresholds (marks>=70, attendance>=90)"

    def test_other_districts_use_global_thresholds(self):
        rule = make_rule(district_overrides=[DistrictOverride(district="Central", min_marks=70)])
        assert effective_thresholds(rule, "North").min_marks == 85
        assert effective_thresholds(rule, None).min_marks == 85

    def test_first_matching_override_wins(self):
        rule = make_rule(district_overrides=[
            DistrictOverride(district="Central", min_marks=60),
            DistrictOverride(district="Central", min_marks=75),
        ])
        assert effective_thresholds(rule, "Central").min_marks == 60


def test_format_number():
    assert format_number(85.0) == "85"
    assert format_number(84.5) == "84.5"
    assert format_number(7) == "7"


class TestEvaluator:
    async def test_unknown_student_is_a_soft_failure(self, store):
        decision = await ScholarshipEvaluator(store).evaluate(999999)
        assert decision.found is False
        assert decision.as_response() == {"eligible": False, "reason": STUDENT_NOT_FOUND}

    async def test_district_resolved_through_school(self, store):
        school = await store.insert("schools", {"name": "A", "district": "Central"})
        student = await store.insert("students", {"school_id": school["id"], "marks": 72, "attendance_rate": 95})
        await RuleStore(store).get_rule()
        await store.update("scholarship_rules", 1, {"district_overrides": [{"district": "Central", "min_marks": 70}]})

        decision = await ScholarshipEvaluator(store).evaluate(student["id"])
        assert decision.eligible is True

    async def test_school_without_district_gets_no_override(self, store):
        school = await store.insert("schools", {"name": "A", "district": None})
        student = await store.insert("students", {"school_id": school["id"], "marks": 72, "attendance_rate": 95})

        decision = await ScholarshipEvaluator(store).evaluate(student["id"])
        assert decision.eligible is False

    async def test_evaluation_does_not_write_back(self, store):
        school = await store.insert("schools", {"name": "A", "district": "Central"})
        student = await store.insert("students", {
            "school_id": school["id"], "marks": 95, "attendance_rate": 95, "scholarship_eligible": False})

        decision = await ScholarshipEvaluator(store).evaluate(student["id"])

        assert decision.eligible is True
        assert (await store.get("students", student["id"]))["scholarship_eligible"] is False

    async def test_recommend_filters_by_district(self, store):
        central = await store.insert("schools", {"name": "A", "district": "Central"})
        north = await store.insert("schools", {"name": "B", "district": "North"})
        user = await store.insert("users", {"username": "s1", "name": "Lisa", "role": "student"})
        await store.insert("students", {"user_id": user["id"], "school_id": central["id"],
                                        "marks": 95, "attendance_rate": 97})
        await store.insert("students", {"school_id": central["id"], "marks": 50, "attendance_rate": 97})
        await store.insert("students", {"school_id": north["id"], "marks": 95, "attendance_rate": 97})

        evaluator = ScholarshipEvaluator(store)
        central_only = await evaluator.recommend("Central")
        everyone = await evaluator.recommend()

        assert [r["name"] for r in central_only] == ["Lisa"]
        assert central_only[0]["reason"] == "Meets thresholds (marks>=85, attendance>=90)"
        assert len(everyone) == 2
