"""Scholarship rule and evaluation schemas"""
from pydantic import BaseModel, Field, StrictInt, field_validator, model_validator
from typing import List, Optional
from datetime import datetime

DEFAULT_MIN_MARKS = 85.0
DEFAULT_MIN_ATTENDANCE = 90.0


class DistrictOverride(BaseModel):
    """Per-district exception; each threshold falls back to the global value when omitted."""
    district: str
    min_marks: Optional[float] = Field(None, ge=0, le=100)
    min_attendance: Optional[float] = Field(None, ge=0, le=100)


def _reject_duplicate_districts(overrides: Optional[List[DistrictOverride]]):
    if not overrides:
        return
    seen = set()
    for override in overrides:
        if override.district in seen:
            raise ValueError(f"Duplicate override for district '{override.district}'")
        seen.add(override.district)


class ScholarshipRule(BaseModel):
    id: int = 1
    min_marks: float = Field(DEFAULT_MIN_MARKS, ge=0, le=100)
    min_attendance: float = Field(DEFAULT_MIN_ATTENDANCE, ge=0, le=100)
    district_overrides: List[DistrictOverride] = []
    updated_at: datetime

    def override_for(self, district: Optional[str]) -> Optional[DistrictOverride]:
        """First override entry for the district, if any."""
        if not district:
            return None
        for override in self.district_overrides:
            if override.district == district:
                return override
        return None


class ScholarshipRuleUpdate(BaseModel):
    min_marks: Optional[float] = Field(None, ge=0, le=100)
    min_attendance: Optional[float] = Field(None, ge=0, le=100)
    district_overrides: Optional[List[DistrictOverride]] = None

    @model_validator(mode="after")
    def check_unique_districts(self):
        _reject_duplicate_districts(self.district_overrides)
        return self


class EvaluateRequest(BaseModel):
    student_id: StrictInt

    @field_validator("student_id", mode="before")
    @classmethod
    def accept_whole_floats(cls, value):
        # JSON numbers such as 5.0 name the same student as 5
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


class EvaluationResult(BaseModel):
    eligible: bool
    reason: str


class ScholarshipRecommendation(BaseModel):
    student_id: int
    school_id: int
    name: Optional[str] = None
    marks: float
    attendance_rate: float
    reason: str
