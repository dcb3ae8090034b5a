"""Aggregation row schemas"""
from pydantic import BaseModel
from typing import List, Optional


class SchoolSummary(BaseModel):
    id: int
    name: str
    district: Optional[str] = None
    performance_score: float
    teacher_shortage: bool
    complaints: int = 0


class ShortageRow(BaseModel):
    district: Optional[str] = None
    subject: str
    count: int


class DistrictSummary(BaseModel):
    district: str
    schools: int
    avg_performance: float
    teacher_shortages: int


class DashboardAnalytics(BaseModel):
    total_schools: int = 0
    total_students: int = 0
    total_teachers: int = 0
    average_attendance: float = 0.0
    teacher_shortage_count: int = 0
    recent_complaints: int = 0
    by_district: List[DistrictSummary] = []


class TermAverage(BaseModel):
    term: str
    avg_marks: float


class MonthAverage(BaseModel):
    month: str
    avg_attendance: float


class StudentTrends(BaseModel):
    academic_by_term: List[TermAverage] = []
    attendance_by_month: List[MonthAverage] = []
