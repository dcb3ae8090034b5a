"""School, student, teacher and record schemas"""
from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from datetime import datetime

from .user import User, NestedUserCreate

Gender = Literal["male", "female", "other"]
AttendanceStatus = Literal["present", "absent", "late"]
ComplaintType = Literal["harassment", "infrastructure", "academic", "other"]
ComplaintStatus = Literal["pending", "resolved"]


class ShortageDetail(BaseModel):
    subject: str
    count: int = Field(..., ge=0)


# ============= SCHOOLS =============

class SchoolCreate(BaseModel):
    name: str
    location: str
    district: Optional[str] = None
    performance_score: float = 0
    teacher_shortage: bool = False
    shortage_details: List[ShortageDetail] = []


class SchoolUpdate(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    district: Optional[str] = None
    performance_score: Optional[float] = None
    teacher_shortage: Optional[bool] = None
    shortage_details: Optional[List[ShortageDetail]] = None


class School(SchoolCreate):
    id: int


# ============= STUDENTS =============

class StudentCreate(BaseModel):
    user_id: Optional[int] = None
    school_id: int
    registration_no: str
    father_name: str
    mother_name: str
    mobile_number: Optional[str] = None
    address: str
    permanent_address: str
    gender: Gender
    age: int = Field(..., ge=1, le=100)
    parent_mobile_number: str
    grade: str
    attendance_rate: float = 100
    marks: float = 0
    scholarship_eligible: bool = False
    ai_performance_summary: Optional[str] = None
    face_image_base64: Optional[str] = None
    user: Optional[NestedUserCreate] = None


class Student(BaseModel):
    id: int
    user_id: Optional[int] = None
    school_id: int
    registration_no: str
    father_name: str
    mother_name: str
    mobile_number: Optional[str] = None
    address: str
    permanent_address: str
    gender: Gender
    age: int
    parent_mobile_number: str
    grade: str
    attendance_rate: float
    marks: float
    scholarship_eligible: bool
    ai_performance_summary: Optional[str] = None
    user: Optional[User] = None


class StudentResultUpdate(BaseModel):
    marks: float = Field(..., ge=0, le=100)
    ai_performance_summary: Optional[str] = None
    scholarship_eligible: Optional[bool] = None


class FaceData(BaseModel):
    image_base64: str


# ============= TEACHERS =============

class TeacherCreate(BaseModel):
    user_id: Optional[int] = None
    school_id: int
    subject: str
    assigned_classes: List[str] = []
    face_image_base64: Optional[str] = None
    user: Optional[NestedUserCreate] = None


class TeacherUpdate(BaseModel):
    school_id: Optional[int] = None
    subject: Optional[str] = None
    assigned_classes: Optional[List[str]] = None


class Teacher(BaseModel):
    id: int
    user_id: Optional[int] = None
    school_id: int
    subject: str
    assigned_classes: List[str] = []
    user: Optional[User] = None


# ============= ATTENDANCE =============

class AttendanceCreate(BaseModel):
    student_id: int
    status: AttendanceStatus
    face_verified: bool = False
    marked_by_teacher_id: Optional[int] = None


class Attendance(BaseModel):
    id: int
    student_id: int
    date: datetime
    status: AttendanceStatus
    face_verified: bool = False
    marked_by_teacher_id: Optional[int] = None


class FaceVerifyRequest(BaseModel):
    image_base64: str
    student_id: int


class FaceVerifyResult(BaseModel):
    success: bool
    match_confidence: float
    student_name: str = "Unknown"


class FaceCompareRequest(BaseModel):
    stored_image: str = Field(..., min_length=1)
    test_image: str = Field(..., min_length=1)


class FaceCompareResult(BaseModel):
    match: bool
    confidence: float


# ============= COMPLAINTS =============

class ComplaintCreate(BaseModel):
    school_id: Optional[int] = None
    student_id: Optional[int] = None
    title: str
    content: str
    is_anonymous: bool = False
    ai_classification: Optional[ComplaintType] = None


class Complaint(ComplaintCreate):
    id: int
    status: ComplaintStatus = "pending"
    created_at: datetime


class ComplaintStatusUpdate(BaseModel):
    status: ComplaintStatus


# ============= COURSES & RESULTS =============

class Course(BaseModel):
    id: int
    title: str
    description: str
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None


class BlockchainResult(BaseModel):
    id: int
    student_id: int
    term: str
    report_hash: str
    is_verified: bool = True
    ai_explanation: Optional[str] = None
    created_at: datetime


class VerifyHashRequest(BaseModel):
    hash: str = Field(..., min_length=1)


class VerifyHashResult(BaseModel):
    is_valid: bool
    details: Optional[BlockchainResult] = None
