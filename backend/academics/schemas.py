"""Pydantic schemas for the course context.

The `*In` schemas hold the field rules used when casting a change
(see `changes.Change.cast`); the `*Out` schemas keep API output shapes
stable for the HTTP handlers and tests.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProgramIn(BaseModel):
    """Writable program fields."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    code: Optional[str] = Field(default=None, max_length=32)
    description: Optional[str] = None


class SemesterIn(BaseModel):
    """Writable semester fields; `program_id` is required."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    program_id: int = Field(gt=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, value, info):
        start = info.data.get("start_date")
        if value is not None and start is not None and value < start:
            raise ValueError("end_date must not be before start_date")
        return value


class TeacherCourseIn(BaseModel):
    """Writable teacher/course assignment fields."""
    teacher_id: int = Field(gt=0)
    course_id: int = Field(gt=0)


class StudentCourseIn(BaseModel):
    """Writable student/course enrollment fields."""
    student_id: int = Field(gt=0)
    course_id: int = Field(gt=0)


class ProgramOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    inserted_at: datetime
    updated_at: datetime


class SemesterOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    program_id: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    inserted_at: datetime
    updated_at: datetime


class SemesterWithProgramOut(SemesterOut):
    """Semester payload with its parent program attached."""
    program: ProgramOut


class TeacherCourseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    teacher_id: int
    course_id: int
    inserted_at: datetime
    updated_at: datetime


class StudentCourseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    course_id: int
    inserted_at: datetime
    updated_at: datetime
