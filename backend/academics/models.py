"""SQLModel data models.

This module defines the course context's database tables using
SQLModel. Each class maps to a table; `Program` and `Semester` are
linked through a required foreign key and a two-way relationship.
Teachers, students and courses live outside this package, so the
assignment tables store their ids as plain integers.
"""

from datetime import date, datetime, timezone
from typing import List, Optional

from sqlmodel import SQLModel, Field, Relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Program(SQLModel, table=True):
    """A top-level academic offering made of semesters."""
    __tablename__ = "programs"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: Optional[str] = Field(default=None, max_length=255, nullable=False)
    code: Optional[str] = Field(default=None, max_length=32, index=True)
    description: Optional[str] = None
    inserted_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)
    semesters: List["Semester"] = Relationship(back_populates="program")


class Semester(SQLModel, table=True):
    """A term instance belonging to exactly one `Program`."""
    __tablename__ = "semesters"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: Optional[str] = Field(default=None, max_length=255, nullable=False)
    program_id: Optional[int] = Field(default=None, foreign_key="programs.id", nullable=False, index=True)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    inserted_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    program: Optional[Program] = Relationship(back_populates="semesters")


class TeacherCourse(SQLModel, table=True):
    """Assignment of a teacher to a course."""
    __tablename__ = "teacher_courses"

    id: Optional[int] = Field(default=None, primary_key=True)
    teacher_id: Optional[int] = Field(default=None, nullable=False, index=True)
    course_id: Optional[int] = Field(default=None, nullable=False, index=True)
    inserted_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class StudentCourse(SQLModel, table=True):
    """Enrollment of a student in a course."""
    __tablename__ = "student_courses"

    id: Optional[int] = Field(default=None, primary_key=True)
    student_id: Optional[int] = Field(default=None, nullable=False, index=True)
    course_id: Optional[int] = Field(default=None, nullable=False, index=True)
    inserted_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
