"""The course context.

`CourseContext` is the single entry point the HTTP layer uses for
programs, semesters and teacher/student course assignments. Every
method runs one query or one write through `Repo` and reports failures
as `Err` values instead of raising:

- lookups return ``Ok(record)`` or ``Err("<entity>_does_not_exist")``;
- creates and updates return ``Ok(record)`` or ``Err(change)`` when the
  change is invalid;
- deletes return ``Ok(record)`` or ``Err(["Unable to Delete <Entity>!"])``.

`update_*` and `delete_*` accept either a record or the result of the
matching `get_*` call, for all four entities. A failed lookup is passed
through as ``Err(["<Entity> Does Not Exist"])`` without validating or
writing anything.
"""

import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from .changes import Change
from .models import Program, Semester, StudentCourse, TeacherCourse
from .repositories import Repo
from .results import Err, Ok, Result
from .schemas import ProgramIn, SemesterIn, StudentCourseIn, TeacherCourseIn

logger = logging.getLogger("academics.courses")

Attrs = Optional[Mapping[str, Any]]


class CourseContext:
    """Query and command functions for the academic course domain."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = Repo(session)

    # Programs

    def list_programs(self) -> List[Program]:
        """Return all programs, newest first."""
        stmt = select(Program).order_by(Program.inserted_at.desc(), Program.id.desc())
        return self.repo.all(stmt)

    get_programs_list = list_programs

    def get_program(self, program_id: int) -> Result:
        """Look up a program by id."""
        program = self.repo.one(select(Program).where(Program.id == program_id))
        if program is None:
            return Err("program_does_not_exist")
        return Ok(program)

    def create_program(self, attrs: Attrs = None) -> Result:
        return self._create(self.change_program(Program(), attrs))

    def update_program(self, program, attrs: Attrs) -> Result:
        return self._update(program, Program, attrs, ProgramIn, "Program")

    def delete_program(self, program) -> Result:
        """Delete a program.

        Programs that still have semesters cannot be deleted; the
        database rejects the write and an error result is returned.
        """
        return self._delete(program, Program, "Program")

    def change_program(self, program: Program, attrs: Attrs = None) -> Change:
        return Change.cast(program, attrs, ProgramIn)

    # Semesters

    def list_semesters(self) -> List[Semester]:
        return self.repo.all(select(Semester).order_by(Semester.id))

    def list_program_semesters(self, program_id: int) -> List[Semester]:
        """Return the semesters of one program in id order."""
        stmt = select(Semester).where(Semester.program_id == program_id).order_by(Semester.id)
        return self.repo.all(stmt)

    def get_semester(self, semester_id: int, program_id: int) -> Result:
        """Look up a semester inside a program, loading the program too.

        A semester that exists under a different program is reported
        as missing.
        """
        stmt = (
            select(Semester)
            .where(Semester.id == semester_id, Semester.program_id == program_id)
            .options(selectinload(Semester.program))
        )
        semester = self.repo.one(stmt)
        if semester is None:
            return Err("semester_does_not_exist")
        return Ok(semester)

    def create_semester(self, attrs: Attrs = None) -> Result:
        return self._create(self.change_semester(Semester(), attrs))

    def update_semester(self, semester, attrs: Attrs) -> Result:
        return self._update(semester, Semester, attrs, SemesterIn, "Semester")

    def delete_semester(self, semester) -> Result:
        return self._delete(semester, Semester, "Semester")

    def change_semester(self, semester: Semester, attrs: Attrs = None) -> Change:
        return Change.cast(semester, attrs, SemesterIn)

    # Teacher courses

    def list_teacher_courses(self) -> List[TeacherCourse]:
        return self.repo.all(select(TeacherCourse).order_by(TeacherCourse.id))

    def get_teacher_course(self, teacher_course_id: int) -> Result:
        teacher_course = self.repo.one(select(TeacherCourse).where(TeacherCourse.id == teacher_course_id))
        if teacher_course is None:
            return Err("teacher_course_does_not_exist")
        return Ok(teacher_course)

    def create_teacher_course(self, attrs: Attrs = None) -> Result:
        return self._create(self.change_teacher_course(TeacherCourse(), attrs))

    def update_teacher_course(self, teacher_course, attrs: Attrs) -> Result:
        return self._update(teacher_course, TeacherCourse, attrs, TeacherCourseIn, "Teacher Course")

    def delete_teacher_course(self, teacher_course) -> Result:
        return self._delete(teacher_course, TeacherCourse, "Teacher Course")

    def change_teacher_course(self, teacher_course: TeacherCourse, attrs: Attrs = None) -> Change:
        return Change.cast(teacher_course, attrs, TeacherCourseIn)

    # Student courses

    def list_student_courses(self) -> List[StudentCourse]:
        return self.repo.all(select(StudentCourse).order_by(StudentCourse.id))

    def get_student_course(self, student_course_id: int) -> Result:
        student_course = self.repo.one(select(StudentCourse).where(StudentCourse.id == student_course_id))
        if student_course is None:
            return Err("student_course_does_not_exist")
        return Ok(student_course)

    def create_student_course(self, attrs: Attrs = None) -> Result:
        return self._create(self.change_student_course(StudentCourse(), attrs))

    def update_student_course(self, student_course, attrs: Attrs) -> Result:
        return self._update(student_course, StudentCourse, attrs, StudentCourseIn, "Student Course")

    def delete_student_course(self, student_course) -> Result:
        return self._delete(student_course, StudentCourse, "Student Course")

    def change_student_course(self, student_course: StudentCourse, attrs: Attrs = None) -> Change:
        return Change.cast(student_course, attrs, StudentCourseIn)

    # Shared write paths

    def _create(self, change: Change) -> Result:
        name = type(change.data).__name__
        result = self.repo.insert(change)
        if result.ok:
            logger.info("%s_created id=%s", name, result.value.id)
        else:
            logger.info("%s_create_rejected errors=%s", name, change.errors)
        return result

    def _update(self, target, model, attrs: Attrs, schema, label: str) -> Result:
        record = _resolve(target, model)
        if record is None:
            return Err([f"{label} Does Not Exist"])
        result = self.repo.update(Change.cast(record, attrs, schema))
        if result.ok:
            logger.info("%s_updated id=%s", model.__name__, record.id)
        return result

    def _delete(self, target, model, label: str) -> Result:
        record = _resolve(target, model)
        if record is None:
            return Err([f"{label} Does Not Exist"])
        result = self.repo.delete(record)
        if not result.ok:
            return Err([f"Unable to Delete {label}!"])
        logger.info("%s_deleted id=%s", model.__name__, record.id)
        return result


def _resolve(target, model):
    """Unwrap a lookup result into a `model` instance, or None for `Err`."""
    if isinstance(target, Err):
        return None
    if isinstance(target, Ok):
        target = target.value
    if not isinstance(target, model):
        raise TypeError(f"expected {model.__name__} or a lookup result, got {type(target).__name__}")
    return target
