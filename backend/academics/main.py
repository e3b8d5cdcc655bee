"""FastAPI application entrypoint and HTTP controllers.

This module exposes the course context over HTTP. Controllers are
intentionally thin: they open a context on the request's session,
call one context function and translate its result into a response.

Reads are public; writes require a bearer token (see `auth`).

Endpoints implemented:
- GET /health
- GET, POST /programs
- GET, PATCH, DELETE /programs/{program_id}
- GET, POST /programs/{program_id}/semesters
- GET, PATCH, DELETE /programs/{program_id}/semesters/{semester_id}
- GET /semesters
- GET, POST /teacher-courses
- GET, PATCH, DELETE /teacher-courses/{teacher_course_id}
- GET, POST /student-courses
- GET, PATCH, DELETE /student-courses/{student_course_id}
"""

from typing import Any, Dict, List
import json
import logging
import time
import uuid

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from sqlmodel import Session

from .auth import require_token
from .changes import Change
from .config import settings
from .courses import CourseContext
from .database import create_db_and_tables, get_session
from .schemas import (
    ProgramOut,
    SemesterOut,
    SemesterWithProgramOut,
    StudentCourseOut,
    TeacherCourseOut,
)

app = FastAPI(title="Academics Course API")
logger = logging.getLogger("academics.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        json.dumps(
            {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
            },
            ensure_ascii=True,
        ),
    )
    return response


def get_context(db: Session = Depends(get_session)) -> CourseContext:
    return CourseContext(db)


def _respond(result, out_schema, missing: bool = False):
    """Translate a context result into a payload or an HTTPException.

    `missing` marks a result produced from a failed lookup, which maps
    to 404; other message-list failures are storage conflicts (409).
    """
    if result.ok:
        return out_schema.model_validate(result.value)
    reason = result.reason
    if isinstance(reason, Change):
        raise HTTPException(status_code=422, detail={'errors': reason.errors})
    if missing or isinstance(reason, str):
        raise HTTPException(status_code=404, detail=reason)
    raise HTTPException(status_code=409, detail=reason)


@app.get('/health')
def health():
    return {'status': 'ok'}


# Programs

@app.get('/programs', response_model=List[ProgramOut])
def list_programs(ctx: CourseContext = Depends(get_context)):
    """List programs, newest first."""
    return [ProgramOut.model_validate(p) for p in ctx.list_programs()]


@app.post('/programs', response_model=ProgramOut, status_code=201, dependencies=[Depends(require_token)])
def create_program(attrs: Dict[str, Any] = Body(...), ctx: CourseContext = Depends(get_context)):
    return _respond(ctx.create_program(attrs), ProgramOut)


@app.get('/programs/{program_id}', response_model=ProgramOut)
def get_program(program_id: int, ctx: CourseContext = Depends(get_context)):
    return _respond(ctx.get_program(program_id), ProgramOut)


@app.patch('/programs/{program_id}', response_model=ProgramOut, dependencies=[Depends(require_token)])
def update_program(program_id: int, attrs: Dict[str, Any] = Body(...), ctx: CourseContext = Depends(get_context)):
    lookup = ctx.get_program(program_id)
    return _respond(ctx.update_program(lookup, attrs), ProgramOut, missing=not lookup.ok)


@app.delete('/programs/{program_id}', response_model=ProgramOut, dependencies=[Depends(require_token)])
def delete_program(program_id: int, ctx: CourseContext = Depends(get_context)):
    """Delete a program; 409 while it still has semesters."""
    lookup = ctx.get_program(program_id)
    return _respond(ctx.delete_program(lookup), ProgramOut, missing=not lookup.ok)


# Semesters

@app.get('/semesters', response_model=List[SemesterOut])
def list_semesters(ctx: CourseContext = Depends(get_context)):
    return [SemesterOut.model_validate(s) for s in ctx.list_semesters()]


@app.get('/programs/{program_id}/semesters', response_model=List[SemesterOut])
def list_program_semesters(program_id: int, ctx: CourseContext = Depends(get_context)):
    return [SemesterOut.model_validate(s) for s in ctx.list_program_semesters(program_id)]


@app.post('/programs/{program_id}/semesters', response_model=SemesterOut, status_code=201,
          dependencies=[Depends(require_token)])
def create_semester(program_id: int, attrs: Dict[str, Any] = Body(...), ctx: CourseContext = Depends(get_context)):
    """Create a semester under `program_id`; the path wins over the body."""
    return _respond(ctx.create_semester({**attrs, 'program_id': program_id}), SemesterOut)


@app.get('/programs/{program_id}/semesters/{semester_id}', response_model=SemesterWithProgramOut)
def get_semester(program_id: int, semester_id: int, ctx: CourseContext = Depends(get_context)):
    return _respond(ctx.get_semester(semester_id, program_id), SemesterWithProgramOut)


@app.patch('/programs/{program_id}/semesters/{semester_id}', response_model=SemesterOut,
           dependencies=[Depends(require_token)])
def update_semester(program_id: int, semester_id: int, attrs: Dict[str, Any] = Body(...),
                    ctx: CourseContext = Depends(get_context)):
    lookup = ctx.get_semester(semester_id, program_id)
    return _respond(ctx.update_semester(lookup, attrs), SemesterOut, missing=not lookup.ok)


@app.delete('/programs/{program_id}/semesters/{semester_id}', response_model=SemesterOut,
            dependencies=[Depends(require_token)])
def delete_semester(program_id: int, semester_id: int, ctx: CourseContext = Depends(get_context)):
    lookup = ctx.get_semester(semester_id, program_id)
    return _respond(ctx.delete_semester(lookup), SemesterOut, missing=not lookup.ok)


# Teacher courses

@app.get('/teacher-courses', response_model=List[TeacherCourseOut])
def list_teacher_courses(ctx: CourseContext = Depends(get_context)):
    return [TeacherCourseOut.model_validate(t) for t in ctx.list_teacher_courses()]


@app.post('/teacher-courses', response_model=TeacherCourseOut, status_code=201,
          dependencies=[Depends(require_token)])
def create_teacher_course(attrs: Dict[str, Any] = Body(...), ctx: CourseContext = Depends(get_context)):
    return _respond(ctx.create_teacher_course(attrs), TeacherCourseOut)


@app.get('/teacher-courses/{teacher_course_id}', response_model=TeacherCourseOut)
def get_teacher_course(teacher_course_id: int, ctx: CourseContext = Depends(get_context)):
    return _respond(ctx.get_teacher_course(teacher_course_id), TeacherCourseOut)


@app.patch('/teacher-courses/{teacher_course_id}', response_model=TeacherCourseOut,
           dependencies=[Depends(require_token)])
def update_teacher_course(teacher_course_id: int, attrs: Dict[str, Any] = Body(...),
                          ctx: CourseContext = Depends(get_context)):
    lookup = ctx.get_teacher_course(teacher_course_id)
    return _respond(ctx.update_teacher_course(lookup, attrs), TeacherCourseOut, missing=not lookup.ok)


@app.delete('/teacher-courses/{teacher_course_id}', response_model=TeacherCourseOut,
            dependencies=[Depends(require_token)])
def delete_teacher_course(teacher_course_id: int, ctx: CourseContext = Depends(get_context)):
    lookup = ctx.get_teacher_course(teacher_course_id)
    return _respond(ctx.delete_teacher_course(lookup), TeacherCourseOut, missing=not lookup.ok)


# Student courses

@app.get('/student-courses', response_model=List[StudentCourseOut])
def list_student_courses(ctx: CourseContext = Depends(get_context)):
    return [StudentCourseOut.model_validate(s) for s in ctx.list_student_courses()]


@app.post('/student-courses', response_model=StudentCourseOut, status_code=201,
          dependencies=[Depends(require_token)])
def create_student_course(attrs: Dict[str, Any] = Body(...), ctx: CourseContext = Depends(get_context)):
    return _respond(ctx.create_student_course(attrs), StudentCourseOut)


@app.get('/student-courses/{student_course_id}', response_model=StudentCourseOut)
def get_student_course(student_course_id: int, ctx: CourseContext = Depends(get_context)):
    return _respond(ctx.get_student_course(student_course_id), StudentCourseOut)


@app.patch('/student-courses/{student_course_id}', response_model=StudentCourseOut,
           dependencies=[Depends(require_token)])
def update_student_course(student_course_id: int, attrs: Dict[str, Any] = Body(...),
                          ctx: CourseContext = Depends(get_context)):
    lookup = ctx.get_student_course(student_course_id)
    return _respond(ctx.update_student_course(lookup, attrs), StudentCourseOut, missing=not lookup.ok)


@app.delete('/student-courses/{student_course_id}', response_model=StudentCourseOut,
            dependencies=[Depends(require_token)])
def delete_student_course(student_course_id: int, ctx: CourseContext = Depends(get_context)):
    lookup = ctx.get_student_course(student_course_id)
    return _respond(ctx.delete_student_course(lookup), StudentCourseOut, missing=not lookup.ok)
