"""Bulk import of programs and their semesters.

Used by `scripts/import_programs.py` to load a JSON catalogue into the
database through the course context, so every row goes through the
same validation as the HTTP API.
"""

import json
import logging
from typing import Any, Dict, List

from .courses import CourseContext
from .models import Program

logger = logging.getLogger("academics.importer")


def load_catalogue(raw: bytes) -> List[Dict[str, Any]]:
    """Parse a JSON catalogue: a list of program objects.

    Each program object may carry a `semesters` list; the semesters'
    `program_id` is filled in on import.
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError('catalogue must be a JSON list of programs')
    return data


def import_programs(ctx: CourseContext, items: List[Dict[str, Any]], dry_run: bool = False) -> Dict[str, Any]:
    """Create programs (and nested semesters) from `items`.

    Invalid items are reported in `errors` with their index and skipped;
    a program whose `code` already exists is skipped. When `dry_run` is
    True items are only validated.
    """
    existing_codes = {p.code for p in ctx.list_programs() if p.code}
    created_programs = 0
    created_semesters = 0
    skipped = 0
    errors = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            errors.append({'index': idx, 'errors': {'__all__': ['program item must be an object']}})
            continue
        attrs = {k: v for k, v in item.items() if k != 'semesters'}
        semesters = item.get('semesters') or []
        if not isinstance(semesters, list):
            errors.append({'index': idx, 'errors': {'semesters': ['must be a list of objects']}})
            continue
        code = _normalize_code(attrs.get('code'))
        if code and code in existing_codes:
            skipped += 1
            continue
        if dry_run:
            change = ctx.change_program(Program(), attrs)
            if not change.valid:
                errors.append({'index': idx, 'errors': change.errors})
            elif code:
                existing_codes.add(code)
            continue
        result = ctx.create_program(attrs)
        if not result.ok:
            errors.append({'index': idx, 'errors': result.reason.errors})
            continue
        program = result.value
        created_programs += 1
        if program.code:
            existing_codes.add(program.code)
        for s_idx, semester in enumerate(semesters):
            if not isinstance(semester, dict):
                errors.append({'index': idx, 'semester': s_idx, 'errors': {'__all__': ['semester item must be an object']}})
                continue
            s_result = ctx.create_semester({**semester, 'program_id': program.id})
            if s_result.ok:
                created_semesters += 1
            else:
                errors.append({'index': idx, 'semester': s_idx, 'errors': s_result.reason.errors})
    logger.info("import_done programs=%s semesters=%s skipped=%s errors=%s",
                created_programs, created_semesters, skipped, len(errors))
    return {
        'created_programs': created_programs,
        'created_semesters': created_semesters,
        'skipped': skipped,
        'errors': errors,
    }


def _normalize_code(code):
    """Return `code` as stored by the program schema, or None when not a string."""
    if isinstance(code, str):
        return code.strip() or None
    return None
