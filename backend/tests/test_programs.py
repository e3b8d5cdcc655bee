import pytest

from academics.changes import Change
from academics.models import Program
from academics.results import Err, Ok


def test_list_programs_empty(ctx):
    assert ctx.list_programs() == []
    assert ctx.get_programs_list() == []


def test_create_program_returns_persisted_record(ctx):
    result = ctx.create_program({'name': 'Mathematics', 'code': 'MATH', 'description': 'Pure and applied'})
    assert isinstance(result, Ok)
    program = result.value
    assert program.id is not None
    assert (program.name, program.code, program.description) == ('Mathematics', 'MATH', 'Pure and applied')
    assert program.inserted_at is not None


def test_create_program_invalid_is_not_persisted(ctx):
    result = ctx.create_program({'code': 'X'})
    assert isinstance(result, Err)
    assert isinstance(result.reason, Change)
    assert 'name' in result.reason.errors
    assert not result.reason.valid
    assert ctx.list_programs() == []


def test_create_program_blank_name_rejected(ctx):
    result = ctx.create_program({'name': '   '})
    assert not result.ok
    assert 'name' in result.reason.errors


def test_list_programs_newest_first(ctx):
    first = ctx.create_program({'name': 'First'}).value
    second = ctx.create_program({'name': 'Second'}).value
    assert [p.id for p in ctx.list_programs()] == [second.id, first.id]


def test_get_program_round_trip(ctx, session):
    created = ctx.create_program({'name': 'Physics', 'code': 'PHY'}).value
    session.expunge_all()
    fetched = ctx.get_program(created.id)
    assert fetched.ok
    assert fetched.value.id == created.id
    assert fetched.value.name == 'Physics'
    assert fetched.value.code == 'PHY'


def test_get_program_missing(ctx):
    assert ctx.get_program(404) == Err('program_does_not_exist')


def test_update_program_from_lookup(ctx, program):
    result = ctx.update_program(ctx.get_program(program.id), {'name': 'Software Engineering'})
    assert result.ok
    assert result.value.name == 'Software Engineering'
    # untouched fields keep their values
    assert result.value.code == 'CS'


def test_update_program_raw_record(ctx, program):
    before = program.updated_at
    result = ctx.update_program(program, {'description': 'Algorithms and systems'})
    assert result.ok
    assert result.value.description == 'Algorithms and systems'
    assert result.value.updated_at >= before


def test_update_program_invalid(ctx, program):
    result = ctx.update_program(program, {'name': ''})
    assert not result.ok
    assert isinstance(result.reason, Change)
    assert ctx.get_program(program.id).value.name == 'Computer Science'


def test_update_missing_program_skips_validation_and_write(ctx, monkeypatch):
    def boom(*args, **kwargs):
        pytest.fail('update must not run for a failed lookup')

    monkeypatch.setattr(Change, 'cast', classmethod(boom))
    monkeypatch.setattr(ctx.repo, 'update', boom)
    result = ctx.update_program(ctx.get_program(999), {'name': 'Anything'})
    assert result == Err(['Program Does Not Exist'])


def test_delete_program_twice(ctx, program):
    first = ctx.delete_program(program)
    assert first.ok
    assert first.value.name == 'Computer Science'
    assert ctx.get_program(program.id) == Err('program_does_not_exist')
    second = ctx.delete_program(program)
    assert second == Err(['Unable to Delete Program!'])


def test_delete_program_from_failed_lookup(ctx):
    assert ctx.delete_program(ctx.get_program(1)) == Err(['Program Does Not Exist'])


def test_delete_program_with_semesters_fails(ctx, program):
    assert ctx.create_semester({'name': 'Fall', 'program_id': program.id}).ok
    result = ctx.delete_program(ctx.get_program(program.id))
    assert result == Err(['Unable to Delete Program!'])
    assert ctx.get_program(program.id).ok


def test_change_program_does_not_write(ctx, program):
    change = ctx.change_program(program, {'name': 'Renamed', 'unknown': 1})
    assert change.valid
    assert change.changes == {'name': 'Renamed'}
    assert ctx.get_program(program.id).value.name == 'Computer Science'


def test_change_program_defaults_to_no_changes(ctx):
    change = ctx.change_program(Program())
    assert change.changes == {}
    assert not change.valid


def test_update_rejects_wrong_record_type(ctx, program):
    with pytest.raises(TypeError):
        ctx.update_semester(program, {'name': 'x'})
