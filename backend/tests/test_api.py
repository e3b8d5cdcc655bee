import time

import jwt

from academics.auth import issue_token
from academics.config import settings


def test_health(client):
    r = client.get('/health')
    assert r.status_code == 200
    assert 'X-Request-ID' in r.headers


def test_writes_require_token(client):
    r = client.post('/programs', json={'name': 'Biology'})
    assert r.status_code in (401, 403)
    r2 = client.post('/programs', json={'name': 'Biology'}, headers={'Authorization': 'Bearer nope'})
    assert r2.status_code == 401


def test_program_endpoints(client, auth_headers):
    assert client.get('/programs').json() == []
    r = client.post('/programs', json={'name': 'Biology', 'code': 'BIO'}, headers=auth_headers)
    assert r.status_code == 201
    program = r.json()
    assert program['name'] == 'Biology'
    r2 = client.get(f"/programs/{program['id']}")
    assert r2.status_code == 200
    assert r2.json()['code'] == 'BIO'
    r3 = client.patch(f"/programs/{program['id']}", json={'name': 'Marine Biology'}, headers=auth_headers)
    assert r3.status_code == 200
    assert r3.json()['name'] == 'Marine Biology'
    r4 = client.delete(f"/programs/{program['id']}", headers=auth_headers)
    assert r4.status_code == 200
    assert client.get(f"/programs/{program['id']}").status_code == 404
    r5 = client.delete(f"/programs/{program['id']}", headers=auth_headers)
    assert r5.status_code == 404
    assert r5.json()['detail'] == ['Program Does Not Exist']


def test_program_validation_error(client, auth_headers):
    r = client.post('/programs', json={'code': 'NONAME'}, headers=auth_headers)
    assert r.status_code == 422
    assert 'name' in r.json()['detail']['errors']
    assert client.get('/programs').json() == []


def test_semester_endpoints(client, auth_headers):
    program = client.post('/programs', json={'name': 'Chemistry'}, headers=auth_headers).json()
    base = f"/programs/{program['id']}/semesters"
    r = client.post(base, json={'name': 'Spring', 'start_date': '2026-01-10'}, headers=auth_headers)
    assert r.status_code == 201
    semester = r.json()
    assert semester['program_id'] == program['id']
    r2 = client.get(f"{base}/{semester['id']}")
    assert r2.status_code == 200
    assert r2.json()['program']['name'] == 'Chemistry'
    assert client.get(f"/programs/{program['id'] + 1}/semesters/{semester['id']}").status_code == 404
    assert [s['id'] for s in client.get(base).json()] == [semester['id']]
    assert len(client.get('/semesters').json()) == 1
    # a program with semesters cannot be removed
    r3 = client.delete(f"/programs/{program['id']}", headers=auth_headers)
    assert r3.status_code == 409
    assert r3.json()['detail'] == ['Unable to Delete Program!']
    r4 = client.patch(f"{base}/{semester['id']}", json={'end_date': '2025-01-01'}, headers=auth_headers)
    assert r4.status_code == 422
    assert client.delete(f"{base}/{semester['id']}", headers=auth_headers).status_code == 200
    assert client.delete(f"/programs/{program['id']}", headers=auth_headers).status_code == 200


def test_course_assignment_endpoints(client, auth_headers):
    tc = client.post('/teacher-courses', json={'teacher_id': 1, 'course_id': 2}, headers=auth_headers)
    assert tc.status_code == 201
    tc_id = tc.json()['id']
    assert client.get(f'/teacher-courses/{tc_id}').json()['course_id'] == 2
    r = client.patch(f'/teacher-courses/{tc_id}', json={'course_id': 5}, headers=auth_headers)
    assert r.json()['course_id'] == 5
    assert client.get('/teacher-courses/999').status_code == 404

    sc = client.post('/student-courses', json={'student_id': 3, 'course_id': 5}, headers=auth_headers)
    assert sc.status_code == 201
    sc_id = sc.json()['id']
    assert len(client.get('/student-courses').json()) == 1
    assert client.post('/student-courses', json={'student_id': -1}, headers=auth_headers).status_code == 422
    assert client.delete(f'/student-courses/{sc_id}', headers=auth_headers).status_code == 200
    assert client.patch(f'/student-courses/{sc_id}', json={'course_id': 1}, headers=auth_headers).status_code == 404
    assert client.delete(f'/teacher-courses/{tc_id}', headers=auth_headers).status_code == 200


def test_expired_token_rejected(client):
    headers = {'Authorization': f'Bearer {issue_token("tester", expire_hours=-1)}'}
    r = client.post('/programs', json={'name': 'Biology'}, headers=headers)
    assert r.status_code == 401
    assert r.json()['detail'] == 'token expired'


def test_token_without_subject_rejected(client):
    token = jwt.encode({'exp': int(time.time()) + 3600}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    r = client.post('/programs', json={'name': 'Biology'}, headers={'Authorization': f'Bearer {token}'})
    assert r.status_code == 401
    assert r.json()['detail'] == 'invalid token payload'
    assert client.get('/programs').json() == []
