import uuid

import pytest
from fastapi.testclient import TestClient

from conftest import TEST_BIO, TEST_PASSWORD
from tutor_api.main import create_app
from tutor_api.services import course_service

COURSE_PAYLOAD = {
    'title': 'Calculus Bootcamp',
    'description': 'Limits, derivatives and integrals in four weeks.',
    'price': 12000,
    'durationMinutes': 90,
    'category': 'math',
    'difficultyLevel': 'advanced',
}


def _tutor_headers(client, email: str) -> dict:
    client.post(
        '/auth/register',
        json={'email': email, 'password': TEST_PASSWORD, 'firstName': 'Tia', 'lastName': 'Tutor', 'role': 'tutor'},
    )
    token = client.post('/auth/login', json={'email': email, 'password': TEST_PASSWORD}).json()['token']
    headers = {'Authorization': f'Bearer {token}'}
    client.post(
        '/tutors/profile',
        headers=headers,
        json={'bio': TEST_BIO, 'specializations': ['calculus'], 'hourlyRate': 5000, 'yearsExperience': 8},
    )
    return headers


@pytest.fixture
def owner_headers(client) -> dict:
    return _tutor_headers(client, 'owner@example.com')


@pytest.fixture
def course(client, owner_headers) -> dict:
    response = client.post('/courses', headers=owner_headers, json=COURSE_PAYLOAD)
    assert response.status_code == 201
    return response.json()


def test_create_course_includes_tutor_name(course) -> None:
    assert course['tutorName'] == 'Tia Tutor'
    assert course['difficultyLevel'] == 'advanced'
    assert course['isActive'] is True


def test_owner_updates_course_partially(client, owner_headers, course) -> None:
    response = client.put(f'/courses/{course["id"]}', headers=owner_headers, json={'price': 9900})

    assert response.status_code == 200
    body = response.json()
    assert body['price'] == 9900
    assert body['title'] == course['title']
    assert body['durationMinutes'] == course['durationMinutes']


def test_non_owner_update_matches_missing_course_response(client, course) -> None:
    intruder_headers = _tutor_headers(client, 'intruder@example.com')

    foreign = client.put(f'/courses/{course["id"]}', headers=intruder_headers, json={'price': 1})
    missing = client.put(f'/courses/{uuid.uuid4()}', headers=intruder_headers, json={'price': 1})

    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json() == {'error': 'Course not found or access denied', 'status': 404}
    assert client.get(f'/courses/{course["id"]}').json()['price'] == COURSE_PAYLOAD['price']


def test_update_requires_token(client, course) -> None:
    response = client.put(f'/courses/{course["id"]}', json={'price': 1})

    assert response.status_code == 401


def test_delete_course(client, owner_headers, course) -> None:
    intruder_headers = _tutor_headers(client, 'intruder@example.com')

    assert client.delete(f'/courses/{course["id"]}', headers=intruder_headers).status_code == 404
    assert client.delete(f'/courses/{course["id"]}', headers=owner_headers).status_code == 204
    assert client.get(f'/courses/{course["id"]}').status_code == 404


def test_course_listings(client, owner_headers, course) -> None:
    assert [item['id'] for item in client.get('/courses').json()] == [course['id']]
    assert [item['id'] for item in client.get('/courses/mine', headers=owner_headers).json()] == [course['id']]


def test_invalid_course_payload_is_rejected(client, owner_headers) -> None:
    response = client.post('/courses', headers=owner_headers, json={**COURSE_PAYLOAD, 'durationMinutes': 5})

    assert response.status_code == 400
    assert response.json()['status'] == 400


def test_unexpected_error_uses_error_body(settings, monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(db):
        raise RuntimeError('boom')

    monkeypatch.setattr(course_service, 'list_courses', explode)

    with TestClient(create_app(settings), raise_server_exceptions=False) as client:
        response = client.get('/courses')

    assert response.status_code == 500
    assert response.json() == {'error': 'Internal server error', 'status': 500}
