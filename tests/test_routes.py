from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from eduopps import create_app
from eduopps.core.database import get_db
from eduopps.core.dependencies import get_clock
from eduopps.core.security import create_access_token
from conftest import NOW


@pytest.fixture
def app(session_factory, clock):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    return app


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


def auth(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def opportunity_payload(**overrides):
    payload = {
        "title": "Hospital Shadowing",
        "organization": "County General",
        "description": "Follow a nurse for a week",
        "start_date": (NOW + timedelta(days=10)).isoformat(),
        "end_date": (NOW + timedelta(days=17)).isoformat(),
        "application_deadline": (NOW + timedelta(days=3)).isoformat(),
        "location": "Springfield",
        "opportunity_type": "workshop",
        "industry": "healthcare",
        "age_groups": ["16-18"],
        "number_of_spaces": 1,
        "contact_email": "",
    }
    payload.update(overrides)
    return payload


async def test_health(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-ID"]


async def test_requests_without_token_are_rejected(client):
    response = await client.get("/api/v1/opportunities")
    assert response.status_code == 401
    assert response.json()["error_code"] == "AUTH_ERROR"


async def test_tampered_token_is_rejected(client, factory, schools):
    north, _ = schools
    student = await factory.user("student", north)
    token = create_access_token(student.id) + "x"

    response = await client.get("/api/v1/opportunities", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error_code"] == "TOKEN_ERROR"


async def test_inactive_user_is_rejected(client, factory, schools):
    north, _ = schools
    student = await factory.user("student", north, is_active=False)
    response = await client.get("/api/v1/opportunities", headers=auth(student))
    assert response.status_code == 401


async def test_cookie_token_is_accepted(client, factory, schools):
    north, _ = schools
    student = await factory.user("student", north)
    client.cookies.set("access_token", create_access_token(student.id))

    response = await client.get("/api/v1/opportunities")
    assert response.status_code == 200


async def test_teacher_posts_and_student_registers(client, factory, schools):
    north, _ = schools
    teacher = await factory.user("teacher", north)
    alice = await factory.user("student", north)
    bob = await factory.user("student", north)

    created = await client.post("/api/v1/opportunities", json=opportunity_payload(), headers=auth(teacher))
    assert created.status_code == 201, created.text
    body = created.json()
    assert body["school_id"] == north.id
    assert body["created_by_id"] == teacher.id
    assert body["contact_email"] is None
    assert body["spaces_left"] == 1
    assert body["deadline_passed"] is False
    assert body["days_until_deadline"] == 3
    opportunity_id = body["id"]

    registered = await client.post(
        "/api/v1/student-interests", json={"opportunity_id": opportunity_id}, headers=auth(alice)
    )
    assert registered.status_code == 201
    again = await client.post(
        "/api/v1/student-interests", json={"opportunity_id": opportunity_id}, headers=auth(alice)
    )
    assert again.json()["id"] == registered.json()["id"]

    full = await client.post(
        "/api/v1/student-interests", json={"opportunity_id": opportunity_id}, headers=auth(bob)
    )
    assert full.status_code == 409
    assert full.json()["error_code"] == "CAPACITY_EXCEEDED"
    assert full.json()["details"]["spaces_left"] == 0

    detail = await client.get(f"/api/v1/opportunities/{opportunity_id}", headers=auth(bob))
    assert detail.json()["registered_count"] == 1
    assert detail.json()["spaces_left"] == 0

    attendees = await client.get(f"/api/v1/student-interests/opportunity/{opportunity_id}", headers=auth(teacher))
    assert [a["id"] for a in attendees.json()] == [alice.id]

    denied = await client.get(f"/api/v1/student-interests/opportunity/{opportunity_id}", headers=auth(bob))
    assert denied.status_code == 403

    counts = await client.get("/api/v1/student-interests/counts", headers=auth(bob))
    assert counts.json() == {str(opportunity_id): 1}

    mine = await client.get("/api/v1/student-interests/student", headers=auth(alice))
    assert [i["opportunity_id"] for i in mine.json()] == [opportunity_id]

    removed = await client.delete(f"/api/v1/student-interests/{opportunity_id}", headers=auth(alice))
    assert removed.status_code == 200
    removed_again = await client.delete(f"/api/v1/student-interests/{opportunity_id}", headers=auth(alice))
    assert removed_again.status_code == 200

    retry = await client.post(
        "/api/v1/student-interests", json={"opportunity_id": opportunity_id}, headers=auth(bob)
    )
    assert retry.status_code == 201


async def test_registration_errors(client, factory, schools):
    north, south = schools
    outsider = await factory.user("student", south)
    opportunity = await factory.opportunity(north)

    hidden = await client.post(
        "/api/v1/student-interests", json={"opportunity_id": opportunity.id}, headers=auth(outsider)
    )
    assert hidden.status_code == 403
    assert hidden.json()["error_code"] == "PERMISSION_DENIED"

    missing = await client.post(
        "/api/v1/student-interests", json={"opportunity_id": 999}, headers=auth(outsider)
    )
    assert missing.status_code == 404


async def test_invalid_dates_are_rejected(client, factory, schools):
    north, _ = schools
    teacher = await factory.user("teacher", north)
    payload = opportunity_payload(end_date=(NOW - timedelta(days=1)).isoformat())

    response = await client.post("/api/v1/opportunities", json=payload, headers=auth(teacher))
    assert response.status_code == 422


async def test_student_cannot_post(client, factory, schools):
    north, _ = schools
    student = await factory.user("student", north)
    response = await client.post("/api/v1/opportunities", json=opportunity_payload(), headers=auth(student))
    assert response.status_code == 403
    details = response.json()["details"]
    assert details["required"] == "can_create_opportunities"
    assert details["granted"] == ["can_view_opportunities"]


async def test_listing_with_registered_students(client, factory, schools):
    north, south = schools
    teacher = await factory.user("teacher", north)
    student = await factory.user("student", north)
    popular = await factory.opportunity(north, number_of_spaces=4)
    await factory.opportunity(north)
    elsewhere = await factory.opportunity(south)

    registered = await client.post(
        "/api/v1/student-interests", json={"opportunity_id": popular.id}, headers=auth(student)
    )
    assert registered.status_code == 201
    outsider = await factory.user("student", south)
    other = await client.post(
        "/api/v1/student-interests", json={"opportunity_id": elsewhere.id}, headers=auth(outsider)
    )
    assert other.status_code == 201

    response = await client.get("/api/v1/opportunities/with-registered-students", headers=auth(teacher))

    assert response.status_code == 200
    body = response.json()
    assert [o["id"] for o in body] == [popular.id]
    assert body[0]["registered_count"] == 1
    assert body[0]["spaces_left"] == 3


async def test_edit_and_delete_scope(client, factory, schools):
    north, south = schools
    moderator = await factory.user("moderator", north)
    outsider = await factory.user("moderator", south)
    opportunity = await factory.opportunity(north)

    forbidden = await client.put(
        f"/api/v1/opportunities/{opportunity.id}", json={"title": "Hijacked"}, headers=auth(outsider)
    )
    assert forbidden.status_code == 403

    edited = await client.put(
        f"/api/v1/opportunities/{opportunity.id}",
        json={"title": "Curated", "is_global": True},
        headers=auth(moderator)
    )
    assert edited.status_code == 200
    assert edited.json()["title"] == "Curated"
    assert edited.json()["is_global"] is False

    null_title = await client.put(
        f"/api/v1/opportunities/{opportunity.id}", json={"title": None}, headers=auth(moderator)
    )
    assert null_title.status_code == 422

    deleted = await client.delete(f"/api/v1/opportunities/{opportunity.id}", headers=auth(moderator))
    assert deleted.status_code == 200
    gone = await client.get(f"/api/v1/opportunities/{opportunity.id}", headers=auth(moderator))
    assert gone.status_code == 404


async def test_search_route(client, factory, schools):
    north, _ = schools
    student = await factory.user("student", north)
    await factory.opportunity(north, title="Coding Bootcamp", age_groups=["13-15"])
    await factory.opportunity(north, title="Art Fair", age_groups=["16-18"])

    response = await client.get(
        "/api/v1/opportunities/search",
        params={"query": "coding", "age_group": ["13-15"]},
        headers=auth(student)
    )
    assert response.status_code == 200
    assert [o["title"] for o in response.json()] == ["Coding Bootcamp"]


async def test_preferences_round_trip_and_listing(client, factory, schools):
    north, _ = schools
    student = await factory.user("student", north)
    await factory.opportunity(north, title="Tech", industry="technology")
    await factory.opportunity(north, title="Health", industry="healthcare")

    empty = await client.get("/api/v1/student-preferences", headers=auth(student))
    assert empty.json()["industries"] == []
    assert empty.json()["id"] is None

    saved = await client.post(
        "/api/v1/student-preferences",
        json={"industries": ["healthcare", " "], "locations": ["Springfield"]},
        headers=auth(student)
    )
    assert saved.status_code == 201
    assert saved.json()["industries"] == ["healthcare"]

    listing = await client.get("/api/v1/opportunities", headers=auth(student))
    assert [o["title"] for o in listing.json()] == ["Health"]

    updated = await client.put(
        "/api/v1/student-preferences", json={"opportunity_types": ["internship"]}, headers=auth(student)
    )
    assert updated.json()["industries"] == ["healthcare"]
    assert updated.json()["opportunity_types"] == ["internship"]
    assert updated.json()["locations"] == ["Springfield"]

    widened = await client.get("/api/v1/opportunities", headers=auth(student))
    assert sorted(o["title"] for o in widened.json()) == ["Health", "Tech"]
