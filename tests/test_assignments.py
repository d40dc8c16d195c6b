from fastapi.testclient import TestClient

from conftest import get_auth_headers, register


def test_create_requires_ghostwriting_policy(client: TestClient, student_headers):
    response = client.post(
        "/api/v2/assignments/",
        json={"title": "TOK essay", "subject": "tok", "task_type": "tok"},
        headers=student_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Please accept the No Ghostwriting policy"


def test_create_picks_default_rubric_and_starts_planning(client: TestClient, assignment):
    assert assignment["status"] == "planning"
    assert assignment["no_ghostwriting_accepted"] is True

    rubric = client.get(
        f"/api/v2/rubrics/{assignment['rubric_id']}",
        headers=get_auth_headers(client, "student1"),
    ).json()
    assert rubric["subject"] == "lang_a"
    assert rubric["task_type"] == "essay"
    assert rubric["is_default"] is True


def test_create_without_matching_rubric(client: TestClient, student_headers):
    response = client.post(
        "/api/v2/assignments/",
        json={
            "title": "Lab write-up",
            "subject": "physics",
            "task_type": "ia",
            "no_ghostwriting_accepted": True,
        },
        headers=student_headers,
    )
    assert response.status_code == 201
    assert response.json()["rubric_id"] is None


def test_list_is_per_owner(client: TestClient, assignment):
    register(client, "student2")
    other = get_auth_headers(client, "student2")
    own = get_auth_headers(client, "student1")

    assert client.get("/api/v2/assignments/", headers=own).json()["total"] == 1
    assert client.get("/api/v2/assignments/", headers=other).json()["total"] == 0
    assert client.get(f"/api/v2/assignments/{assignment['id']}", headers=other).status_code == 404


def test_requires_authentication(client: TestClient):
    assert client.get("/api/v2/assignments/").status_code == 401


def test_route_follows_status(client: TestClient, assignment, student_headers):
    assignment_id = assignment["id"]

    route = client.get(f"/api/v2/assignments/{assignment_id}/route", headers=student_headers).json()
    assert route == {
        "assignment_id": assignment_id,
        "status": "planning",
        "stage": "plan",
        "path": f"/assignment/{assignment_id}/plan",
    }

    client.put(f"/api/v2/assignments/{assignment_id}/plan", json={"thesis": "T"}, headers=student_headers)
    route = client.get(f"/api/v2/assignments/{assignment_id}/route", headers=student_headers).json()
    assert route["path"] == f"/assignment/{assignment_id}/outline"

    client.put(
        f"/api/v2/assignments/{assignment_id}/draft",
        json={"content": "Some words here"},
        headers=student_headers,
    )
    route = client.get(f"/api/v2/assignments/{assignment_id}/route", headers=student_headers).json()
    assert route["status"] == "writing"
    assert route["path"] == f"/assignment/{assignment_id}/draft"


def test_route_for_missing_assignment_redirects_home(client: TestClient, student_headers):
    response = client.get("/api/v2/assignments/999/route", headers=student_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Failed to load assignment", "path": "/"}


def test_complete(client: TestClient, assignment, student_headers):
    response = client.post(f"/api/v2/assignments/{assignment['id']}/complete", headers=student_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "complete"
