from fastapi.testclient import TestClient

from ibdp_coach.models import CoachingSession, Draft, Outline, Plan, Review


def test_repeated_saves_keep_one_row_per_stage(client: TestClient, session, assignment, student_headers):
    base = f"/api/v2/assignments/{assignment['id']}"

    for attempt in range(2):
        assert client.put(
            f"{base}/plan", json={"thesis": f"Thesis {attempt}"}, headers=student_headers
        ).status_code == 200
        sections = client.get(f"{base}/outline", headers=student_headers).json()["sections"]
        assert client.put(
            f"{base}/outline", json={"sections": sections}, headers=student_headers
        ).status_code == 200
        assert client.put(
            f"{base}/draft", json={"content": f"Draft {attempt}"}, headers=student_headers
        ).status_code == 200

    for model in (Plan, Outline, Draft):
        assert session.query(model).filter(model.assignment_id == assignment["id"]).count() == 1
    assert client.get(f"{base}/plan", headers=student_headers).json()["thesis"] == "Thesis 1"


def test_plan_save_moves_to_outlining(client: TestClient, assignment, student_headers):
    response = client.put(
        f"/api/v2/assignments/{assignment['id']}/plan",
        json={"thesis": "Satrapi uses visual irony", "questions": ["Why black and white?"]},
        headers=student_headers,
    )

    data = response.json()
    assert data["status"] == "outlining"
    assert data["questions"] == ["Why black and white?"]
    assert data["next_path"] == f"/assignment/{assignment['id']}/outline"


def test_outline_defaults_and_save_status(client: TestClient, assignment, student_headers):
    base = f"/api/v2/assignments/{assignment['id']}"

    outline = client.get(f"{base}/outline", headers=student_headers).json()
    assert len(outline["sections"]) == 6
    assert outline["sections"][0]["title"] == "Introduction"

    response = client.put(f"{base}/outline", json={"sections": outline["sections"]}, headers=student_headers)
    assert response.json()["status"] == "draft"
    assert response.json()["next_path"] == f"/assignment/{assignment['id']}/draft"


def test_outline_commands_persist_without_status_change(client: TestClient, assignment, student_headers):
    base = f"/api/v2/assignments/{assignment['id']}"
    commands = [
        {"op": "edit_bullet", "section_index": 0, "bullet_index": 0, "text": "Hook"},
        {"op": "add_bullet", "section_index": 0, "text": "Thesis"},
        {"op": "move_bullet", "from_section": 0, "from_index": 1, "to_section": 2, "to_index": 0},
    ]

    response = client.post(f"{base}/outline/commands", json={"commands": commands}, headers=student_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "planning"
    assert data["sections"][0]["bullets"] == ["Hook"]
    assert data["sections"][2]["bullets"] == ["Thesis", ""]
    stored = client.get(f"{base}/outline", headers=student_headers).json()
    assert stored["sections"] == data["sections"]


def test_outline_command_out_of_range(client: TestClient, assignment, student_headers):
    response = client.post(
        f"/api/v2/assignments/{assignment['id']}/outline/commands",
        json={"commands": [{"op": "reorder_section", "from_index": 0, "to_index": 10}]},
        headers=student_headers,
    )
    assert response.status_code == 400
    assert "out of range" in response.json()["error"]


def test_draft_word_count(client: TestClient, assignment, student_headers):
    base = f"/api/v2/assignments/{assignment['id']}/draft"

    data = client.put(base, json={"content": "  Identity is\nconstructed  through memory. "}, headers=student_headers).json()
    assert data["word_count"] == 5
    assert data["status"] == "writing"

    data = client.put(base, json={"content": ""}, headers=student_headers).json()
    assert data["word_count"] == 0


def test_coaching_records_session(client: TestClient, session, assignment, student_headers, ai_client):
    base = f"/api/v2/assignments/{assignment['id']}/coaching"

    empty = client.post(base, json={"currentIdea": "   "}, headers=student_headers)
    assert empty.status_code == 400
    assert empty.json()["error"] == "Please describe your idea first"
    assert ai_client.calls == []

    response = client.post(base, json={"currentIdea": "Memory and identity"}, headers=student_headers)
    assert response.status_code == 200
    assert len(response.json()["questions"]) == 3
    assert "Knowledge, understanding and interpretation" in ai_client.calls[0]["user"]

    stored = session.query(CoachingSession).filter_by(assignment_id=assignment["id"]).all()
    assert len(stored) == 1
    assert stored[0].session_type == "plan"
    assert stored[0].input_text == "Memory and identity"


def test_evaluation_uses_saved_draft_and_saves_review(client: TestClient, session, assignment, student_headers, ai_client):
    base = f"/api/v2/assignments/{assignment['id']}"

    empty = client.post(f"{base}/evaluation", json={}, headers=student_headers)
    assert empty.status_code == 400
    assert empty.json()["error"] == "Please write some content first"

    client.put(f"{base}/draft", json={"content": "Satrapi frames memory visually."}, headers=student_headers)

    unsaved = client.post(f"{base}/evaluation", json={}, headers=student_headers).json()
    assert unsaved["review_id"] is None
    assert unsaved["status"] == "writing"
    assert "Satrapi frames memory visually." in ai_client.calls[0]["user"]

    saved = client.post(f"{base}/evaluation", json={"save": True}, headers=student_headers).json()
    assert saved["review_id"] is not None
    assert saved["status"] == "reviewing"
    assert saved["evaluation"]["overallScore"] == 5

    reviews = client.get(f"{base}/reviews", headers=student_headers).json()
    assert reviews["total"] == 1
    assert reviews["reviews"][0]["actions"] == saved["evaluation"]["nextSteps"]
    assert session.query(Review).count() == 1
