from fastapi.testclient import TestClient

DEFAULTS = {
    "pdfDownload": True,
    "equationEditor": True,
    "draggableBullets": True,
    "themeToggle": True,
    "adminAccess": False,
}


def test_defaults(client: TestClient, student_headers):
    response = client.get("/api/v2/feature-flags/", headers=student_headers)
    assert response.status_code == 200
    assert response.json()["flags"] == DEFAULTS


def test_students_cannot_toggle(client: TestClient, student_headers):
    response = client.put(
        "/api/v2/admin/feature-flags/pdfDownload", json={"enabled": False}, headers=student_headers
    )
    assert response.status_code == 403


def test_admin_toggle_and_reset(client: TestClient, admin_headers, student_headers):
    response = client.put(
        "/api/v2/admin/feature-flags/pdfDownload", json={"enabled": False}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["flags"]["pdfDownload"] is False

    # 覆盖值对所有用户生效
    flags = client.get("/api/v2/feature-flags/", headers=student_headers).json()["flags"]
    assert flags["pdfDownload"] is False

    reset = client.post("/api/v2/admin/feature-flags/reset", headers=admin_headers)
    assert reset.json()["flags"] == DEFAULTS


def test_unknown_flag(client: TestClient, admin_headers):
    response = client.put(
        "/api/v2/admin/feature-flags/darkMode", json={"enabled": True}, headers=admin_headers
    )
    assert response.status_code == 404
