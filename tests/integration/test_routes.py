import json

import pytest
from fastapi import status

from app.api import routes as routes_module
from app.core.validation import DOCX_MIME
from app.core.validation import PDF_MIME

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _upload(client, headers, name="Cours_Intro.pdf", mime=PDF_MIME, analyze=False):
    files = {"file": (name, b"%PDF-1.4\nIntroduction\n", mime)}
    return client.post("/api/files", files=files, data={"analyze": str(analyze).lower()}, headers=headers)


# ---------------------------------------------------------------------------
# Health & auth
# ---------------------------------------------------------------------------


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == {"status": "ok"}


def test_register_returns_session_and_token(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "a@b.fr", "password": "pw", "name": "Alice", "institution": "Sorbonne"},
    )
    assert resp.status_code == status.HTTP_201_CREATED
    body = resp.json()
    assert body["token"].startswith("simulated_jwt_")
    assert body["session"]["email"] == "a@b.fr"
    assert "createdAt" in body["session"]
    assert "password" not in body["session"]


def test_register_duplicate_email(client, auth_headers):
    resp = client.post(
        "/api/auth/register",
        json={"email": "prof@example.com", "password": "x", "name": "Autre"},
    )
    assert resp.status_code == status.HTTP_409_CONFLICT
    assert resp.json() == {"error": "Cet email est déjà utilisé", "kind": "DuplicateAccount"}


def test_login_wrong_password(client, auth_headers):
    resp = client.post("/api/auth/login", json={"email": "prof@example.com", "password": "nope"})
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED
    assert resp.json()["kind"] == "InvalidCredentials"


def test_login_logout_cycle(client, auth_headers):
    assert client.post("/api/auth/logout").status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/api/auth/session").json() is None

    resp = client.post("/api/auth/login", json={"email": "prof@example.com", "password": "secret"})
    assert resp.status_code == status.HTTP_200_OK
    assert client.get("/api/auth/session").json()["email"] == "prof@example.com"
    # the token issued at registration is no longer valid
    assert client.get("/api/files", headers=auth_headers).status_code == status.HTTP_401_UNAUTHORIZED


def test_register_validation_error(client):
    resp = client.post("/api/auth/register", json={"email": "a@b.fr"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "Input validation failed"


# ---------------------------------------------------------------------------
# /api/files
# ---------------------------------------------------------------------------


def test_files_require_a_session(client):
    assert client.get("/api/files").status_code == status.HTTP_401_UNAUTHORIZED
    assert client.get("/api/files", headers={"X-Session-Token": "bogus"}).status_code == 401


def test_upload_and_list(client, auth_headers):
    resp = _upload(client, auth_headers, name="TD.docx", mime=DOCX_MIME)
    assert resp.status_code == status.HTTP_201_CREATED
    record = resp.json()
    assert record["status"] == "pending"
    assert record["mimeType"] == DOCX_MIME

    listed = client.get("/api/files", headers=auth_headers).json()["files"]
    assert [f["id"] for f in listed] == [record["id"]]


def test_upload_unsupported_format(client, auth_headers):
    resp = _upload(client, auth_headers, name="notes.txt", mime="text/plain")
    assert resp.status_code == status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    assert resp.json()["kind"] == "UnsupportedFormat"
    assert client.get("/api/files", headers=auth_headers).json()["files"] == []


def test_upload_with_analysis(client, auth_headers):
    resp = _upload(client, auth_headers, analyze=True)
    assert resp.status_code == status.HTTP_201_CREATED
    assert resp.json()["status"] == "completed"


def test_upload_unexpected_error_is_traced(client, auth_headers, monkeypatch):
    async def _explode(*_args, **_kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(routes_module, "_register_uploaded_file", _explode)
    resp = _upload(client, auth_headers)
    assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert "trace:" in resp.json()["detail"]


def test_delete_is_idempotent(client, auth_headers):
    file_id = _upload(client, auth_headers).json()["id"]
    for _ in range(2):
        resp = client.delete(f"/api/files/{file_id}", headers=auth_headers)
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json() == {"success": True, "id": file_id}
    assert client.get("/api/files", headers=auth_headers).json()["files"] == []


# ---------------------------------------------------------------------------
# /api/analysis
# ---------------------------------------------------------------------------


def test_analysis_of_unknown_file(client, auth_headers):
    resp = client.post("/api/analysis/404", headers=auth_headers)
    assert resp.status_code == status.HTTP_404_NOT_FOUND
    assert resp.json()["kind"] == "FileNotFound"


def test_get_analysis_before_analyze(client, auth_headers):
    file_id = _upload(client, auth_headers).json()["id"]
    resp = client.get(f"/api/analysis/{file_id}", headers=auth_headers)
    assert resp.status_code == status.HTTP_404_NOT_FOUND
    assert resp.json()["kind"] == "AnalysisNotFound"


def test_analyze_then_generate_single_artifact(client, auth_headers):
    file_id = _upload(client, auth_headers).json()["id"]

    resp = client.post(f"/api/analysis/{file_id}", headers=auth_headers)
    assert resp.status_code == status.HTTP_200_OK
    content = resp.json()["content"]
    assert content["title"] == "Cours_Intro"
    assert 1000 <= content["wordCount"] <= 5999

    resp = client.post(f"/api/analysis/{file_id}/artifacts/tpSheet", headers=auth_headers)
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["artifact"] == "tpSheet"
    assert resp.json()["payload"]["metadata"]["duration"] == "3 heures"

    stored = client.get(f"/api/analysis/{file_id}", headers=auth_headers).json()
    assert stored["tpSheet"]["title"] == "Fiche de Travaux Pratiques"
    # absent artifacts are left out, as in the complete and streamed results
    assert "quiz" not in stored


def test_unknown_artifact_name(client, auth_headers):
    file_id = _upload(client, auth_headers, analyze=True).json()["id"]
    resp = client.post(f"/api/analysis/{file_id}/artifacts/podcast", headers=auth_headers)
    assert resp.status_code == 422


def test_complete_analysis(client, auth_headers):
    file_id = _upload(client, auth_headers, analyze=True).json()["id"]

    resp = client.post(f"/api/analysis/{file_id}/complete", headers=auth_headers)
    assert resp.status_code == status.HTTP_200_OK
    body = resp.json()
    for key in ("suggestions", "summary", "quiz", "slides", "courseSheet", "tpSheet"):
        assert key in body
    assert [q["correctAnswer"] for q in body["quiz"]["questions"]] == [2, 1, 3, 0, 3]


def test_complete_analysis_stream(client, auth_headers):
    file_id = _upload(client, auth_headers, analyze=True).json()["id"]

    resp = client.post(f"/api/analysis/{file_id}/complete?stream=true", headers=auth_headers)
    assert resp.status_code == status.HTTP_200_OK
    assert resp.headers["content-type"].startswith("application/x-ndjson")

    events = [json.loads(line) for line in resp.text.splitlines() if line]
    assert events[0]["type"] == "status"
    assert [e["type"] for e in events[-2:]] == ["data", "finished"]
    assert len([e for e in events if e["type"] == "artifact"]) == 6


def test_complete_without_analysis(client, auth_headers):
    file_id = _upload(client, auth_headers).json()["id"]
    resp = client.post(f"/api/analysis/{file_id}/complete", headers=auth_headers)
    assert resp.status_code == status.HTTP_404_NOT_FOUND
    assert resp.json()["error"] == "Analyse non trouvée. Veuillez réessayer plus tard."


def test_files_of_another_user_are_hidden(client, auth_headers):
    file_id = _upload(client, auth_headers, analyze=True).json()["id"]

    other = client.post(
        "/api/auth/register",
        json={"email": "autre@example.com", "password": "pw", "name": "Autre"},
    ).json()
    other_headers = {"X-Session-Token": other["token"]}

    assert client.get(f"/api/analysis/{file_id}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/files/{file_id}", headers=other_headers).status_code == 404
    assert client.get("/api/files", headers=other_headers).json()["files"] == []


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "fmt, message",
    [("pdf", "Export PDF réussi"), ("pptx", "Export PowerPoint réussi")],
)
def test_export(client, auth_headers, fmt, message):
    file_id = _upload(client, auth_headers, analyze=True).json()["id"]
    resp = client.post(f"/api/export/{file_id}/{fmt}", headers=auth_headers)
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == {"success": True, "message": message, "downloadUrl": "#"}


def test_send_results_by_email(client, auth_headers):
    file_id = _upload(client, auth_headers, analyze=True).json()["id"]
    resp = client.post(f"/api/email/{file_id}", json={"email": "etudiant@univ.fr"}, headers=auth_headers)
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["message"] == "Résultats envoyés avec succès à etudiant@univ.fr"


def test_send_results_invalid_email(client, auth_headers):
    file_id = _upload(client, auth_headers, analyze=True).json()["id"]
    resp = client.post(f"/api/email/{file_id}", json={"email": "pas-une-adresse"}, headers=auth_headers)
    assert resp.status_code == 422
