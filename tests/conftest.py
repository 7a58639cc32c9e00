import io
import random

import pytest
from fastapi.testclient import TestClient
from starlette.datastructures import Headers
from starlette.datastructures import UploadFile

from app.core.config import Settings
from app.core.deps import build_services
from app.core.latency import NoLatency
from app.core.validation import PDF_MIME
from app.main import create_app
from app.services.storage.kv_store import KeyValueStore


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, storage_path=None, simulate_latency=False, random_seed=1234)


@pytest.fixture
def services(test_settings):
    """Fully wired services over an in-memory store, with no simulated delay."""
    return build_services(test_settings, latency=NoLatency(), rng=random.Random(1234), store=KeyValueStore())


@pytest.fixture
def owner(services):
    session, _token = services.sessions.register("prof@example.com", "secret", "Prof", "Université")
    return session


@pytest.fixture
def uploaded(services, owner):
    """A registered PDF course document, not yet analyzed."""
    return services.files.upload_file("Cours_Intro.pdf", PDF_MIME, b"%PDF-1.4\nIntroduction\n", owner.id)


# Fixture factory to create upload files with filename, content and declared MIME type
@pytest.fixture
def make_upload():
    def _make_upload(filename: str, content: bytes, content_type: str = PDF_MIME) -> UploadFile:
        return UploadFile(
            file=io.BytesIO(content),
            filename=filename,
            headers=Headers({"content-type": content_type}),
        )

    return _make_upload


@pytest.fixture
def client(test_settings):
    app = create_app(test_settings, latency=NoLatency(), rng=random.Random(1234), store=KeyValueStore())
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "prof@example.com", "password": "secret", "name": "Prof", "institution": "Université"},
    )
    assert resp.status_code == 201, resp.text
    return {"X-Session-Token": resp.json()["token"]}
