import pytest
from fastapi.testclient import TestClient

from api.main import app, get_store
from pdf_toolkit.jobs.types import Failed, JobRecord, Succeeded


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _seed(store, n: int) -> None:
    for i in range(n):
        store.upsert(
            JobRecord(
                id=f"run-{i}",
                job_type="render",
                started_at_utc=f"2025-01-01T00:00:{i:02d}+00:00",
                command=("pdf-toolkit", "render"),
                outcome=Succeeded() if i % 2 == 0 else Failed(f"boom {i}"),
                exit_code=0 if i % 2 == 0 else 1,
            )
        )


def test_health_check(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_jobs_empty(client: TestClient):
    response = client.get("/jobs")
    assert response.status_code == 200
    assert response.json() == []


def test_list_jobs_most_recent_first_with_limit(client: TestClient, store):
    _seed(store, 5)

    response = client.get("/jobs", params={"limit": 2})

    assert response.status_code == 200
    body = response.json()
    assert [j["id"] for j in body] == ["run-4", "run-3"]
    assert body[0]["status"] == "ok"
    assert body[0]["error"] is None
    assert body[1]["status"] == "error"
    assert body[1]["error"] == "boom 3"
    assert body[0]["command"] == ["pdf-toolkit", "render"]


@pytest.mark.parametrize("limit", [0, 201, "abc"])
def test_list_jobs_rejects_bad_limit(client: TestClient, limit):
    assert client.get("/jobs", params={"limit": limit}).status_code == 422


def test_get_job(client: TestClient, store):
    _seed(store, 2)

    response = client.get("/jobs/run-1")

    assert response.status_code == 200
    assert response.json()["exit_code"] == 1


def test_get_unknown_job_is_404(client: TestClient):
    response = client.get("/jobs/nope")
    assert response.status_code == 404
    assert "nope" in response.json()["detail"]
