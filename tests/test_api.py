"""
Tests for the status read API.
"""
import json

import pytest
from fastapi.testclient import TestClient

from process_status.main import create_app


@pytest.fixture
def client(store):
    with TestClient(create_app(store=store)) as test_client:
        yield test_client


def seed(fake_redis, identity: str, document: dict):
    fake_redis.seed(f"test:status:{identity}", json.dumps(document))


class TestProcessStatus:
    def test_unknown_process(self, client):
        resp = client.get("/api/v1/processes/nope")

        assert resp.status_code == 404
        assert resp.json() == {"detail": "Process not found"}

    def test_returns_flat_document(self, client, fake_redis):
        document = {
            "vars": {"PROCESS_ID": "p1", "rows": 3},
            "job_class": "ExportJob",
            "created_at": "2024-01-01T12:00:00+00:00",
            "started_at": "2024-01-01T12:00:01+00:00",
            "status": "working",
            "retries": [{"created_at": "2024-01-01T12:00:00+00:00", "failed_at": "2024-01-01T11:59:00+00:00"}],
        }
        seed(fake_redis, "p1", document)

        resp = client.get("/api/v1/processes/p1")

        assert resp.status_code == 200
        assert resp.json() == document

    def test_unreached_timestamps_are_omitted(self, client, fake_redis):
        seed(fake_redis, "p1", {"status": "queued", "created_at": "t0"})

        body = client.get("/api/v1/processes/p1").json()

        assert "started_at" not in body
        assert "retries" not in body

    @pytest.mark.filterwarnings("ignore::process_status.domain.errors.CorruptStatusWarning")
    def test_corrupt_document_is_not_found(self, client, fake_redis):
        fake_redis.seed("test:status:p1", "{{{")

        resp = client.get("/api/v1/processes/p1")

        assert resp.status_code == 404

    def test_store_down(self, client, fake_redis):
        fake_redis.down = True

        resp = client.get("/api/v1/processes/p1")

        assert resp.status_code == 503


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "store": "up"}

    def test_health_store_down(self, client, fake_redis):
        fake_redis.down = True

        assert client.get("/health").json() == {"status": "ok", "store": "down"}

    def test_metrics(self, client):
        client.get("/api/v1/processes/nope")

        resp = client.get("/metrics")

        assert resp.status_code == 200
        assert "process_status_reads_total" in resp.text


def test_lifespan_closes_store(store, fake_redis):
    with TestClient(create_app(store=store)):
        pass

    assert fake_redis.closed is True


def test_unexpected_field_types_are_returned_as_stored(client, fake_redis):
    document = {"status": 3, "vars": ["a", "b"], "retries": "abc", "created_at": 1704110400}
    seed(fake_redis, "p1", document)

    resp = client.get("/api/v1/processes/p1")

    assert resp.status_code == 200
    assert resp.json() == document
