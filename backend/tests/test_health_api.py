"""
Tests for health and metrics endpoints
"""
from uuid import uuid4


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_detailed_health_checks_database(client):
    r = client.get("/health/detailed")
    assert r.status_code == 200
    assert r.json()["components"]["database"]["status"] == "healthy"


def test_metrics_exposes_contact_counters(client):
    client.get("/contact")

    r = client.get("/metrics")
    assert r.status_code == 200
    assert "auth_token_rejections_total" in r.text
    assert "http_requests_total" in r.text


def test_request_id_header(client):
    r = client.get("/health")
    assert r.headers.get("X-Request-ID")


def test_metrics_label_unknown_paths_with_one_series(client):
    """Arbitrary URLs must not create a metric series each"""
    paths = [f"/nowhere-{uuid4().hex}" for _ in range(3)]
    for path in paths:
        assert client.get(path).status_code == 404

    body = client.get("/metrics").text
    for path in paths:
        assert f'endpoint="{path}"' not in body
    assert 'endpoint="unmatched"' in body


def test_metrics_label_by_route_template(client):
    contact_id = uuid4()
    client.get(f"/contact/{contact_id}")

    body = client.get("/metrics").text
    assert 'endpoint="/contact/{contact_id}"' in body
    assert str(contact_id) not in body


def test_metrics_response_not_cached(client):
    r = client.get("/metrics")
    assert r.headers["content-type"].startswith("text/plain")
    assert r.headers["cache-control"] == "no-store"
