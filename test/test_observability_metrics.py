import importlib

from fastapi.testclient import TestClient

NOTES = {
    "notes": "Bitte erledige das Budget-Review dringend heute. "
             "Maria soll die Präsentation für Freitag vorbereiten.",
    "now": "2026-10-14T10:00:00",
}


def _import_app():
    # Import lazily so environment variables (if any) can be set before import.
    mod = importlib.import_module("api.main")
    return mod


def test_metrics_endpoint_exposes_prometheus_text() -> None:
    mod = _import_app()
    client = TestClient(mod.app)

    r = client.get("/metrics")
    assert r.status_code == 200
    assert "text/plain" in r.headers.get("content-type", "")
    body = r.text
    assert "todo_requests_total" in body
    assert "todo_request_latency_seconds" in body
    assert "todo_tasks_extracted_total" in body
    assert "todo_partial_results_total" in body


def test_notes_increments_request_counter() -> None:
    mod = _import_app()
    client = TestClient(mod.app)

    r = client.post("/notes", json=NOTES)
    assert r.status_code == 200
    data = r.json()
    assert len(data["extracted_tasks"]) == 3
    assert data["extracted_tasks"][0]["priority"] == "critical"
    assert data["partial"] is False

    m = client.get("/metrics")
    lines = m.text.splitlines()
    assert any(
        line.startswith('todo_requests_total{endpoint="/notes",status="processed"}')
        for line in lines
    )
    merged = [line for line in lines if line.startswith("todo_tasks_merged_total ")]
    assert merged and float(merged[0].split(" ", 1)[1]) >= 1


def test_export_route() -> None:
    mod = _import_app()
    client = TestClient(mod.app)

    r = client.post("/export/ical", json=NOTES)
    assert r.status_code == 200
    assert "text/calendar" in r.headers["content-type"]
    assert r.text.startswith("BEGIN:VCALENDAR")

    bad = client.post("/export/pdf", json=NOTES)
    assert bad.status_code == 400


def test_slots_route() -> None:
    mod = _import_app()
    client = TestClient(mod.app)

    r = client.post("/slots", json={
        "notes": NOTES["notes"],
        "start": "2026-10-14T09:00:00",
        "end": "2026-10-16T18:00:00",
    })
    assert r.status_code == 200
    data = r.json()
    assert len(data["suggestions"]) == len(data["tasks"]) == 3

    bad = client.post("/slots", json={
        "notes": NOTES["notes"],
        "start": "2026-10-14T09:00:00",
        "end": "2026-10-14T09:00:00",
    })
    assert bad.status_code == 400


def test_metrics_survive_module_reload() -> None:
    metrics = importlib.import_module("api.metrics")
    before = metrics.REQUESTS_TOTAL
    reloaded = importlib.reload(metrics)
    assert reloaded.REQUESTS_TOTAL is before
    assert reloaded.TASKS_MERGED_TOTAL is reloaded.registered_metric(
        object, "todo_tasks_merged_total", "unused"
    )
