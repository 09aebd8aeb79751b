import os

import pytest
from fastapi.testclient import TestClient

from wordstat.app import main
from wordstat.app.settings import settings

@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "SHARED_DIR", str(tmp_path))
    main.JOBS.clear()
    main.JOB_TIMELINES.clear()
    return TestClient(main.app)

def test_health(client, tmp_path):
    body = client.get("/health").json()
    assert body["ok"] is True
    assert body["shared_dir"] == str(tmp_path)

def test_job_runs_to_success(client, tmp_path):
    src = tmp_path / "jobs" / "in.txt"
    src.parent.mkdir()
    src.write_text("b a b c c c")
    out = tmp_path / "jobs" / "out" / "result.txt"

    r = client.post("/jobs", json={"input_path": str(src), "output_path": str(out)})
    assert r.status_code == 200
    job_id = r.json()["job_id"]
    assert r.json()["status"] == "QUEUED"

    st = client.get(f"/jobs/{job_id}").json()
    assert st["status"] == "SUCCEEDED"
    assert st["outputs"] == [os.path.realpath(out)]
    assert out.read_text() == "c 3\nb 2\na 1\n"

    tl = client.get(f"/jobs/{job_id}/timeline").json()
    assert tl["status"] == "SUCCEEDED"
    assert tl["input_size_bytes"] == len("b a b c c c")
    assert set(tl["phases_ms"]) == {"read and count stats", "sort stats", "write stats"}

    jobs = client.get("/jobs").json()["jobs"]
    assert [j["job_id"] for j in jobs] == [job_id]

def test_job_with_missing_input_fails(client, tmp_path):
    r = client.post("/jobs", json={
        "input_path": str(tmp_path / "missing.txt"),
        "output_path": str(tmp_path / "out.txt"),
    })
    job_id = r.json()["job_id"]
    st = client.get(f"/jobs/{job_id}").json()
    assert st["status"] == "FAILED"
    assert "can't open input file for reading" in st["message"]
    assert not (tmp_path / "out.txt").exists()
    assert client.get(f"/jobs/{job_id}/timeline").json()["input_size_bytes"] is None

def test_paths_outside_shared_dir_are_rejected(client, tmp_path):
    r = client.post("/jobs", json={"input_path": "/etc/passwd", "output_path": str(tmp_path / "o")})
    assert r.status_code == 400
    assert main.JOBS == {}

def test_unknown_job(client):
    assert client.get("/jobs/deadbeef").json()["status"] == "UNKNOWN"
    assert client.get("/jobs/deadbeef/timeline").status_code == 404

def test_delete_job(client, tmp_path):
    src = tmp_path / "in.txt"
    src.write_text("x")
    job_id = client.post("/jobs", json={
        "input_path": str(src), "output_path": str(tmp_path / "out.txt"),
    }).json()["job_id"]
    assert client.delete(f"/jobs/{job_id}").json() == {"job_id": job_id, "deleted": True}
    assert client.delete(f"/jobs/{job_id}").json()["deleted"] is False
    assert client.get(f"/jobs/{job_id}").json()["status"] == "UNKNOWN"

def test_missing_input_does_not_create_output_dirs(client, tmp_path):
    out = tmp_path / "results" / "nested" / "out.txt"
    job_id = client.post("/jobs", json={
        "input_path": str(tmp_path / "missing.txt"), "output_path": str(out),
    }).json()["job_id"]
    assert client.get(f"/jobs/{job_id}").json()["status"] == "FAILED"
    assert not (tmp_path / "results").exists()
