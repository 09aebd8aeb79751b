# wordstat/app/main.py

import os
import uuid
import threading
import logging
from enum import Enum
from typing import Dict, Optional, List
from dataclasses import dataclass, asdict, field
from time import time as now

from fastapi import FastAPI, HTTPException, BackgroundTasks
from pydantic import BaseModel

from .settings import settings
from .storage import ensure_dir, file_size, resolve_shared_path
from .pipeline import run_job
from .timing import TimeLogger

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("WORDSTAT_LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s [wordstat] %(message)s"
)
log = logging.getLogger("wordstat-service")

# ---------------------------------------------------------------------------
# Modelos / Estados
# ---------------------------------------------------------------------------
class JobState(str, Enum):
    QUEUED    = "QUEUED"
    RUNNING   = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED    = "FAILED"
    UNKNOWN   = "UNKNOWN"

class JobRequest(BaseModel):
    input_path: str
    output_path: str

class JobStatus(BaseModel):
    job_id: str
    status: str
    message: Optional[str] = None
    outputs: Optional[List[str]] = None
    input_path: Optional[str] = None
    output_path: Optional[str] = None

@dataclass
class JobTimeline:
    job_id: str
    t_submit: float
    t_start: float | None = None
    t_finish: float | None = None
    status: str = "QUEUED"
    input_size_bytes: int | None = None
    # fase -> milisegundos
    phases_ms: Dict[str, int] = field(default_factory=dict)
    message: str | None = None

# ---------------------------------------------------------------------------
# Estado global
# ---------------------------------------------------------------------------
app = FastAPI(title="wordstat")

JOBS: Dict[str, JobStatus] = {}
JOB_TIMELINES: Dict[str, JobTimeline] = {}
LOCK = threading.Lock()

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
@app.get("/health")
def health():
    log.debug("health check")
    return {
        "ok": True,
        "shared_dir": settings.SHARED_DIR,
        "sort_threshold": settings.SORT_THRESHOLD,
    }

@app.get("/jobs")
def list_jobs():
    with LOCK:
        jobs = [
            {"job_id": job_id, "status": st.status, "message": st.message, "outputs": st.outputs}
            for job_id, st in JOBS.items()
        ]
    return {"jobs": jobs}

@app.post("/jobs")
def submit_job(req: JobRequest, background_tasks: BackgroundTasks):
    try:
        input_path = resolve_shared_path(req.input_path, settings.SHARED_DIR)
        output_path = resolve_shared_path(req.output_path, settings.SHARED_DIR)
    except PermissionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    job_id = uuid.uuid4().hex[:8]
    log.info("job submitted id=%s input=%s output=%s", job_id, input_path, output_path)
    st = JobStatus(job_id=job_id, status=JobState.QUEUED.value,
                   input_path=input_path, output_path=output_path)
    with LOCK:
        JOBS[job_id] = st
        JOB_TIMELINES[job_id] = JobTimeline(job_id=job_id, t_submit=now())
    background_tasks.add_task(execute_job, job_id)
    return {
        "job_id": job_id,
        "status": st.status,
        "message": "job submitted successfully"
    }

@app.get("/jobs/{job_id}")
def get_job(job_id: str):
    st = JOBS.get(job_id)
    if not st:
        return JobStatus(job_id=job_id, status=JobState.UNKNOWN.value, message="not found")
    return st

@app.get("/jobs/{job_id}/timeline")
def job_timeline(job_id: str):
    tl = JOB_TIMELINES.get(job_id)
    if not tl:
        raise HTTPException(404, "job not found")
    return asdict(tl)

@app.delete("/jobs/{job_id}")
def delete_job(job_id: str):
    with LOCK:
        existed = JOBS.pop(job_id, None) is not None
        JOB_TIMELINES.pop(job_id, None)
    return {"job_id": job_id, "deleted": existed}

# ---------------------------------------------------------------------------
# Ejecución
# ---------------------------------------------------------------------------
def execute_job(job_id: str):
    try:
        _execute(job_id)
    except Exception as e:
        st = JOBS.get(job_id)
        if st:
            st.status = JobState.FAILED.value
            st.message = str(e)
        tl = JOB_TIMELINES.get(job_id)
        if tl:
            tl.t_finish = now()
            tl.status = JobState.FAILED.value
            tl.message = str(e)
        log.exception("job failed id=%s err=%s", job_id, e)

def _execute(job_id: str):
    st = JOBS[job_id]
    tl = JOB_TIMELINES[job_id]
    st.status = JobState.RUNNING.value
    tl.status = st.status
    tl.t_start = now()
    log.info("job start id=%s", job_id)

    # sin entrada no se toca nada del lado de la salida
    if os.path.isfile(st.input_path):
        tl.input_size_bytes = file_size(st.input_path)
        ensure_dir(os.path.dirname(st.output_path))

    time_logger = TimeLogger(echo=False)
    ok, out_path, log_or_err = run_job(st.input_path, st.output_path, time_logger=time_logger)
    tl.phases_ms = dict(time_logger.phases)

    if ok:
        st.status = JobState.SUCCEEDED.value
        st.outputs = [out_path]
        log.info("job end id=%s ok=True out=%s", job_id, out_path)
    else:
        st.status = JobState.FAILED.value
        log.error("job end id=%s ok=False err=%s", job_id, log_or_err)
    st.message = log_or_err

    tl.t_finish = now()
    tl.status = st.status
    tl.message = st.message
