from fastapi import FastAPI, Request, Response, Depends, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import ValidationError
from contextlib import asynccontextmanager, suppress
from typing import Optional
import asyncio
import json
import logging
from jobboard.config import load_settings, setup_logging
from jobboard.extractor import extract_from_text, merge_generated
from jobboard.forms import Application, JobDraft, draft_from_form, filter_from_input
from jobboard.jobs import compute_view, load_jobs
from jobboard.models import JOB_TYPES, Job, Notification
from jobboard.sessions import (
    createSession, updateFilter, getSession, touch_session, broadcast,
    Session, sessions, start_cleanup_thread,
)
from jobboard.store import JobStore
from jobboard.csrf import verify_csrf

settings = load_settings()
setup_logging(settings.log_level)
logger = logging.getLogger("jobboard.app")


def _on_store_change():
    broadcast("update")

def _on_store_notify(notification: Notification):
    broadcast("notify", notification)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.seed_delay:
        await asyncio.sleep(settings.seed_delay)
    store = JobStore(load_jobs(settings.data_file))
    store.bus.on("change", _on_store_change)
    store.bus.on("notify", _on_store_notify)
    app.state.store = store
    stop_cleanup = start_cleanup_thread(
        ttl=settings.session_ttl,
        interval=settings.cleanup_interval,
    )

    yield

    # Shutdown
    stop_cleanup.set()
    store.bus.off("change", _on_store_change)
    store.bus.off("notify", _on_store_notify)
    logger.info("Application shutting down")


app = FastAPI(lifespan=lifespan, dependencies=[Depends(verify_csrf)])

app.mount("/static", StaticFiles(directory="static"), name="static")

templates = Environment(
    loader=FileSystemLoader("templates"),
    autoescape=select_autoescape(["html", "xml"])
)


def get_store(request: Request) -> JobStore:
    return request.app.state.store


@app.exception_handler(ValidationError)
async def validation_error(request: Request, exc: ValidationError):
    return JSONResponse(
        {"detail": exc.errors(include_url=False, include_context=False, include_input=False)},
        status_code=422,
    )


def dump(job: Job) -> dict:
    return job.model_dump(mode="json", by_alias=True)

def ensure_session(request: Request) -> str:
    session_id = request.cookies.get("session_id")
    if not session_id or session_id not in sessions:
        session_id = createSession()
    else:
        touch_session(session_id=session_id)
    return session_id

def render(request: Request, name: str, session_id: str, **context) -> HTMLResponse:
    session = getSession(session_id=session_id)
    template = templates.get_template(name)
    html = template.render(
        request=request,
        csrfToken=session.csrfToken,
        job_types=JOB_TYPES,
        **context
    )
    response = HTMLResponse(content=html)
    response.set_cookie(
        key="session_id",
        value=session_id,
        httponly=True,
        samesite="strict",
        max_age=settings.session_ttl
    )
    return response

async def read_payload(request: Request):
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        data = await request.json()
        if not isinstance(data, dict):
            raise HTTPException(status_code=422, detail="JSON body must be an object")
        return "json", data
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        return "form", await request.form()
    raise HTTPException(status_code=415, detail="Unsupported Content-Type")


@app.get("/", response_class=HTMLResponse)
async def home(request: Request, store: JobStore = Depends(get_store)):
    session_id = ensure_session(request)
    session = getSession(session_id=session_id)
    return render(
        request, "index.html", session_id,
        jobs=compute_view(store.list_all(), session.filter),
        filter=session.filter,
        loading=store.loading,
    )

@app.post("/search")
async def search(request: Request, store: JobStore = Depends(get_store)):
    session_id = request.cookies.get("session_id")
    kind, data = await read_payload(request)
    job_filter = filter_from_input(data)
    updateFilter(session_id=session_id, filter=job_filter)
    if kind == "json":
        return Response(status_code=204)
    return render(
        request, "index.html", session_id,
        jobs=compute_view(store.list_all(), job_filter),
        filter=job_filter,
        loading=store.loading,
    )


def open_stream(session: Session, store: JobStore):
    """Subscribe one SSE connection to ``session``'s bus.

    Each connection gets its own queue. Returns the queue and a callback
    that removes this connection's handlers.
    """
    queue: asyncio.Queue[str] = asyncio.Queue()

    def push_results():
        subset = compute_view(store.list_all(), session.filter)
        template = templates.get_template("results.html")
        payload = {
            "html": template.render(jobs=subset),
            "count": len(subset)
        }
        queue.put_nowait(f"event: results\ndata: {json.dumps(payload)}\n\n")

    def push_notify(notification: Notification):
        queue.put_nowait(f"event: notify\ndata: {notification.model_dump_json()}\n\n")

    def close():
        session.bus.off("update", push_results)
        session.bus.off("notify", push_notify)

    session.bus.on("update", push_results)
    session.bus.on("notify", push_notify)
    return queue, close


@app.get("/events")
async def events(request: Request, store: JobStore = Depends(get_store)):
    session_id = request.cookies.get("session_id")
    if not session_id:
        raise HTTPException(status_code=400, detail="Missing session ID")
    touch_session(session_id=session_id)
    session = getSession(session_id=session_id)
    queue, close = open_stream(session, store)

    async def keep_alive():
        while True:
            await asyncio.sleep(settings.sse_ping_interval)
            if await request.is_disconnected():
                return
            queue.put_nowait("event: ping\ndata: ping\n\n")

    async def event_stream():
        yield "retry: 10000\nevent: ping\ndata: connected\n\n"

        try:
            while True:
                message = await queue.get()
                yield message
                if await request.is_disconnected():
                    break

        finally:
            close()
            ping_task.cancel()
            with suppress(asyncio.CancelledError):
                await ping_task

    ping_task = asyncio.create_task(keep_alive())

    return StreamingResponse(event_stream(), media_type="text/event-stream")


@app.get("/jobs/{job_id}", response_class=HTMLResponse)
async def job_detail(request: Request, job_id: str, store: JobStore = Depends(get_store)):
    job = store.get_job(job_id)
    if job is None:
        return RedirectResponse("/", status_code=303)
    return render(request, "job.html", ensure_session(request), job=job, message=None)

@app.post("/jobs/{job_id}/apply")
async def apply(request: Request, job_id: str, store: JobStore = Depends(get_store)):
    job = store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    kind, data = await read_payload(request)
    application = Application.model_validate(dict(data))
    logger.info("Application for job %s received from %s", job.id, application.email)
    notification = Notification(
        title="Application submitted successfully!",
        description=f"Your application for {job.title} at {job.company} has been received.",
    )
    session_id = request.cookies.get("session_id")
    getSession(session_id=session_id).bus.emit("notify", notification)
    if kind == "json":
        return JSONResponse(notification.model_dump(), status_code=202)
    return render(request, "job.html", session_id, job=job, message=notification)


@app.get("/admin", response_class=HTMLResponse)
async def admin(request: Request, store: JobStore = Depends(get_store)):
    return render(
        request, "admin.html", ensure_session(request),
        jobs=store.list_all(),
        stats=store.stats(),
    )

@app.get("/admin/jobs/new", response_class=HTMLResponse)
async def new_job(request: Request):
    return render(request, "job_form.html", ensure_session(request), job=None, editing=False)

@app.get("/admin/jobs/{job_id}/edit", response_class=HTMLResponse)
async def edit_job(request: Request, job_id: str, store: JobStore = Depends(get_store)):
    job = store.get_job(job_id)
    if job is None:
        return RedirectResponse("/admin", status_code=303)
    return render(request, "job_form.html", ensure_session(request), job=job, editing=True)

async def read_draft(request: Request):
    kind, data = await read_payload(request)
    if kind == "json":
        return kind, JobDraft.model_validate(data)
    return kind, draft_from_form(data)

@app.post("/admin/jobs")
async def create_job(request: Request, store: JobStore = Depends(get_store)):
    kind, draft = await read_draft(request)
    job = store.add_job(draft.to_job())
    if kind == "json":
        return JSONResponse(dump(job), status_code=201)
    return RedirectResponse("/admin", status_code=303)

@app.post("/admin/jobs/{job_id}")
async def save_job(request: Request, job_id: str, store: JobStore = Depends(get_store)):
    kind, draft = await read_draft(request)
    store.update_job(draft.to_job(id=job_id))
    if kind == "json":
        return Response(status_code=204)
    return RedirectResponse("/admin", status_code=303)

@app.post("/admin/jobs/{job_id}/delete")
async def remove_job(request: Request, job_id: str, store: JobStore = Depends(get_store)):
    store.delete_job(job_id)
    if request.headers.get("content-type", "").startswith("application/json"):
        return Response(status_code=204)
    return RedirectResponse("/admin", status_code=303)

@app.post("/admin/generate")
async def generate(request: Request):
    kind, data = await read_payload(request)
    prompt = data.get("prompt") or ""
    if not isinstance(prompt, str) or not prompt.strip():
        raise HTTPException(status_code=422, detail="Empty prompt: please enter a job description to generate")
    draft: Optional[Job] = None
    if kind == "json" and data.get("draft"):
        draft = Job.model_validate(data["draft"])
    if settings.generate_delay:
        await asyncio.sleep(settings.generate_delay)
    job = merge_generated(draft, extract_from_text(prompt))
    logger.info("Generated job draft %r from a %d character prompt", job.title, len(prompt))
    if kind == "json":
        return JSONResponse(dump(job))
    return render(request, "job_form.html", ensure_session(request), job=job, editing=False, generated=True)


@app.get("/api/jobs")
async def api_jobs(store: JobStore = Depends(get_store)):
    return [dump(j) for j in store.list_all()]

@app.get("/api/jobs/filtered")
async def api_filtered(store: JobStore = Depends(get_store)):
    return [dump(j) for j in store.list_filtered()]

@app.get("/api/jobs/{job_id}")
async def api_job(job_id: str, store: JobStore = Depends(get_store)):
    job = store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return dump(job)

@app.get("/api/stats")
async def api_stats(store: JobStore = Depends(get_store)):
    return store.stats().model_dump()

@app.post("/api/filter")
async def api_filter(request: Request, store: JobStore = Depends(get_store)):
    _, data = await read_payload(request)
    store.set_filter(filter_from_input(data))
    return Response(status_code=204)
