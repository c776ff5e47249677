# liftlog/main.py
import logging
import time
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy import text

from liftlog.errors import LiftlogError, SignInRequired
from liftlog.routers.auth import router as auth_router
from liftlog.routers.exercises import router as exercises_router
from liftlog.routers.workouts import router as workouts_router
from liftlog.routers.workout_items import router as workout_items_router
from liftlog.db import SessionLocal  # for healthz DB check
from liftlog.settings import get_settings

settings = get_settings()

log = logging.getLogger("uvicorn")
logging.getLogger("liftlog").setLevel(settings.LOG_LEVEL.upper())

SECURITY_HEADERS = {
    "X-Frame-Options": "SAMEORIGIN",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}

app = FastAPI(
    title="liftlog",
    openapi_tags=[
        {"name": "auth", "description": "Sign-in, sign-out and session"},
        {"name": "workouts", "description": "Workout sessions: pages and actions"},
        {"name": "workout items", "description": "Exercises and sets inside a workout"},
        {"name": "exercises", "description": "Exercise definitions"},
    ],
)


# CORS (relax for local dev; tighten origins in prod via env)
ALLOW_ORIGINS = settings.ALLOW_ORIGINS.split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response

@app.exception_handler(SignInRequired)
async def redirect_to_sign_in(request: Request, exc: SignInRequired):
    return RedirectResponse(url=exc.location, status_code=303)

@app.exception_handler(LiftlogError)
async def liftlog_error(request: Request, exc: LiftlogError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
def healthz():
    # Quick DB sanity check
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": settings.API_VERSION}

# Routers
app.include_router(auth_router)
app.include_router(exercises_router)
app.include_router(workouts_router)
app.include_router(workout_items_router)
