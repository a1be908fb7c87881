import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional, Union

import psutil
from fastapi import Depends, FastAPI, Header, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from supabase import Client

from catholic_schedule import config
from catholic_schedule.__version__ import __version__
from catholic_schedule.core.admin_forms import AdminConsole, AdminForm, ConfessionTimeForm, MassTimeForm
from catholic_schedule.core.db import create_session_client, get_supabase_client
from catholic_schedule.core.errors import CatholicScheduleError, NotAuthenticatedError
from catholic_schedule.core.geocoding import zip_to_lat_lng
from catholic_schedule.core.logger import get_logger
from catholic_schedule.core.schedule import ScheduleKind
from catholic_schedule.core.schedule_fetcher import load_schedule_async
from catholic_schedule.core.search import SearchView
from catholic_schedule.core.session import AuthSession

logger = get_logger(__name__)

START_TIME = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown"""
    config.validate_config()
    logger.info(f"⛪ Catholic Schedule API v{__version__} started")
    yield
    logger.info("🛑 Shutting down Catholic Schedule API")


app = FastAPI(title="Catholic Schedule API", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── DEPENDENCIES ──────────────────────────────────────────────


def get_supabase() -> Client:
    return get_supabase_client()


def get_sign_in_client() -> Client:
    return create_session_client()


def get_admin_session(
    authorization: Optional[str] = Header(default=None),
    supabase: Client = Depends(get_supabase),
) -> AuthSession:
    """Rebuild the signed-in session from the request's bearer token."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise NotAuthenticatedError()

    session = AuthSession(supabase)
    if not session.restore(token.strip()):
        raise NotAuthenticatedError(session.message or "Session expired. Please sign in again.")
    return session


# ─── REQUEST BODIES ────────────────────────────────────────────


class SignInRequest(BaseModel):
    email: str
    password: str


class ChurchCreate(BaseModel):
    name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    lat: Union[float, str] = ""
    lng: Union[float, str] = ""


class MassTimeCreate(BaseModel):
    church_id: str = ""
    day_of_week: int = 0
    time: str = "09:00"
    notes: Optional[str] = None


class ConfessionTimeCreate(BaseModel):
    church_id: str = ""
    day_of_week: int = 6
    start_time: str = "15:00"
    end_time: str = "16:00"
    notes: Optional[str] = None


# ─── ERROR HANDLERS ────────────────────────────────────────────


@app.exception_handler(CatholicScheduleError)
async def catholic_schedule_error_handler(request: Request, exc: CatholicScheduleError):
    logger.warning(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "INVALID_INPUT",
                "message": "Invalid request data",
                "category": "invalid_input",
                "details": [
                    {"field": ".".join(str(loc) for loc in e["loc"]), "message": e["msg"]} for e in exc.errors()
                ],
            }
        },
    )


# ─── PUBLIC ENDPOINTS ──────────────────────────────────────────


@app.get("/api")
def read_root():
    return {"message": "Catholic Schedule API", "version": __version__}


@app.get("/api/health")
def get_health():
    """Liveness plus current process health."""
    try:
        memory = psutil.virtual_memory()
        cpu_percent = psutil.cpu_percent(interval=None)
    except (OSError, psutil.Error) as e:
        return {"status": "error", "error": str(e), "timestamp": datetime.now(timezone.utc).isoformat()}

    health_status = "healthy"
    if cpu_percent > 80 or memory.percent > 85:
        health_status = "warning"

    return {
        "status": health_status,
        "version": __version__,
        "cpu_usage": round(cpu_percent, 1),
        "memory_usage": round(memory.percent, 1),
        "uptime": round(time.time() - START_TIME),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/geocode/{zip_code}")
def geocode(zip_code: str):
    coordinates = zip_to_lat_lng(zip_code)
    return {"zip": zip_code.strip(), "lat": coordinates.lat, "lng": coordinates.lng}


@app.get("/api/search")
async def search(
    zip_code: str = Query(..., alias="zip", description="5-digit U.S. ZIP code"),
    radius: int = Query(config.DEFAULT_RADIUS, description="Search radius in miles"),
    kind: ScheduleKind = Query(ScheduleKind.MASS),
    supabase: Client = Depends(get_supabase),
):
    """
    Churches near a ZIP code, nearest first, each with its formatted schedule.

    Failures come back as the search view with its error message set and no
    results, using the status code of the failure.
    """
    view = SearchView(supabase, kind=kind)
    await view.submit_async(zip_code=zip_code, radius=radius)
    if view.failure is not None:
        return JSONResponse(status_code=view.failure.http_status, content=view.to_dict())
    return view.to_dict()


async def _schedule_response(supabase: Client, church_id: str, kind: ScheduleKind):
    view = await load_schedule_async(supabase, church_id, kind)
    if view.error:
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=view.to_dict())
    return view.to_dict()


@app.get("/api/churches/{church_id}/mass-times")
async def get_mass_times(church_id: str, supabase: Client = Depends(get_supabase)):
    return await _schedule_response(supabase, church_id, ScheduleKind.MASS)


@app.get("/api/churches/{church_id}/confession-times")
async def get_confession_times(church_id: str, supabase: Client = Depends(get_supabase)):
    return await _schedule_response(supabase, church_id, ScheduleKind.CONFESSION)


# ─── AUTH ──────────────────────────────────────────────────────


@app.post("/api/auth/sign-in")
def sign_in(body: SignInRequest, supabase: Client = Depends(get_sign_in_client)):
    session = AuthSession(supabase)
    if not session.sign_in(body.email, body.password):
        raise NotAuthenticatedError(session.message)
    return {"email": session.email, "access_token": session.access_token, "token_type": "bearer"}


@app.post("/api/auth/sign-out")
def sign_out(session: AuthSession = Depends(get_admin_session)):
    session.sign_out()
    return {"status": "signed_out"}


# ─── ADMIN ─────────────────────────────────────────────────────


def _submit(form: AdminForm):
    if not form.submit():
        content = form.error.to_response()
        content["error"]["message"] = form.message
        return JSONResponse(status_code=form.error.http_status, content=content)
    return {"message": form.message}


@app.get("/api/admin/churches")
def list_churches(session: AuthSession = Depends(get_admin_session)):
    console = AdminConsole(session)
    if not console.directory.refresh():
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": {"code": "REMOTE_FAILURE", "message": console.directory.message, "category": "remote_failure"}},
        )
    return {"email": session.email, "churches": [{"id": cid, "name": name} for cid, name in console.directory.options]}


@app.post("/api/admin/churches", status_code=status.HTTP_201_CREATED)
def add_church(body: ChurchCreate, session: AuthSession = Depends(get_admin_session)):
    console = AdminConsole(session)
    form = console.church_form
    for key, value in body.model_dump().items():
        setattr(form, key, "" if value is None else str(value))
    result = _submit(form)
    if isinstance(result, JSONResponse):
        return result
    result["churches"] = [{"id": cid, "name": name} for cid, name in console.directory.options]
    return result


@app.post("/api/admin/mass-times", status_code=status.HTTP_201_CREATED)
def add_mass_time(body: MassTimeCreate, session: AuthSession = Depends(get_admin_session)):
    return _submit(MassTimeForm(session, **body.model_dump(exclude_none=True)))


@app.post("/api/admin/confession-times", status_code=status.HTTP_201_CREATED)
def add_confession_time(body: ConfessionTimeCreate, session: AuthSession = Depends(get_admin_session)):
    return _submit(ConfessionTimeForm(session, **body.model_dump(exclude_none=True)))
