"""
Rescue365 - REST API

FastAPI application for submitting rescue reports, listing the reports
visible to a role, moving reports through their lifecycle, and the
sign-in, geocoding and map helpers the mobile app relies on.

Run with: uvicorn rescue365.api.main:app --reload
"""

from datetime import datetime
from typing import Optional, List

from fastapi import FastAPI, HTTPException, Query, Depends, Header
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from rescue365 import __version__
from rescue365.core.config import settings
from rescue365.core.exceptions import (
    AuthError,
    ConfigurationError,
    StoreError,
    TransitionError,
    ValidationError,
)
from rescue365.core.geo_utils import Coordinate
from rescue365.core.logging import setup_logging
from rescue365.alerts import messages
from rescue365.alerts.notifier import get_notifier
from rescue365.reports.lifecycle import LifecycleController, get_transition_policy
from rescue365.reports.models import RescueReport, Role
from rescue365.reports.navigation import build_map_url
from rescue365.reports.router import ReportView, visible_reports
from rescue365.reports.store import get_report_store
from rescue365.reports.submission import ReportDraft, submit_report
from rescue365.services.auth import extract_tokens_from_url, get_auth_client
from rescue365.services.geocoding import get_geocoder, format_address
from rescue365.visualization.map_generator import create_report_map

logger = setup_logging()

# FastAPI app
app = FastAPI(
    title="Rescue365",
    description="Community animal rescue coordination: bystanders report, rescuers respond, vets treat",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Pydantic Models
# ============================================================================

class ReportCreateRequest(BaseModel):
    """Request to create a rescue report. Completeness is checked on submit."""
    animal_type: Optional[str] = None
    description: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    address: Optional[str] = None
    image_url: Optional[str] = None


class ReportResponse(BaseModel):
    """Rescue report."""
    id: str
    animal_type: str
    description: str
    location_lat: float
    location_lng: float
    address: Optional[str]
    image_url: str
    status: str
    created_at: Optional[str] = None


class ReportCreatedResponse(BaseModel):
    """Created report id."""
    id: str
    status: str
    message: str


class ReportListResponse(BaseModel):
    """Reports visible to a role."""
    count: int
    role: str
    radius_meters: Optional[float]
    reports: List[ReportResponse]


class StatusUpdateRequest(BaseModel):
    """Request to change a report's status."""
    status: str = Field(..., min_length=1)


class StatusUpdateResponse(BaseModel):
    """Result of a status change."""
    report_id: str
    status: str
    bystander_notified: bool
    message: str


class NavigationResponse(BaseModel):
    """Map application URL."""
    platform: str
    url: str


class AddressResponse(BaseModel):
    """Reverse geocoded address."""
    latitude: float
    longitude: float
    address: str
    name: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None


class SignInResponse(BaseModel):
    """OAuth authorization URL."""
    url: str


class SessionRequest(BaseModel):
    """OAuth redirect URL carrying the session tokens."""
    callback_url: str


class SessionResponse(BaseModel):
    """Signed-in user."""
    user_id: str
    email: Optional[str]
    access_token: str
    refresh_token: str


class HealthResponse(BaseModel):
    """API health check response."""
    status: str
    version: str
    timestamp: str
    store: str


# ============================================================================
# Dependencies
# ============================================================================

_store = None


def get_store(authorization: Optional[str] = Header(None)):
    """Report store, acting for the signed-in user when a token is sent."""
    global _store
    if _store is None:
        _store = get_report_store()

    token = _bearer_token(authorization)
    with_token = getattr(_store, "with_token", None)
    if token and with_token is not None:
        return with_token(token)
    return _store


def get_notifier_dep():
    return get_notifier()


def get_auth():
    try:
        return get_auth_client()
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))


def get_optional_auth():
    """Auth client, or None when sign-in is not configured."""
    try:
        return get_auth_client()
    except ConfigurationError:
        return None


def get_current_user_id(
    authorization: Optional[str] = Header(None),
    auth=Depends(get_optional_auth),
) -> Optional[str]:
    """Id of the user behind the bearer token; None for anonymous requests."""
    token = _bearer_token(authorization)
    if token is None or auth is None:
        return None
    try:
        return auth.get_user(token).id
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))


def get_geocoder_dep():
    return get_geocoder()


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


def _to_response(report: RescueReport) -> ReportResponse:
    return ReportResponse(
        id=report.id,
        animal_type=report.animal_type,
        description=report.description,
        location_lat=report.location.latitude,
        location_lng=report.location.longitude,
        address=report.address,
        image_url=report.image_url,
        status=report.status,
        created_at=report.created_at.isoformat() if report.created_at else None,
    )


def _location(latitude: Optional[float], longitude: Optional[float]) -> Optional[Coordinate]:
    if latitude is None or longitude is None:
        return None
    return Coordinate(latitude=latitude, longitude=longitude)


# ============================================================================
# System Routes
# ============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check API health status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.utcnow().isoformat(),
        store="supabase" if settings.supabase_configured else "sql",
    )


# ============================================================================
# Report Routes
# ============================================================================

@app.post("/api/v1/reports", response_model=ReportCreatedResponse, status_code=201, tags=["Reports"])
def create_report(
    request: ReportCreateRequest,
    store=Depends(get_store),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """
    Submit a rescue report.

    Animal type, description, location and photo are all required;
    nothing is stored if any of them is missing. A signed-in reporter
    is recorded so they can be told when the rescue is complete.
    """
    draft = ReportDraft(
        animal_type=request.animal_type or "",
        description=request.description or "",
        location=_location(request.latitude, request.longitude),
        address=request.address,
        image_url=request.image_url,
        reported_by=user_id,
    )

    try:
        report_id = submit_report(store, draft)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "title": "Missing Information",
                "message": messages.MISSING_INFORMATION,
                "missing_fields": e.missing_fields,
            },
        )
    except StoreError as e:
        logger.error(f"Error submitting rescue report: {e}")
        raise HTTPException(status_code=502, detail=f"{messages.SUBMIT_FAILED} {e}")

    return ReportCreatedResponse(
        id=report_id,
        status="Pending",
        message=messages.SUBMIT_SUCCEEDED,
    )


@app.get("/api/v1/reports", response_model=ReportListResponse, tags=["Reports"])
def list_reports(
    role: Role = Query(..., description="Role of the viewer: rescuer or vet"),
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
    store=Depends(get_store),
):
    """
    List the reports visible to a role.

    Rescuers see unfinished reports within range of their position (and
    nothing without one); vets see rescues in progress.
    """
    try:
        all_reports = store.list_all()
    except StoreError as e:
        logger.error(f"Error fetching rescue reports: {e}")
        raise HTTPException(status_code=502, detail=f"{messages.FETCH_FAILED} {e}")

    radius = settings.rescue_radius_meters
    reports = visible_reports(all_reports, role, _location(latitude, longitude), radius)

    return ReportListResponse(
        count=len(reports),
        role=role.value,
        radius_meters=radius if role == Role.RESCUER else None,
        reports=[_to_response(r) for r in reports],
    )


@app.put("/api/v1/reports/{report_id}/status", response_model=StatusUpdateResponse, tags=["Reports"])
def update_report_status(
    report_id: str,
    request: StatusUpdateRequest,
    store=Depends(get_store),
    notifier=Depends(get_notifier_dep),
):
    """
    Set the status of a rescue report.

    The current reports are read first so the transition policy sees the
    report's present status and the completion notice reaches its reporter.
    """
    try:
        policy = get_transition_policy(settings.transition_policy)
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    try:
        all_reports = store.list_all()
    except StoreError as e:
        logger.error(f"Error fetching rescue reports: {e}")
        raise HTTPException(status_code=502, detail=f"{messages.UPDATE_FAILED} {e}")

    view = ReportView()
    view.load(view.begin_fetch(), all_reports)

    controller = LifecycleController(store, notifier=notifier, policy=policy)

    try:
        result = controller.transition(report_id, request.status, view=view)
    except TransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StoreError as e:
        logger.error(f"Error updating rescue status: {e}")
        status_code = 404 if e.status_code == 404 else 502
        raise HTTPException(status_code=status_code, detail=f"{messages.UPDATE_FAILED} {e}")

    return StatusUpdateResponse(
        report_id=result.report_id,
        status=result.status,
        bystander_notified=result.bystander_notified,
        message=messages.status_updated_message(result.status),
    )


@app.get("/api/v1/map/reports", response_class=HTMLResponse, tags=["Map"])
def get_reports_map(
    role: Role = Query(Role.RESCUER),
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
    store=Depends(get_store),
):
    """Map of the reports visible to a role."""
    try:
        all_reports = store.list_all()
    except StoreError as e:
        raise HTTPException(status_code=502, detail=f"{messages.FETCH_FAILED} {e}")

    center = _location(latitude, longitude)
    radius = settings.rescue_radius_meters
    reports = visible_reports(all_reports, role, center, radius)

    report_map = create_report_map(
        reports,
        center=center,
        radius_meters=radius if role == Role.RESCUER else None,
    )
    return report_map._repr_html_()


# ============================================================================
# Location Routes
# ============================================================================

@app.get("/api/v1/navigation", response_model=NavigationResponse, tags=["Location"])
async def get_navigation_url(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    platform: str = Query("android", pattern="^(ios|android|web)$"),
):
    """URL that opens the device map application at a report."""
    return NavigationResponse(
        platform=platform,
        url=build_map_url(latitude, longitude, platform),
    )


@app.get("/api/v1/geocode/reverse", response_model=AddressResponse, tags=["Location"])
def reverse_geocode(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    geocoder=Depends(get_geocoder_dep),
):
    """Best-effort address of a position; empty when unknown."""
    parts = geocoder.reverse(Coordinate(latitude=latitude, longitude=longitude))
    return AddressResponse(
        latitude=latitude,
        longitude=longitude,
        address=format_address(parts),
        name=parts.name if parts else None,
        city=parts.city if parts else None,
        region=parts.region if parts else None,
    )


# ============================================================================
# Auth Routes
# ============================================================================

@app.get("/auth/google", response_model=SignInResponse, tags=["Auth"])
def google_sign_in(
    redirect_to: Optional[str] = Query(None),
    auth=Depends(get_auth),
):
    """Authorization URL for Google sign-in."""
    url = auth.authorize_url(
        settings.oauth_provider,
        redirect_to or settings.oauth_redirect_url,
    )
    return SignInResponse(url=url)


@app.post("/auth/session", response_model=SessionResponse, tags=["Auth"])
def create_session(request: SessionRequest, auth=Depends(get_auth)):
    """Start a session from the OAuth redirect URL."""
    tokens = extract_tokens_from_url(request.callback_url)
    if tokens is None:
        raise HTTPException(status_code=400, detail="Callback URL carries no session tokens")

    try:
        session = auth.set_session(tokens)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))

    return SessionResponse(
        user_id=session.user.id,
        email=session.user.email,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
    )


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
