"""
Facility Reports API

FastAPI application with:
- Session resolution from verified identity-provider ID tokens
- Report filing, listing and lifecycle actions
- Role management for admins
"""

import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .. import __version__
from ..config import Settings, settings as default_settings
from ..models import AuthSession, NewReport, Report, Role, User
from ..services import (
    IdentityResolver,
    ReportLifecycleService,
    ReportQueryService,
    ReportStatsService,
    RoleRegistry,
    UserAdminService,
)
from ..store import DocumentStore, InMemoryDocumentStore, ReportStore, UserStore
from .auth import verify_id_token
from .errors import register_exception_handlers

logger = logging.getLogger(__name__)


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SetStatusRequest(CamelModel):
    status: str


class AssignRequest(CamelModel):
    technician_id: str
    technician_name: str = ""


class ChangeRoleRequest(CamelModel):
    role: str


class SessionResponse(CamelModel):
    user: User
    role: Role


class StatsResponse(CamelModel):
    total: int
    pending: int
    in_progress: int
    completed: int


# =============================================================================
# DEPENDENCIES
# =============================================================================

bearer_scheme = HTTPBearer(auto_error=False)


async def get_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthSession:
    """
    Resolve the caller's session.

    Sign-in happens at the identity provider; it hands the client a signed
    ID token, sent here as "Authorization: Bearer <token>". The principal
    is built from the verified claims only.
    """
    principal = None
    if credentials is not None:
        principal = verify_id_token(request.app.state.settings, credentials.credentials)

    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return await request.app.state.identity.resolve_session(principal)


def get_lifecycle(request: Request) -> ReportLifecycleService:
    return request.app.state.lifecycle


def get_queries(request: Request) -> ReportQueryService:
    return request.app.state.queries


def get_stats(request: Request) -> ReportStatsService:
    return request.app.state.stats


def get_user_admin(request: Request) -> UserAdminService:
    return request.app.state.user_admin


# =============================================================================
# APP SETUP
# =============================================================================

def create_app(
    settings: Optional[Settings] = None,
    documents: Optional[DocumentStore] = None
) -> FastAPI:
    """Build the app and wire the services over one document store."""
    settings = settings or default_settings
    documents = documents or InMemoryDocumentStore()

    logging.getLogger("facility_reports").setLevel(settings.log_level.upper())

    app = FastAPI(
        title=settings.app_name,
        description="Maintenance reports with role-based triage",
        version=__version__,
    )

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    report_repo = ReportStore(documents)
    user_repo = UserStore(documents)

    app.state.settings = settings
    app.state.identity = IdentityResolver(user_repo, RoleRegistry.from_settings(settings))
    app.state.lifecycle = ReportLifecycleService(report_repo, user_repo)
    app.state.queries = ReportQueryService(report_repo)
    app.state.stats = ReportStatsService(report_repo)
    app.state.user_admin = UserAdminService(user_repo)

    _register_routes(app)

    logger.info("%s ready (%s)", settings.app_name, settings.environment)
    return app


def _register_routes(app: FastAPI) -> None:

    # =========================================================================
    # HEALTH CHECK
    # =========================================================================

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": "facility-reports",
            "version": __version__,
        }

    # =========================================================================
    # SESSION
    # =========================================================================

    @app.post("/session", response_model=SessionResponse)
    async def start_session(session: AuthSession = Depends(get_session)):
        """
        Resolve (user, role) for the signed-in principal.

        First sign-in creates the user record with a role from the email
        registry; later sign-ins keep the persisted role.
        """
        return SessionResponse(user=session.user, role=session.role)

    # =========================================================================
    # REPORT ENDPOINTS
    # =========================================================================

    @app.post("/reports", response_model=Report, status_code=status.HTTP_201_CREATED)
    async def create_report(
        data: NewReport,
        session: AuthSession = Depends(get_session),
        lifecycle: ReportLifecycleService = Depends(get_lifecycle),
    ):
        return await lifecycle.create_report(session, data)

    @app.get("/reports", response_model=List[Report])
    async def list_reports(
        status_filter: Optional[str] = Query(None, alias="status"),
        search: Optional[str] = None,
        session: AuthSession = Depends(get_session),
        queries: ReportQueryService = Depends(get_queries),
    ):
        """
        Admin/technician listing. Hidden reports are excluded.

        Optional status filter and case-insensitive search over reporter
        name, location and problem type.
        """
        return await queries.list_visible(session, status=status_filter, search=search)

    @app.get("/reports/mine", response_model=List[Report])
    async def list_my_reports(
        session: AuthSession = Depends(get_session),
        queries: ReportQueryService = Depends(get_queries),
    ):
        """Reporter history. Hidden reports are included."""
        return await queries.list_mine(session)

    @app.get("/reports/assigned", response_model=List[Report])
    async def list_assigned_reports(
        technician_id: Optional[str] = Query(None, alias="technicianId"),
        session: AuthSession = Depends(get_session),
        queries: ReportQueryService = Depends(get_queries),
    ):
        return await queries.list_assigned(session, technician_id or session.user_id)

    @app.get("/reports/stats", response_model=StatsResponse)
    async def get_report_stats(
        session: AuthSession = Depends(get_session),
        stats: ReportStatsService = Depends(get_stats),
    ):
        return await stats.report_stats(session)

    @app.get("/reports/{report_id}", response_model=Report)
    async def get_report(
        report_id: str,
        session: AuthSession = Depends(get_session),
        queries: ReportQueryService = Depends(get_queries),
    ):
        return await queries.get_report(session, report_id)

    @app.patch("/reports/{report_id}/status", response_model=Report)
    async def set_report_status(
        report_id: str,
        request: SetStatusRequest,
        session: AuthSession = Depends(get_session),
        lifecycle: ReportLifecycleService = Depends(get_lifecycle),
    ):
        return await lifecycle.set_status(session, report_id, request.status)

    @app.post("/reports/{report_id}/assign", response_model=Report)
    async def assign_report(
        report_id: str,
        request: AssignRequest,
        session: AuthSession = Depends(get_session),
        lifecycle: ReportLifecycleService = Depends(get_lifecycle),
    ):
        return await lifecycle.assign(
            session, report_id, request.technician_id, request.technician_name
        )

    @app.delete("/reports/{report_id}", response_model=Report)
    async def hide_report(
        report_id: str,
        session: AuthSession = Depends(get_session),
        lifecycle: ReportLifecycleService = Depends(get_lifecycle),
    ):
        """Soft delete: hidden from admins, kept in the reporter's history."""
        return await lifecycle.hide(session, report_id)

    # =========================================================================
    # USER ENDPOINTS
    # =========================================================================

    @app.get("/users", response_model=List[User])
    async def list_users(
        role: Optional[str] = None,
        search: Optional[str] = None,
        session: AuthSession = Depends(get_session),
        user_admin: UserAdminService = Depends(get_user_admin),
    ):
        return await user_admin.list_users(session, role=role, search=search)

    @app.get("/users/technicians", response_model=List[User])
    async def list_technicians(
        session: AuthSession = Depends(get_session),
        user_admin: UserAdminService = Depends(get_user_admin),
    ):
        return await user_admin.list_technicians(session)

    @app.patch("/users/{user_id}/role", response_model=User)
    async def change_user_role(
        user_id: str,
        request: ChangeRoleRequest,
        session: AuthSession = Depends(get_session),
        user_admin: UserAdminService = Depends(get_user_admin),
    ):
        return await user_admin.change_role(session, user_id, request.role)


app = create_app()


# =============================================================================
# RUN
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
