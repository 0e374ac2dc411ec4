from __future__ import annotations

import asyncio
import logging
import secrets
import time
import uuid
from datetime import date, datetime
from typing import Any
from uuid import UUID

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.security import OAuth2PasswordBearer
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session, joinedload, selectinload
from starlette.middleware.base import BaseHTTPMiddleware

from confirmaai.core.config import settings
from confirmaai.db.session import get_db
from confirmaai.logging_utils import (
    _request_id_ctx_var,
    _tenant_id_ctx_var,
    configure_logging,
    get_current_tenant,
    set_tenant_context,
)
from confirmaai.models import (
    INACTIVE_STATUSES,
    Appointment,
    AppointmentStatus,
    ClinicSettings,
    MessageLog,
    MessageStatus,
    Patient,
    User,
)
from confirmaai.models.base import utcnow
from confirmaai.schemas import (
    AppointmentCreate,
    AppointmentUpdate,
    LoginIn,
    PatientCreate,
    PatientUpdate,
    RegisterIn,
    SettingsUpdate,
    TokenOut,
    serialize_appointment,
    serialize_patient,
    serialize_settings,
    serialize_user,
)
from confirmaai.services.dashboard import dashboard_for_user
from confirmaai.services.security import (
    create_access_token,
    get_subject,
    hash_password,
    verify_password,
)
from confirmaai.services.timezones import local_day_bounds, tenant_timezone, to_storage
from confirmaai.services.webhook_parser import (
    advances_delivery,
    event_name,
    extract_inbound_replies,
    extract_status_updates,
    parse_response,
)

configure_logging()

app = FastAPI(title=settings.app_name, version="0.1.0")

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

REQUEST_COUNTER = Counter(
    "confirmaai_api_requests_total",
    "Total number of processed HTTP requests.",
    ["method", "path", "status", "tenant"],
)
REQUEST_LATENCY = Histogram(
    "confirmaai_api_request_duration_seconds",
    "HTTP request latency in seconds.",
    ["method", "path"],
)
WEBHOOK_REPLIES = Counter(
    "confirmaai_webhook_replies_total",
    "Patient replies applied to appointments.",
    ["outcome"],
)


class SimpleRateLimiter:
    """In-memory fixed-window rate limiter keyed by IP and tenant."""

    def __init__(self, limit: int, window_seconds: int) -> None:
        self.limit = max(1, limit)
        self.window_seconds = max(1, window_seconds)
        self._entries: dict[str, tuple[int, float]] = {}
        self._lock = asyncio.Lock()

    async def allow(self, key: str) -> bool:
        now = time.monotonic()
        async with self._lock:
            count, window_start = self._entries.get(key, (0, now))
            if now - window_start >= self.window_seconds:
                self._entries[key] = (1, now)
                return True
            if count >= self.limit:
                return False
            self._entries[key] = (count + 1, window_start)
            return True


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Populate request and tenant context for logging."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        tenant_hint = request.headers.get("X-Tenant-ID")

        request.state.request_id = request_id
        request_id_token = _request_id_ctx_var.set(request_id)
        tenant_token = _tenant_id_ctx_var.set(tenant_hint)

        try:
            response = await call_next(request)
        finally:
            _request_id_ctx_var.reset(request_id_token)
            _tenant_id_ctx_var.reset(tenant_token)

        response.headers["X-Request-ID"] = request_id
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply a coarse rate limit per IP and tenant."""

    def __init__(self, app: FastAPI, limiter: SimpleRateLimiter) -> None:  # type: ignore[override]
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        if request.method == "OPTIONS":
            return await call_next(request)

        client_host = request.client.host if request.client else "unknown"
        tenant_value = request.headers.get("X-Tenant-ID") or "anonymous"
        rate_key = f"{client_host}:{tenant_value}"

        if not await self.limiter.allow(rate_key):
            logger.warning(
                "rate limit exceeded",
                extra={"client_ip": client_host, "tenant": tenant_value},
            )
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": "Muitas requisições. Tente novamente em instantes."},
            )

        return await call_next(request)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Emit structured access logs and feed metrics."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        start_time = time.perf_counter()
        route = request.scope.get("route")
        path = getattr(route, "path", None) or request.url.path
        method = request.method

        try:
            response = await call_next(request)
        except Exception:
            elapsed = time.perf_counter() - start_time
            REQUEST_COUNTER.labels(
                method=method, path=path, status="500", tenant=get_current_tenant()
            ).inc()
            REQUEST_LATENCY.labels(method=method, path=path).observe(elapsed)
            logger.exception(
                "request failed",
                extra={
                    "method": method,
                    "path": path,
                    "duration_ms": round(elapsed * 1000, 2),
                },
            )
            raise

        elapsed = time.perf_counter() - start_time
        status_code = response.status_code
        route = request.scope.get("route")
        path = getattr(route, "path", None) or path

        REQUEST_COUNTER.labels(
            method=method,
            path=path,
            status=str(status_code),
            tenant=get_current_tenant(),
        ).inc()
        REQUEST_LATENCY.labels(method=method, path=path).observe(elapsed)

        logger.info(
            "request completed",
            extra={
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round(elapsed * 1000, 2),
            },
        )

        return response


rate_limiter = SimpleRateLimiter(
    settings.rate_limit_requests, settings.rate_limit_window_seconds
)


app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RateLimitMiddleware, limiter=rate_limiter)
app.add_middleware(AccessLogMiddleware)


def unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Não autorizado",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the clinic account from the bearer token."""

    if not token:
        raise unauthorized()
    subject = get_subject(token.strip())
    if not subject:
        raise unauthorized()
    try:
        user_id = UUID(subject)
    except ValueError:
        raise unauthorized() from None

    user = db.get(User, user_id)
    if not user:
        raise unauthorized()

    set_tenant_context(user.id)
    return user


def ensure_settings(db: Session, user: User) -> ClinicSettings:
    """Return the clinic settings, creating the defaults when missing."""

    clinic_settings = db.execute(
        select(ClinicSettings).where(ClinicSettings.user_id == user.id)
    ).scalar_one_or_none()
    if clinic_settings:
        return clinic_settings

    clinic_settings = ClinicSettings(user_id=user.id)
    db.add(clinic_settings)
    db.flush()
    logger.info("created default settings", extra={"user_id": str(user.id)})
    return clinic_settings


def get_owned_patient(db: Session, user: User, patient_id: UUID) -> Patient | None:
    return db.execute(
        select(Patient).where(Patient.id == patient_id, Patient.user_id == user.id)
    ).scalar_one_or_none()


def get_owned_appointment(db: Session, user: User, appointment_id: UUID) -> Appointment | None:
    stmt = (
        select(Appointment)
        .where(Appointment.id == appointment_id, Appointment.user_id == user.id)
        .options(
            joinedload(Appointment.patient),
            selectinload(Appointment.message_logs),
        )
    )
    return db.execute(stmt).scalar_one_or_none()


def appointment_count(db: Session, patient_id: UUID) -> int:
    stmt = select(func.count(Appointment.id)).where(Appointment.patient_id == patient_id)
    return int(db.execute(stmt).scalar_one())


def find_conflict(
    db: Session,
    user: User,
    date_time: datetime,
    *,
    exclude_id: UUID | None = None,
) -> Appointment | None:
    """Return an active appointment of the clinic booked at exactly ``date_time``."""

    stmt = select(Appointment).where(
        Appointment.user_id == user.id,
        Appointment.date_time == date_time,
        Appointment.status.not_in(INACTIVE_STATUSES),
    )
    if exclude_id is not None:
        stmt = stmt.where(Appointment.id != exclude_id)
    return db.execute(stmt.limit(1)).scalars().first()


def conflict_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Já existe um agendamento neste horário",
    )


@app.get("/metrics")
def metrics() -> Response:
    """Expose Prometheus metrics."""

    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# Auth


@app.post("/api/auth/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterIn, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Create a clinic account together with its default settings."""

    email = payload.email.lower()
    existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Email já cadastrado"
        )

    user = User(
        name=payload.name,
        email=email,
        password_hash=hash_password(payload.password),
        clinic_name=payload.clinic_name,
        avg_appointment_value=payload.avg_appointment_value,
        timezone=settings.timezone,
    )
    db.add(user)
    db.flush()
    ensure_settings(db, user)
    set_tenant_context(user.id)
    logger.info("user registered", extra={"user_id": str(user.id)})

    return {"data": serialize_user(user), "message": "Usuário criado com sucesso"}


@app.post("/api/auth/login")
def login(payload: LoginIn, db: Session = Depends(get_db)) -> TokenOut:
    user = db.execute(
        select(User).where(User.email == payload.email.lower())
    ).scalar_one_or_none()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email ou senha inválidos",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token(subject=str(user.id), extra={"email": user.email})
    return TokenOut(access_token=token)


@app.get("/api/auth/me")
def me(user: User = Depends(get_current_user)) -> dict[str, Any]:
    return {"data": serialize_user(user)}


# Patients


@app.get("/api/patients")
def list_patients(
    search: str | None = None,
    page: int | None = None,
    limit: int | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """List patients of the clinic, optionally filtered and paginated."""

    counts = (
        select(
            Appointment.patient_id,
            func.count(Appointment.id).label("appointment_count"),
        )
        .group_by(Appointment.patient_id)
        .subquery()
    )
    filters = [Patient.user_id == user.id]
    if search:
        filters.append(
            or_(
                Patient.name.icontains(search, autoescape=True),
                Patient.phone.contains(search, autoescape=True),
                Patient.email.icontains(search, autoescape=True),
            )
        )

    stmt = (
        select(Patient, func.coalesce(counts.c.appointment_count, 0))
        .outerjoin(counts, counts.c.patient_id == Patient.id)
        .where(*filters)
        .order_by(Patient.name)
    )

    if page is None:
        rows = db.execute(stmt).all()
        return {
            "data": [
                serialize_patient(patient, appointment_count=int(count))
                for patient, count in rows
            ]
        }

    page = max(1, page)
    limit = min(MAX_PAGE_SIZE, max(1, limit or DEFAULT_PAGE_SIZE))
    total = int(
        db.execute(select(func.count(Patient.id)).where(*filters)).scalar_one()
    )
    rows = db.execute(stmt.offset((page - 1) * limit).limit(limit)).all()
    return {
        "data": [
            serialize_patient(patient, appointment_count=int(count))
            for patient, count in rows
        ],
        "meta": {
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": (total + limit - 1) // limit,
        },
    }


@app.post("/api/patients", status_code=status.HTTP_201_CREATED)
def create_patient(
    payload: PatientCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    patient = Patient(user_id=user.id, **payload.model_dump())
    db.add(patient)
    db.flush()
    return {
        "data": serialize_patient(patient, appointment_count=0),
        "message": "Paciente criado com sucesso",
    }


@app.get("/api/patients/{patient_id}")
def get_patient(
    patient_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    patient = get_owned_patient(db, user, patient_id)
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Paciente não encontrado"
        )
    return {
        "data": serialize_patient(
            patient, appointment_count=appointment_count(db, patient.id)
        )
    }


@app.put("/api/patients/{patient_id}")
def update_patient(
    patient_id: UUID,
    payload: PatientUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    patient = get_owned_patient(db, user, patient_id)
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Paciente não encontrado"
        )

    for field_name, value in payload.changes().items():
        setattr(patient, field_name, value)
    db.flush()

    return {
        "data": serialize_patient(
            patient, appointment_count=appointment_count(db, patient.id)
        ),
        "message": "Paciente atualizado com sucesso",
    }


@app.delete("/api/patients/{patient_id}")
def delete_patient(
    patient_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Delete a patient without upcoming active appointments."""

    patient = get_owned_patient(db, user, patient_id)
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Paciente não encontrado"
        )

    upcoming = db.execute(
        select(func.count(Appointment.id)).where(
            Appointment.patient_id == patient.id,
            Appointment.date_time >= utcnow(),
            Appointment.status.not_in(INACTIVE_STATUSES),
        )
    ).scalar_one()
    if upcoming:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Não é possível excluir paciente com agendamentos futuros",
        )

    db.delete(patient)
    db.flush()
    return {"data": None, "message": "Paciente excluído com sucesso"}


# Appointments


@app.get("/api/appointments")
def list_appointments(
    date: date | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    status_filter: str | None = Query(default=None, alias="status"),
    patient_id: UUID | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """List the clinic's appointments ordered by date.

    ``date`` selects a whole local day and takes precedence over the
    ``start_date``/``end_date`` range. Unknown ``status`` values are ignored.
    """

    tz = tenant_timezone(user)
    stmt = (
        select(Appointment)
        .where(Appointment.user_id == user.id)
        .options(
            joinedload(Appointment.patient),
            selectinload(Appointment.message_logs),
        )
        .order_by(Appointment.date_time)
    )

    if date is not None:
        day_start, day_end = local_day_bounds(date, tz)
        stmt = stmt.where(
            Appointment.date_time >= day_start, Appointment.date_time < day_end
        )
    else:
        if start_date is not None:
            stmt = stmt.where(Appointment.date_time >= to_storage(start_date, tz))
        if end_date is not None:
            stmt = stmt.where(Appointment.date_time <= to_storage(end_date, tz))

    if status_filter in AppointmentStatus.__members__:
        stmt = stmt.where(Appointment.status == AppointmentStatus(status_filter))

    if patient_id is not None:
        stmt = stmt.where(Appointment.patient_id == patient_id)

    appointments = db.execute(stmt).scalars().all()
    return {"data": [serialize_appointment(appt, tz=tz) for appt in appointments]}


@app.post("/api/appointments", status_code=status.HTTP_201_CREATED)
def create_appointment(
    payload: AppointmentCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    patient = get_owned_patient(db, user, payload.patient_id)
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Paciente não encontrado"
        )

    tz = tenant_timezone(user)
    date_time = to_storage(payload.date_time, tz)
    if find_conflict(db, user, date_time):
        raise conflict_error()

    appointment = Appointment(
        user_id=user.id,
        patient_id=patient.id,
        date_time=date_time,
        notes=payload.notes,
        status=AppointmentStatus.PENDING,
    )
    db.add(appointment)
    db.flush()
    db.refresh(appointment)
    logger.info("appointment created", extra={"appointment_id": str(appointment.id)})

    return {
        "data": serialize_appointment(appointment, tz=tz),
        "message": "Agendamento criado com sucesso",
    }


@app.get("/api/appointments/{appointment_id}")
def get_appointment(
    appointment_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    appointment = get_owned_appointment(db, user, appointment_id)
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Agendamento não encontrado"
        )
    return {"data": serialize_appointment(appointment, tz=tenant_timezone(user))}


@app.put("/api/appointments/{appointment_id}")
def update_appointment(
    appointment_id: UUID,
    payload: AppointmentUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    appointment = get_owned_appointment(db, user, appointment_id)
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Agendamento não encontrado"
        )

    tz = tenant_timezone(user)
    changes = payload.changes()

    new_patient_id = changes.get("patient_id")
    if new_patient_id is not None and new_patient_id != appointment.patient_id:
        if not get_owned_patient(db, user, new_patient_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Paciente não encontrado",
            )

    if changes.get("date_time") is not None:
        changes["date_time"] = to_storage(changes["date_time"], tz)
        if changes["date_time"] != appointment.date_time and find_conflict(
            db, user, changes["date_time"], exclude_id=appointment.id
        ):
            raise conflict_error()

    for field_name, value in changes.items():
        setattr(appointment, field_name, value)
    db.flush()
    db.refresh(appointment)

    return {
        "data": serialize_appointment(appointment, tz=tz),
        "message": "Agendamento atualizado com sucesso",
    }


@app.delete("/api/appointments/{appointment_id}")
def delete_appointment(
    appointment_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    appointment = get_owned_appointment(db, user, appointment_id)
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Agendamento não encontrado"
        )

    db.delete(appointment)
    db.flush()
    return {"data": None, "message": "Agendamento excluído com sucesso"}


# Settings and dashboard


@app.get("/api/settings")
def get_clinic_settings(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    return {"data": serialize_settings(ensure_settings(db, user))}


@app.put("/api/settings")
def update_clinic_settings(
    payload: SettingsUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    clinic_settings = ensure_settings(db, user)
    for field_name, value in payload.changes().items():
        setattr(clinic_settings, field_name, value)
    db.flush()
    return {
        "data": serialize_settings(clinic_settings),
        "message": "Configurações atualizadas com sucesso",
    }


@app.get("/api/dashboard")
def dashboard(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    return {"data": dashboard_for_user(db, user).as_dict()}


# WhatsApp webhook


def handle_patient_reply(db: Session, phone: str, text: str) -> str | None:
    """Apply a patient's reply to the appointment they were most recently asked about.

    Returns the new appointment status, or ``None`` when nothing was changed.
    """

    reply = parse_response(text)
    if reply is None:
        WEBHOOK_REPLIES.labels(outcome="unparsed").inc()
        return None

    now = utcnow()
    stmt = (
        select(Appointment)
        .join(Appointment.patient)
        .where(
            Patient.phone == phone,
            Appointment.status == AppointmentStatus.PENDING,
            Appointment.confirmation_sent_at.is_not(None),
            Appointment.date_time >= now,
        )
        .options(joinedload(Appointment.patient))
        .order_by(Appointment.confirmation_sent_at.desc())
        .limit(1)
    )
    appointment = db.execute(stmt).scalars().first()
    if not appointment or appointment.user_id != appointment.patient.user_id:
        WEBHOOK_REPLIES.labels(outcome="unmatched").inc()
        logger.info("reply without pending appointment", extra={"reply": reply})
        return None

    set_tenant_context(appointment.user_id)
    if reply == "CONFIRMED":
        appointment.status = AppointmentStatus.CONFIRMED
        appointment.confirmed_at = now
    else:
        appointment.status = AppointmentStatus.CANCELED

    db.execute(
        update(MessageLog)
        .where(MessageLog.appointment_id == appointment.id)
        .values(response=text, responded_at=now)
        .execution_options(synchronize_session="fetch")
    )
    WEBHOOK_REPLIES.labels(outcome=reply.lower()).inc()
    logger.info(
        "appointment updated from whatsapp reply",
        extra={"appointment_id": str(appointment.id), "new_status": reply},
    )
    return reply


def handle_delivery_update(db: Session, message_id: str, new_status: MessageStatus) -> bool:
    """Record a delivery acknowledgement for a message we sent."""

    message_log = db.execute(
        select(MessageLog).where(MessageLog.wa_message_id == message_id)
    ).scalars().first()
    if not message_log:
        logger.debug("Received status for unknown message id %s", message_id)
        return False
    if not advances_delivery(message_log.status, new_status):
        logger.debug(
            "Ignoring stale status %s for message %s", new_status.value, message_id
        )
        return False
    message_log.status = new_status
    return True


@app.post("/api/webhook/whatsapp")
def whatsapp_webhook(
    payload: dict[str, Any],
    apikey: str | None = Header(default=None),
    x_api_key: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Ingest Evolution API events: patient replies and delivery statuses."""

    provided = apikey or x_api_key
    expected = settings.evolution_api_key
    if not provided or not expected or not secrets.compare_digest(provided, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    event = event_name(payload)
    if event == "MESSAGES_UPDATE":
        for message_id, new_status in extract_status_updates(payload):
            handle_delivery_update(db, message_id, new_status)
        return {"received": True}

    if event not in ("", "MESSAGES_UPSERT"):
        logger.debug("Unhandled Evolution webhook event: %s", event)
        return {"received": True}

    for phone, text in extract_inbound_replies(payload):
        handle_patient_reply(db, phone, text)

    return {"received": True}
