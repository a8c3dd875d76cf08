import datetime
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config.setting import settings as default_settings
from app.domains.auth.jwt_service import JWTService
from app.domains.auth.routes import router as auth_router
from app.domains.otp import messages
from app.domains.otp.errors import OTPError, RateLimited
from app.domains.otp.otp_service import OTPService
from app.domains.otp.routes import router as otp_router
from app.domains.parents.demo_data import demo_identities
from app.domains.parents.routes import router as parents_router
from app.domains.parents.service import InMemoryIdentityStore
from app.shared.sms_service import SMSDelivery, build_channel

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "GET /",
    "POST /api/send-otp",
    "POST /api/verify-otp",
    "POST /api/logout",
    "GET /api/children/:mobile",
    "POST /api/add-child",
]

_UNSET = object()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(OTPError)
    async def otp_error_handler(request: Request, exc: OTPError):
        content = {"success": False, "code": exc.code, "message": exc.message}
        headers = None
        if isinstance(exc, RateLimited):
            content["retryAfter"] = exc.retry_after
            headers = {"Retry-After": str(exc.retry_after)}
        return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "code": "VALIDATION_ERROR", "message": messages.for_code("INVALID_REQUEST")},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return JSONResponse(
                status_code=404,
                content={
                    "success": False,
                    "message": messages.for_code("NOT_FOUND"),
                    "requestedPath": request.url.path,
                    "availableEndpoints": ENDPOINTS,
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def server_error_handler(request: Request, exc: Exception):
        logger.exception("Server error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": messages.for_code("SERVER_ERROR"), "error": str(exc)},
        )


def create_app(settings=default_settings, clock=None, rng=None, channel=_UNSET, identity_store=None) -> FastAPI:
    """Build the API with its services wired onto ``app.state``.

    ``channel`` defaults to the Twilio client built from settings; pass ``None``
    to force demo mode or a fake to capture outgoing messages.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("%s starting (%s)", settings.app_name, settings.environment)
        logger.info("Twilio configured: %s", app.state.delivery.configured)
        yield
        logger.info("Process terminated")

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    clock_kwargs = {"clock": clock} if clock is not None else {}

    if channel is _UNSET:
        channel = build_channel(settings)
    delivery = SMSDelivery(channel, country_code=settings.sms_country_code)

    if identity_store is None:
        identities = demo_identities() if settings.demo_seed_enabled else []
        identity_store = InMemoryIdentityStore(identities, **clock_kwargs)

    jwt_service = JWTService(
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        session_ttl_minutes=settings.session_ttl_minutes,
        **clock_kwargs,
    )

    app.state.settings = settings
    app.state.delivery = delivery
    app.state.identity_store = identity_store
    app.state.jwt_service = jwt_service
    app.state.otp_service = OTPService.from_settings(
        settings, delivery, identity_store, jwt_service, rng=rng, **clock_kwargs
    )

    @app.get("/")
    def health():
        return {
            "message": f"{settings.app_name} API is running!",
            "status": "active",
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "twilioConfigured": delivery.configured,
            "endpoints": ENDPOINTS[1:],
        }

    register_exception_handlers(app)

    app.include_router(otp_router, prefix="/api", tags=["OTP"])
    app.include_router(auth_router, prefix="/api")
    app.include_router(parents_router, prefix="/api")

    return app


app = create_app()
