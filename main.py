from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging

import httpx
import uvicorn
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from app.core.config import Settings, settings, check_environment_variables
from app.core.database import init_supabase
from app.routers import waitlist
from app.services.email_sender import EmailSender
from app.services.notification_service import NotificationDispatcher
from app.services.waitlist_service import WaitlistStore

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)

HOME_PAGE = """
<h1>Marketplace API</h1>
<h2>Available Routes</h2>
<pre>
  GET, POST /waitlist
  GET, DELETE /waitlist/:id
</pre>
""".strip()


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the shared clients; refuse to start without credentials"""
        logger.info("🚀 Starting Waitlist API...")
        check_environment_variables(app_settings)

        supabase = await init_supabase(app_settings)
        http_client = httpx.AsyncClient(timeout=app_settings.NOTIFICATION_TIMEOUT_SECONDS)

        app.state.store = WaitlistStore(
            supabase,
            table=app_settings.WAITLIST_TABLE,
            timeout=app_settings.STORAGE_TIMEOUT_SECONDS
        )
        app.state.dispatcher = NotificationDispatcher(
            EmailSender(
                http_client,
                api_key=app_settings.BREVO_API_KEY,
                sender_email=app_settings.SENDER_EMAIL,
                sender_name=app_settings.SENDER_NAME,
                base_url=app_settings.BREVO_BASE_URL
            ),
            operator_email=app_settings.OPERATOR_EMAIL,
            test_email=app_settings.NOTIFICATION_TEST_EMAIL,
            test_mode=app_settings.NOTIFICATION_TEST_MODE
        )
        logger.info(f"✅ Waitlist API started, listening on port {app_settings.PORT}")
        yield
        logger.info("🔄 Shutting down Waitlist API...")
        await http_client.aclose()

    app = FastAPI(
        title="Marketplace API",
        description="Waitlist signup service",
        version=app_settings.API_VERSION,
        lifespan=lifespan
    )
    app.state.settings = app_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(waitlist.router, prefix="/waitlist")

    @app.get("/", response_class=HTMLResponse)
    async def root():
        """Route documentation"""
        return HOME_PAGE

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint"""
        database = "disconnected"
        error = None
        try:
            await request.app.state.store.ping()
            database = "connected"
        except Exception as e:
            error = str(e)

        body = {
            "status": "healthy" if error is None else "unhealthy",
            "environment": app_settings.NODE_ENV,
            "version": app_settings.API_VERSION,
            "database": database,
            "test_mode": app_settings.NOTIFICATION_TEST_MODE
        }
        if error is not None:
            body["error"] = error
        return body

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        """HTTP exception handler"""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        """Request body validation handler"""
        return JSONResponse(
            status_code=422,
            content={
                "error": "Invalid request body",
                "details": jsonable_encoder(exc.errors())
            }
        )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
