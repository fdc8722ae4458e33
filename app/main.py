from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.api.endpoints import contact
from app.core.config import settings
from app.core.logging import setup_logging
from app.services.contact_service import ContactService
from app.services.mail_service import MailService
from app.services.rate_limit_service import RateLimiter
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # rate limit state lives only as long as the app
    app.state.rate_limiter = RateLimiter.from_settings()
    app.state.mail_service = MailService()
    app.state.contact_service = ContactService(
        rate_limiter=app.state.rate_limiter,
        mail_service=app.state.mail_service,
    )
    if not settings.CONTACT_EMAIL or not settings.SMTP_HOST:
        logger.warning("CONTACT_EMAIL or SMTP_HOST is not set; contact submissions will fail to send")
    yield
    app.state.rate_limiter.reset()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Contact form API for the portfolio site",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(
    contact.router,
    prefix=f"{settings.API_V1_STR}/contact",
    tags=["contact"],
)


@app.get("/", tags=["status"])
async def root():
    return {"status": "online", "service": settings.PROJECT_NAME}


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "path": str(request.url)},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
