import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.logging import configure_logging
from .reporting.errors import PeriodValidationError
from .routers import register_routers


configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME, version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)


@app.exception_handler(PeriodValidationError)
async def period_validation_error_handler(request: Request, exc: PeriodValidationError):
    logger.info("Rejected %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "reason": exc.reason,
            "parameter": exc.parameter,
            "message": exc.message,
        },
    )


@app.get("/health")
def health():
    return {"status": "ok"}


register_routers(app)
