from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from agrosphere.core.logging import setup_logging
from agrosphere.core.init_db import init_db
from agrosphere.core.errors import AppError
from agrosphere.api.router import api_router

setup_logging()
logger.info("Starting Agrosphere backend")


app = FastAPI(
    title="Agrosphere Backend",
    version="0.1.0"
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.info(f"{exc.kind} | {request.method} {request.url.path} | {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg', 'invalid input')}" if field else "invalid input"
    return JSONResponse(
        status_code=400,
        content={"kind": "validation_error", "detail": message},
    )


app.include_router(api_router)

# Init DB after app is created
init_db()

@app.get("/health")
def health():
    logger.debug("Health check hit")
    return {"status": "ok"}
