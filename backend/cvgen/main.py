import os
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.routes_conversations import router as conversations_router
from .api.routes_cv import router as cv_router
from .api.routes_generate import router as generate_router
from .config import get_settings
from .errors import ServiceError
from .generation import utc_timestamp

# settings are resolved lazily, so .env only has to be loaded before the first get_settings()
load_dotenv()

CSP_HEADER = "default-src 'self'; worker-src 'self' blob:;"

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="CV Generation API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["Content-Security-Policy"] = CSP_HEADER
    return response


if os.path.isdir(settings.public_dir):
    app.mount("/public", StaticFiles(directory=settings.public_dir), name="public")


# ----- Error rendering -----
@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(
        status_code=exc.http_status,
        content={"success": False, "error": exc.error, "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request", "message": details},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"success": False, "error": "Endpoint not found"})
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "message": str(exc)},
        # rendered outside the middleware stack, so the header is not added there
        headers={"Content-Security-Policy": CSP_HEADER},
    )


@app.get("/test")
def health():
    return {
        "status": "ok",
        "message": "API is running",
        "timestamp": utc_timestamp(),
        "model": settings.text_model,
    }


app.include_router(generate_router)
app.include_router(conversations_router)
app.include_router(cv_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
