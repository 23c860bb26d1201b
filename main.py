# main.py
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import routes
from util.enums import Environment, Color, ErrorMessage
from fastapi import FastAPI, Request
from starlette.middleware.cors import CORSMiddleware
from config.settings import settings
from config.database import close_engine, create_tables, get_engine
from fastapi.responses import JSONResponse
from util.errors import AppError
from util.logger import init_logger

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    try:
        init_logger()
        print(f"{Color.GREEN}Initializing...{Color.RESET}")
        engine = get_engine()
        if settings.DB_CREATE_TABLES:
            create_tables(engine)
        logger.info(
            "app.start env=%s llm=%s provider=%s",
            settings.APP_ENV,
            settings.ENABLE_LLM,
            settings.LLM_PROVIDER,
        )
        print(f"{Color.BLUE}Server Started{Color.RESET}")
    except Exception as e:
        print("Failed to initialize database:", e)
        raise

    try:
        yield
    finally:
        close_engine()
        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.ALLOWED_ORIGIN],
    allow_credentials=True,  # Allow cookies and other credentials
    allow_methods=["GET", "POST"],  # Allowed HTTP Methods
    allow_headers=["Authorization", "Content-Type", "Accept"],  # Allowed HTTP Headers
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.get("/")
async def root():
    return {
        "message": "Konkani Dictionary API",
        "status": "running",
        "provider": settings.LLM_PROVIDER if settings.ENABLE_LLM else None,
        "timestamp": _now(),
    }


@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": _now()}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    body = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("app.unhandled path=%s", request.url.path)
    body = {"error": ErrorMessage.INTERNAL_ERROR.value.message}
    if settings.APP_ENV == Environment.DEV:
        body["message"] = str(exc)
    return JSONResponse(status_code=ErrorMessage.INTERNAL_ERROR.value.http_status, content=body)


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=reload)
