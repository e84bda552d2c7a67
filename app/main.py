from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from structlog import get_logger
import logging
import structlog
from app.config import settings
from app.database import init_models, dispose_engine
from app.exceptions import PropertyServiceError
from app.routers import properties

logger = get_logger()

def configure_logging(level: str = settings.LOG_LEVEL):
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
    )

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await init_models()
    logger.info("Property service started")
    yield
    await dispose_engine()

app = FastAPI(title="Property Listing Service", lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=settings.cors_origins_list, allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

@app.exception_handler(PropertyServiceError)
async def handle_service_error(request: Request, exc: PropertyServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())

@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    # ctx may carry exception instances that are not JSON serializable
    details = [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]
    return JSONResponse(status_code=422, content={"error": "Invalid request", "details": jsonable_encoder(details)})

@app.exception_handler(SQLAlchemyError)
async def handle_store_error(request: Request, exc: SQLAlchemyError):
    logger.error("Persistence failure", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": str(exc)})

@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error("Unexpected failure", path=request.url.path, error=str(exc), exc_info=True)
    return JSONResponse(status_code=500, content={"error": str(exc)})

app.include_router(properties.router)

@app.get("/health")
async def root_health():
    return "ok"
