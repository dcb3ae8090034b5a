from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError
import os
import logging
from pathlib import Path

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')
# Optional local overrides (do not commit secrets)
load_dotenv(ROOT_DIR / ".env.local", override=True)

from .storage import DocumentStore
from .seed import seed_database
from .routers.auth import router as auth_router, init_db as init_auth_db
from .routers.schools import router as schools_router, init_db as init_schools_db
from .routers.students import router as students_router, init_db as init_students_db
from .routers.teachers import router as teachers_router, init_db as init_teachers_db
from .routers.attendance import router as attendance_router, init_db as init_attendance_db
from .routers.complaints import router as complaints_router, init_db as init_complaints_db
from .routers.records import router as records_router, init_db as init_records_db
from .routers.scholarship import router as scholarship_router, init_db as init_scholarship_db
from .routers.analytics import router as analytics_router, init_db as init_analytics_db
from .routers.admin import router as admin_router, init_db as init_admin_db
from .routers.reports import router as reports_router, init_db as init_reports_db

# MongoDB connection
mongo_url = os.environ['MONGO_URL']
client = AsyncIOMotorClient(mongo_url)
db = client[os.environ['DB_NAME']]

# Create the main app
app = FastAPI(title="School Administration API")

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

store = DocumentStore(db)


def _as_bool(v: str) -> bool:
    return str(v or "").strip().lower() in ("1", "true", "yes", "y", "on")


def init_routers(document_store, random_generator=None):
    """Inject the document store (and the face matcher's random source) into every router"""
    init_auth_db(document_store)
    init_schools_db(document_store)
    init_students_db(document_store)
    init_teachers_db(document_store)
    init_attendance_db(document_store, random_generator)
    init_complaints_db(document_store)
    init_records_db(document_store)
    init_scholarship_db(document_store)
    init_analytics_db(document_store)
    init_admin_db(document_store)
    init_reports_db(document_store)


init_routers(store)

# Register all routers; paths already carry /api
app.include_router(auth_router)
app.include_router(schools_router)
app.include_router(students_router)
app.include_router(teachers_router)
app.include_router(attendance_router)
app.include_router(complaints_router)
app.include_router(records_router)
app.include_router(scholarship_router)
app.include_router(analytics_router)
app.include_router(admin_router)
app.include_router(reports_router)

# ============= ERROR HANDLERS =============

# Request locations that prefix a field path in validation errors
_LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")


def _error_field(exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return None
    loc = [str(part) for part in errors[0].get("loc", ())]
    if loc and loc[0] in _LOCATION_PREFIXES:
        loc = loc[1:]
    return ".".join(loc) or None


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid input", "field": _error_field(exc)},
    )


@app.exception_handler(PyMongoError)
async def storage_exception_handler(request: Request, exc: PyMongoError):
    logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"message": "Storage unavailable"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# CORS middleware
allow_origins = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]
if not allow_origins:
    allow_origins = ["*"]

allow_credentials = _as_bool(os.environ.get("CORS_ALLOW_CREDENTIALS", "false"))

# Without credentials any origin may call the API. With credentials, list the
# allowed origins explicitly and set CORS_ALLOW_CREDENTIALS=true.
allow_origin_regex = None
if not allow_credentials and "*" not in allow_origins:
    allow_origin_regex = ".*"

app.add_middleware(
    CORSMiddleware,
    allow_credentials=allow_credentials,
    allow_origins=allow_origins,
    allow_origin_regex=allow_origin_regex,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    if _as_bool(os.environ.get("SEED_DEMO_DATA", "true")):
        await seed_database(store)


@app.on_event("shutdown")
async def shutdown_db_client():
    client.close()
