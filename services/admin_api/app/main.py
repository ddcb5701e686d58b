# services/admin_api/app/main.py
from fastapi import FastAPI, Request, HTTPException, status
from core.config import settings
from core.models import AdminResponse
from core.exceptions import (
    TourAdminError, DatastoreError, RecordNotFoundError, MediaUploadError, CategoryInUseError,
)
from core.storage import MediaStore
from core.supabase_client import get_supabase_client, drop_supabase_clients
import asyncio
import logging
from contextlib import asynccontextmanager

# Use logger configured in core.config
logger = logging.getLogger("TourAdmin_Core").getChild("AdminAPI")


# --- Error Translation ---
def to_http_exception(error: TourAdminError) -> HTTPException:
    """Maps a domain failure onto the HTTP status the panel shows to the admin."""
    if isinstance(error, RecordNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, CategoryInUseError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, (DatastoreError, MediaUploadError)):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


# --- Supabase Client Dependencies ---
def get_db_client(request: Request):
    """Dependency: service-role Supabase client for table and storage access."""
    client = getattr(request.app.state, 'supabase', None)
    if not client:
        logger.error("Supabase client dependency not met: Client not available in application state.")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Admin API internal error: datastore client not ready")
    return client

def get_auth_client(request: Request):
    """Dependency: anon-key Supabase client used for admin sign-in and token checks."""
    client = getattr(request.app.state, 'auth_client', None)
    if not client:
        logger.error("Auth client dependency not met: Client not available in application state.")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Admin API internal error: auth client not ready")
    return client

def get_media_store(request: Request) -> MediaStore:
    store = getattr(request.app.state, 'media_store', None)
    if not store:
        logger.error("Media store dependency not met: Store not available in application state.")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Admin API internal error: media storage not ready")
    return store


# --- Admin Session Check ---
def _bearer_token(request: Request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()

async def require_admin_session(request: Request):
    """Dependency: rejects requests without a valid Supabase access token."""
    if not settings.REQUIRE_ADMIN_SESSION:
        return None

    token = _bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not signed in", headers={"WWW-Authenticate": "Bearer"})

    auth_client = get_auth_client(request)
    try:
        user_response = await asyncio.to_thread(auth_client.auth.get_user, token)
    except Exception as e:
        client_host = request.client.host if request.client else "unknown"
        logger.warning(f"Rejected admin token from {client_host}: {e}")
        raise HTTPException(status_code=401, detail="Session expired or invalid", headers={"WWW-Authenticate": "Bearer"})

    user = getattr(user_response, "user", None)
    if not user:
        raise HTTPException(status_code=401, detail="Session expired or invalid", headers={"WWW-Authenticate": "Bearer"})
    return user


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create the Supabase clients once and share them through app.state
    logger.info("Admin API lifespan startup: Initializing Supabase clients.")
    try:
        app.state.supabase = await get_supabase_client(use_service_key=True)
        app.state.media_store = MediaStore(app.state.supabase)
        logger.info(f"Supabase service client ready. Media bucket: {app.state.media_store.bucket}")
    except Exception as e:
        logger.error(f"Failed to initialize Supabase service client during startup: {e}", exc_info=True)
        # Let the app start; routes needing the client answer 503
        app.state.supabase = None
        app.state.media_store = None
    try:
        app.state.auth_client = await get_supabase_client()
    except Exception as e:
        logger.error(f"Failed to initialize Supabase auth client during startup: {e}", exc_info=True)
        app.state.auth_client = None

    yield # Application runs here

    logger.info("Admin API lifespan shutdown: Releasing Supabase clients.")
    app.state.supabase = None
    app.state.media_store = None
    app.state.auth_client = None
    drop_supabase_clients()


# --- FastAPI App ---
app = FastAPI(
    title="Tour Admin API",
    description="Manage tours, stops, categories and their media",
    version="1.0.0",
    lifespan=lifespan
)

# --- Health Check ---
@app.get("/health", response_model=AdminResponse, tags=["Meta"])
async def health_check(request: Request):
    client_status = "initialized" if getattr(request.app.state, 'supabase', None) else "NOT initialized"
    return AdminResponse(status="success", message=f"Admin API is running (Supabase Client: {client_status})")

# --- Routing ---
# Import routers AFTER app is defined
from .routers import auth, categories, tours, stops, media

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(categories.router, prefix="/categories", tags=["Categories"])
app.include_router(tours.router, prefix="/tours", tags=["Tours"])
app.include_router(stops.router, prefix="/stops", tags=["Stops"])
app.include_router(media.router, tags=["Media"])

@app.get("/", response_model=AdminResponse, tags=["Meta"])
async def read_root():
    return AdminResponse(status="success", message="Welcome to the Tour Admin API")
