# core/config.py
import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
import logging

# Load variables from .env file located in the project root directory
dotenv_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), '.env')
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path=dotenv_path)
else:
    load_dotenv() # Fallback

class Settings(BaseSettings):
    """Loads configuration settings from environment variables and .env file."""

    # --- Supabase Configuration ---
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None # ANON key, used for admin sign-in
    SUPABASE_SERVICE_KEY: str | None = None # SERVICE_ROLE key, used for table/storage writes

    # --- Service URLs ---
    ADMIN_API_URL: str = "http://localhost:8000"
    UI_SERVICE_URL: str = "http://localhost:7860"

    # --- Storage Configuration ---
    # One bucket for every media slot (audio and images alike)
    MEDIA_BUCKET: str = "tour-audio"
    STORAGE_CACHE_CONTROL: str = "3600"

    # --- Stop Defaults ---
    DEFAULT_STOP_RADIUS_M: float = float(os.getenv("DEFAULT_STOP_RADIUS_M", 75))

    # --- Auth ---
    REQUIRE_ADMIN_SESSION: bool = True

    class Config:
        env_file = '.env'
        env_file_encoding = 'utf-8'
        extra = 'ignore'

# Instantiate settings once for import
settings = Settings()

# --- Logging Setup ---
log_level_str = os.getenv("LOG_LEVEL", "INFO").upper(); log_level = getattr(logging, log_level_str, logging.INFO)
logging.basicConfig(level=log_level, format='%(asctime)s - %(name)s - [%(levelname)s] - %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
logger = logging.getLogger("TourAdmin_Core")
logging.getLogger("httpx").setLevel(logging.WARNING); logging.getLogger("supabase").setLevel(logging.WARNING)
logging.getLogger("watchfiles").setLevel(logging.WARNING)

# --- Configuration Validation Checks ---
logger.info(f"Core Settings loaded. Log Level: {log_level_str}")
if not settings.SUPABASE_URL or not settings.SUPABASE_KEY: logger.warning("Supabase URL/Key missing.")
if not settings.SUPABASE_SERVICE_KEY: logger.warning("Supabase Service Key missing.")
if not settings.MEDIA_BUCKET: logger.warning("MEDIA_BUCKET missing, media uploads will fail.")
else: logger.info(f"Using Supabase Storage Bucket: {settings.MEDIA_BUCKET}")
if not settings.REQUIRE_ADMIN_SESSION:
    logger.warning("REQUIRE_ADMIN_SESSION is disabled. Admin API routes are unauthenticated.")

try: assert settings.DEFAULT_STOP_RADIUS_M > 0; logger.info(f"Default stop radius: {settings.DEFAULT_STOP_RADIUS_M}m")
except (AssertionError, ValueError): logger.error(f"Invalid DEFAULT_STOP_RADIUS_M: {settings.DEFAULT_STOP_RADIUS_M}.")
