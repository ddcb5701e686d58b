from supabase import create_client, Client, ClientOptions
from core.config import settings, logger as core_logger
from typing import Dict, Optional
import asyncio
from functools import partial

logger = core_logger.getChild("Supabase")

# Table names used by the admin panel
TOURS_TABLE = "tours"
STOPS_TABLE = "stops"
CATEGORIES_TABLE = "categories"

# Cache clients by role: "service" for table/storage writes, "anon" for admin sign-in
_supabase_clients: Dict[str, Client] = {}
_init_lock: Optional[asyncio.Lock] = None


def _credentials(role: str):
    key = settings.SUPABASE_SERVICE_KEY if role == "service" else settings.SUPABASE_KEY
    return settings.SUPABASE_URL, key


async def get_supabase_client(use_service_key=False) -> Client:
    """
    Returns the cached Supabase client for a role, creating it on first use.
    Args:
        use_service_key: If True, the client uses the service role key and bypasses RLS.
            Otherwise the anon key is used, which is what admin sign-in goes through.
    """
    global _init_lock
    role = "service" if use_service_key else "anon"
    if role in _supabase_clients:
        return _supabase_clients[role]

    if _init_lock is None:
        _init_lock = asyncio.Lock()

    async with _init_lock:
        if role in _supabase_clients:
            return _supabase_clients[role]

        url, key = _credentials(role)
        if not url or not key:
            missing_key = "SUPABASE_SERVICE_KEY" if use_service_key else "SUPABASE_KEY"
            logger.error(f"SUPABASE_URL or {missing_key} not configured. Cannot create {role} client.")
            raise ValueError(f"SUPABASE_URL or {missing_key} not configured")

        # Server-side clients never refresh or persist a browser session
        options = ClientOptions(auto_refresh_token=False, persist_session=False)
        logger.info(f"Initializing Supabase {role} client for {url}...")
        try:
            loop = asyncio.get_running_loop()
            client_instance = await loop.run_in_executor(None, partial(create_client, url, key, options=options))
        except Exception as e:
            logger.error(f"Failed to initialize Supabase {role} client: {e}", exc_info=True)
            raise RuntimeError(f"Failed to initialize Supabase {role} client: {e}") from e

        _supabase_clients[role] = client_instance
        logger.info(f"Supabase {role} client initialized.")
        return client_instance


def drop_supabase_clients():
    """Forgets cached clients so the next lifespan startup builds fresh ones."""
    _supabase_clients.clear()
