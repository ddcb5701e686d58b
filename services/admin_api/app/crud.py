# services/admin_api/app/crud.py
import asyncio
from typing import List, Optional, Callable, Any

from supabase import PostgrestAPIError

from core.config import logger as core_logger
from core.exceptions import CategoryInUseError, DatastoreError, RecordNotFoundError
from core.models import (
    Category, CategoryCreate, Stop, StopCreate, StopUpdate,
    Tour, TourCreate, TourDetail, TourSummary, TourUpdate,
)
from core.supabase_client import CATEGORIES_TABLE, STOPS_TABLE, TOURS_TABLE
from core.utils import utc_now_iso

logger = core_logger.getChild("AdminAPI").getChild("CRUD")

TOUR_LIST_COLUMNS = "id,title,city,is_published,created_at"
TOUR_DETAIL_COLUMNS = ",".join([
    "id", "title", "city", "is_published", "category_id", "intro_audio_url",
    "cover_image_url", "highlights_image_url", "map_image_url", "start_image_url",
    "start_touring_color_hex", "highlights_button_color_hex",
    "map_button_color_hex", "where_starts_button_color_hex",
    "created_at", "updated_at", "categories(name)",
])
STOP_COLUMNS = "id,tour_id,title,lat,lng,radius_m,pass_by,audio_url,image_url,sort_order"


async def _run(db_call: Callable[[], Any], what: str, job_prefix: str = ""):
    """Runs a synchronous Supabase call in a thread; any failure becomes DatastoreError."""
    prefix = f"{job_prefix} " if job_prefix else ""
    try:
        return await asyncio.to_thread(db_call)
    except PostgrestAPIError as e:
        logger.error(f"{prefix}Supabase error while trying to {what}: {e.message} (Code: {e.code}, Details: {e.details})", exc_info=False)
        raise DatastoreError(f"Failed to {what}: {e.message}") from e
    except Exception as e:
        logger.error(f"{prefix}Unexpected error while trying to {what}: {e}", exc_info=True)
        raise DatastoreError(f"Failed to {what}: {e}") from e


# --- Categories ---

async def list_categories(db_client) -> List[Category]:
    def db_call():
        return db_client.table(CATEGORIES_TABLE)\
               .select("id,name,created_at")\
               .order("name", desc=False)\
               .execute()

    response = await _run(db_call, "load categories")
    categories = [Category(**row) for row in (response.data or [])]
    # The database orders by byte value; the panel shows names case-insensitively
    categories.sort(key=lambda c: c.name.casefold())
    logger.debug(f"Loaded {len(categories)} categories.")
    return categories

async def create_category(db_client, category: CategoryCreate) -> Category:
    def db_call():
        return db_client.table(CATEGORIES_TABLE)\
               .insert({"name": category.name})\
               .execute()

    response = await _run(db_call, "create category")
    if not response.data:
        raise DatastoreError("Category insert returned no row.")
    logger.info(f"Created category '{category.name}'.")
    return Category(**response.data[0])

async def count_tours_in_category(db_client, category_id: str) -> int:
    def db_call():
        return db_client.table(TOURS_TABLE)\
               .select("id", count="exact", head=True)\
               .eq("category_id", category_id)\
               .execute()

    response = await _run(db_call, "count tours in category", f"[{category_id}]")
    return response.count or 0

async def delete_category(db_client, category_id: str) -> None:
    """Deletes a category only if no tour references it."""
    job_prefix = f"[{category_id}]"
    tour_count = await count_tours_in_category(db_client, category_id)
    if tour_count > 0:
        logger.info(f"{job_prefix} Refusing to delete category with {tour_count} tour(s).")
        raise CategoryInUseError(category_id, tour_count)

    def db_call():
        return db_client.table(CATEGORIES_TABLE)\
               .delete()\
               .eq("id", category_id)\
               .execute()

    await _run(db_call, "delete category", job_prefix)
    logger.info(f"{job_prefix} Deleted category.")


# --- Tours ---

async def list_tours(db_client) -> List[TourSummary]:
    def db_call():
        return db_client.table(TOURS_TABLE)\
               .select(TOUR_LIST_COLUMNS)\
               .order("created_at", desc=True)\
               .execute()

    response = await _run(db_call, "load tours")
    return [TourSummary(**row) for row in (response.data or [])]

async def create_tour(db_client, tour: TourCreate) -> str:
    """Inserts a tour and returns its new id."""
    def db_call():
        return db_client.table(TOURS_TABLE)\
               .insert(tour.model_dump())\
               .execute()

    response = await _run(db_call, "create tour")
    if not response.data:
        raise DatastoreError("Tour insert returned no row.")
    tour_id = response.data[0]["id"]
    logger.info(f"[{tour_id}] Created tour '{tour.title}'.")
    return tour_id

async def _fetch_tour_row(db_client, tour_id: str) -> dict:
    job_prefix = f"[{tour_id}]"

    def db_call():
        return db_client.table(TOURS_TABLE)\
               .select(TOUR_DETAIL_COLUMNS)\
               .eq("id", tour_id)\
               .limit(1)\
               .execute()

    response = await _run(db_call, "load tour", job_prefix)
    if not response.data:
        logger.info(f"{job_prefix} Tour not found.")
        raise RecordNotFoundError(TOURS_TABLE, tour_id)
    return dict(response.data[0])

async def get_tour(db_client, tour_id: str) -> Tour:
    return Tour(**await _fetch_tour_row(db_client, tour_id))

async def get_tour_detail(db_client, tour_id: str) -> TourDetail:
    """Tour row with its category name and stops in sort order."""
    row = await _fetch_tour_row(db_client, tour_id)
    # Supabase returns the joined category as an object or a one-element list
    category = row.pop("categories", None)
    if isinstance(category, list):
        category = category[0] if category else None
    stops = await list_stops(db_client, tour_id)
    return TourDetail(**row, category_name=(category or {}).get("name"), stops=stops)

async def update_tour(db_client, tour_id: str, changes: TourUpdate) -> None:
    job_prefix = f"[{tour_id}]"
    update_data = changes.model_dump()
    update_data["updated_at"] = utc_now_iso()

    def db_call():
        return db_client.table(TOURS_TABLE)\
               .update(update_data)\
               .eq("id", tour_id)\
               .execute()

    response = await _run(db_call, "save tour", job_prefix)
    if not response.data:
        raise RecordNotFoundError(TOURS_TABLE, tour_id)
    logger.info(f"{job_prefix} Saved tour.")

async def delete_tour(db_client, tour_id: str) -> None:
    """Deletes a tour; its stops go with it through the foreign key cascade."""
    def db_call():
        return db_client.table(TOURS_TABLE)\
               .delete()\
               .eq("id", tour_id)\
               .execute()

    await _run(db_call, "delete tour", f"[{tour_id}]")
    logger.info(f"[{tour_id}] Deleted tour.")


# --- Stops ---

async def list_stops(db_client, tour_id: str) -> List[Stop]:
    def db_call():
        return db_client.table(STOPS_TABLE)\
               .select(STOP_COLUMNS)\
               .eq("tour_id", tour_id)\
               .order("sort_order", desc=False)\
               .execute()

    response = await _run(db_call, "load stops", f"[{tour_id}]")
    return [Stop(**row) for row in (response.data or [])]

async def get_stop(db_client, stop_id: str) -> Stop:
    def db_call():
        return db_client.table(STOPS_TABLE)\
               .select(STOP_COLUMNS)\
               .eq("id", stop_id)\
               .limit(1)\
               .execute()

    response = await _run(db_call, "load stop", f"[{stop_id}]")
    if not response.data:
        raise RecordNotFoundError(STOPS_TABLE, stop_id)
    return Stop(**response.data[0])

async def create_stop(db_client, tour_id: str, stop: StopCreate) -> Stop:
    """Appends a stop after the current last one."""
    job_prefix = f"[{tour_id}]"
    existing = await list_stops(db_client, tour_id)
    next_sort = 0 if not existing else max(s.sort_order for s in existing) + 1

    insert_data = stop.model_dump()
    insert_data.update({"tour_id": tour_id, "sort_order": next_sort, "updated_at": utc_now_iso()})

    def db_call():
        return db_client.table(STOPS_TABLE)\
               .insert(insert_data)\
               .execute()

    response = await _run(db_call, "add stop", job_prefix)
    if not response.data:
        raise DatastoreError("Stop insert returned no row.")
    logger.info(f"{job_prefix} Added stop '{stop.title}' at position {next_sort}.")
    return Stop(**response.data[0])

async def update_stop(db_client, stop_id: str, changes: StopUpdate) -> None:
    job_prefix = f"[{stop_id}]"
    update_data = changes.model_dump()
    update_data["updated_at"] = utc_now_iso()

    def db_call():
        return db_client.table(STOPS_TABLE)\
               .update(update_data)\
               .eq("id", stop_id)\
               .execute()

    response = await _run(db_call, "save stop", job_prefix)
    if not response.data:
        raise RecordNotFoundError(STOPS_TABLE, stop_id)
    logger.info(f"{job_prefix} Saved stop.")

async def delete_stop(db_client, stop_id: str) -> None:
    def db_call():
        return db_client.table(STOPS_TABLE)\
               .delete()\
               .eq("id", stop_id)\
               .execute()

    await _run(db_call, "delete stop", f"[{stop_id}]")
    logger.info(f"[{stop_id}] Deleted stop.")

async def _set_sort_order(db_client, stop_id: str, sort_order: int) -> Optional[DatastoreError]:
    def db_call():
        return db_client.table(STOPS_TABLE)\
               .update({"sort_order": sort_order, "updated_at": utc_now_iso()})\
               .eq("id", stop_id)\
               .execute()

    try:
        await _run(db_call, "reorder stops", f"[{stop_id}]")
    except DatastoreError as e:
        return e
    return None

async def move_stop(db_client, tour_id: str, stop_id: str, direction: str) -> bool:
    """
    Swaps a stop's sort_order with its neighbour above or below.

    Returns False when the stop is already at that end of the list. Both
    updates are always issued; if either fails the first error is raised.
    """
    stops = await list_stops(db_client, tour_id)
    idx = next((i for i, s in enumerate(stops) if s.id == stop_id), -1)
    if idx == -1:
        raise RecordNotFoundError(STOPS_TABLE, stop_id)

    swap_with = idx - 1 if direction == "up" else idx + 1
    if swap_with < 0 or swap_with >= len(stops):
        return False

    a, b = stops[idx], stops[swap_with]
    err_a = await _set_sort_order(db_client, a.id, b.sort_order)
    err_b = await _set_sort_order(db_client, b.id, a.sort_order)
    if err_a or err_b:
        raise err_a or err_b
    logger.info(f"[{tour_id}] Moved stop {stop_id} {direction}.")
    return True
