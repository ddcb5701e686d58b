# services/admin_api/app/routers/media.py
from fastapi import APIRouter, HTTPException, Depends, UploadFile, File
from core.models import AdminResponse
from core.exceptions import TourAdminError
from core.storage import MediaStore, get_media_slot
import logging

from .. import crud
from ..main import get_db_client, get_media_store, require_admin_session, to_http_exception

logger = logging.getLogger("TourAdmin_Core").getChild("AdminAPI").getChild("MediaRouter")

router = APIRouter(dependencies=[Depends(require_admin_session)])

# URL slot name -> media slot
TOUR_MEDIA_SLOTS = {
    "intro_audio": "tour_intro_audio",
    "cover_image": "tour_cover_image",
    "highlights_image": "tour_highlights_image",
    "map_image": "tour_map_image",
    "start_image": "tour_start_image",
}
STOP_MEDIA_SLOTS = {
    "audio": "stop_audio",
    "image": "stop_image",
}
STAGED_MEDIA_SLOTS = {
    "audio": "staged_stop_audio",
    "image": "staged_stop_image",
}

GENERIC_CONTENT_TYPE = "application/octet-stream"


def _resolve_slot(slots: dict, name: str) -> str:
    if name not in slots:
        raise HTTPException(status_code=404, detail=f"Unknown media slot '{name}'. Expected one of: {', '.join(slots)}")
    return slots[name]

async def _read_upload(file: UploadFile) -> bytes:
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="file is required")
    return content


async def _upload(store: MediaStore, slot_name: str, owner_id: str, file: UploadFile) -> AdminResponse:
    content = await _read_upload(file)
    # Unknown types fall back to the slot kind's default content type
    content_type = file.content_type if file.content_type not in (None, "", GENERIC_CONTENT_TYPE) else None
    try:
        result = await store.upload_media(slot_name, owner_id, file.filename, content, content_type)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", data=result, message="Upload complete")

async def _delete(store: MediaStore, slot_name: str, owner_id: str, current_url: str | None) -> AdminResponse:
    if not current_url:
        return AdminResponse(status="success", data={"removed_from_storage": False}, message="Nothing to delete")
    try:
        removed = await store.delete_media(slot_name, owner_id, current_url)
    except TourAdminError as e:
        raise to_http_exception(e)
    message = "Media deleted" if removed else "Media reference cleared; storage object was not removed"
    return AdminResponse(status="success", data={"removed_from_storage": removed}, message=message)


# --- Tour media ---

@router.put("/tours/{tour_id}/media/{slot}", response_model=AdminResponse)
async def upload_tour_media(
    tour_id: str,
    slot: str,
    file: UploadFile = File(...),
    store: MediaStore = Depends(get_media_store),
):
    slot_name = _resolve_slot(TOUR_MEDIA_SLOTS, slot)
    logger.info(f"Uploading {slot} for tour {tour_id}: '{file.filename}'")
    return await _upload(store, slot_name, tour_id, file)


@router.delete("/tours/{tour_id}/media/{slot}", response_model=AdminResponse)
async def delete_tour_media(
    tour_id: str,
    slot: str,
    db_client=Depends(get_db_client),
    store: MediaStore = Depends(get_media_store),
):
    slot_name = _resolve_slot(TOUR_MEDIA_SLOTS, slot)
    logger.info(f"Deleting {slot} of tour {tour_id}")
    try:
        tour = await crud.get_tour(db_client, tour_id)
    except TourAdminError as e:
        raise to_http_exception(e)
    current_url = getattr(tour, get_media_slot(slot_name).url_column)
    return await _delete(store, slot_name, tour_id, current_url)


# --- Stop media ---

@router.put("/stops/{stop_id}/media/{slot}", response_model=AdminResponse)
async def upload_stop_media(
    stop_id: str,
    slot: str,
    file: UploadFile = File(...),
    store: MediaStore = Depends(get_media_store),
):
    slot_name = _resolve_slot(STOP_MEDIA_SLOTS, slot)
    logger.info(f"Uploading {slot} for stop {stop_id}: '{file.filename}'")
    return await _upload(store, slot_name, stop_id, file)


@router.delete("/stops/{stop_id}/media/{slot}", response_model=AdminResponse)
async def delete_stop_media(
    stop_id: str,
    slot: str,
    db_client=Depends(get_db_client),
    store: MediaStore = Depends(get_media_store),
):
    slot_name = _resolve_slot(STOP_MEDIA_SLOTS, slot)
    logger.info(f"Deleting {slot} of stop {stop_id}")
    try:
        stop = await crud.get_stop(db_client, stop_id)
    except TourAdminError as e:
        raise to_http_exception(e)
    current_url = getattr(stop, get_media_slot(slot_name).url_column)
    return await _delete(store, slot_name, stop_id, current_url)


# --- Staged media for a stop that is still being filled in ---

@router.post("/tours/{tour_id}/staged-media/{slot}", response_model=AdminResponse, status_code=201)
async def upload_staged_stop_media(
    tour_id: str,
    slot: str,
    file: UploadFile = File(...),
    store: MediaStore = Depends(get_media_store),
):
    """Uploads audio/image for a new stop; the returned URL goes into the add-stop request."""
    slot_name = _resolve_slot(STAGED_MEDIA_SLOTS, slot)
    logger.info(f"Staging new-stop {slot} for tour {tour_id}: '{file.filename}'")
    return await _upload(store, slot_name, tour_id, file)
