"""
Core Storage Utilities.

Media handling for tours and stops on top of Supabase Storage. Every media
slot (stop audio, tour cover image, ...) is described once by a
``MediaSlot``: which table and column hold its pointer, and where its
objects live inside the media bucket. ``MediaStore`` drives the two
operations the admin panel needs for any slot:

* upload-then-persist: write the object, resolve its public URL, store the
  URL in the slot's column. Upload or database failures propagate.
* delete-then-clear: parse the stored URL, best-effort remove the object,
  then always null the column. Only the database failure propagates.

The Supabase client is passed in, never looked up globally, so callers
(and tests) decide which client the store talks to.
"""
import asyncio
import os
import uuid
from dataclasses import dataclass
from typing import Dict, NamedTuple, Optional, Tuple

from supabase import PostgrestAPIError

from core.config import settings, logger as core_logger
from core.exceptions import DatastoreError, MediaUploadError, RecordNotFoundError
from core.models import MediaUploadResult
from core.supabase_client import STOPS_TABLE, TOURS_TABLE
from core.utils import utc_now_iso

logger = core_logger.getChild("Storage")

PUBLIC_URL_MARKER = "/storage/v1/object/public/"


class StorageLocation(NamedTuple):
    bucket: str
    path: str


def parse_storage_url(public_url: Optional[str]) -> Optional[StorageLocation]:
    """
    Splits a Supabase public object URL into (bucket, path).

    Works for URLs like
    https://<project>.supabase.co/storage/v1/object/public/<bucket>/<path>.
    Returns None when the marker is missing, nothing follows the bucket, or
    either segment is empty. A query string or fragment is not part of the path.
    """
    if not public_url:
        return None
    i = public_url.find(PUBLIC_URL_MARKER)
    if i == -1:
        return None

    after = public_url[i + len(PUBLIC_URL_MARKER):]
    for sep in ("?", "#"):
        after = after.split(sep, 1)[0]

    bucket, slash, path = after.partition("/")
    if not slash or not bucket or not path:
        return None
    return StorageLocation(bucket, path)


# --- Media slots ---

AUDIO_EXTENSIONS = ("mp3", "m4a", "wav")
IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "webp")

# kind -> (allowed extensions, default extension, default content type)
MEDIA_KINDS: Dict[str, Tuple[Tuple[str, ...], str, str]] = {
    "audio": (AUDIO_EXTENSIONS, "mp3", "audio/mpeg"),
    "image": (IMAGE_EXTENSIONS, "jpg", "image/jpeg"),
}


@dataclass(frozen=True)
class MediaSlot:
    """One media pointer column and the storage folder its objects go to."""
    name: str
    kind: str
    table: str
    url_column: Optional[str]
    path_template: str # placeholders: owner_id, object_id, ext

    @property
    def persists_pointer(self) -> bool:
        return self.url_column is not None


MEDIA_SLOTS: Dict[str, MediaSlot] = {slot.name: slot for slot in (
    MediaSlot("stop_audio", "audio", STOPS_TABLE, "audio_url", "stops/{owner_id}/audio/{object_id}.{ext}"),
    MediaSlot("stop_image", "image", STOPS_TABLE, "image_url", "stops/{owner_id}/images/{object_id}.{ext}"),
    MediaSlot("tour_intro_audio", "audio", TOURS_TABLE, "intro_audio_url", "tours/{owner_id}/intro/{object_id}.{ext}"),
    MediaSlot("tour_cover_image", "image", TOURS_TABLE, "cover_image_url", "tours/{owner_id}/cover/{object_id}.{ext}"),
    MediaSlot("tour_highlights_image", "image", TOURS_TABLE, "highlights_image_url", "tours/{owner_id}/images/highlights/{object_id}.{ext}"),
    MediaSlot("tour_map_image", "image", TOURS_TABLE, "map_image_url", "tours/{owner_id}/images/map/{object_id}.{ext}"),
    MediaSlot("tour_start_image", "image", TOURS_TABLE, "start_image_url", "tours/{owner_id}/images/start/{object_id}.{ext}"),
    # Uploads for a stop that has not been created yet; owner is the tour
    MediaSlot("staged_stop_audio", "audio", STOPS_TABLE, None, "tours/{owner_id}/new-stop/audio/{object_id}.{ext}"),
    MediaSlot("staged_stop_image", "image", STOPS_TABLE, None, "tours/{owner_id}/new-stop/images/{object_id}.{ext}"),
)}


def get_media_slot(name: str) -> MediaSlot:
    try:
        return MEDIA_SLOTS[name]
    except KeyError:
        raise ValueError(f"Unknown media slot '{name}'")


def safe_extension(filename: Optional[str], kind: str) -> str:
    """Lower-cased extension of filename if allowed for the media kind, else the kind's default."""
    allowed, default_ext, _ = MEDIA_KINDS[kind]
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
    return ext if ext in allowed else default_ext


def build_object_key(slot: MediaSlot, owner_id: str, filename: Optional[str], object_id: Optional[str] = None) -> str:
    if not owner_id:
        raise ValueError("owner_id is required")
    return slot.path_template.format(
        owner_id=owner_id,
        object_id=object_id or str(uuid.uuid4()),
        ext=safe_extension(filename, slot.kind),
    )


class MediaStore:
    """Upload/delete media for tour and stop slots through an injected Supabase client."""

    def __init__(self, client, bucket: Optional[str] = None, cache_control: Optional[str] = None):
        self.client = client
        self.bucket = bucket or settings.MEDIA_BUCKET
        self.cache_control = cache_control or settings.STORAGE_CACHE_CONTROL

    async def store_object(self, slot: MediaSlot, owner_id: str, filename: Optional[str],
                           content: bytes, content_type: Optional[str] = None) -> Tuple[StorageLocation, str]:
        """Uploads (overwrite allowed) and returns the object's location and public URL."""
        job_prefix = f"[{owner_id}]"
        path = build_object_key(slot, owner_id, filename)
        content_type = content_type or MEDIA_KINDS[slot.kind][2]
        bucket = self.client.storage.from_(self.bucket)

        logger.info(f"{job_prefix} Uploading {slot.name} ({len(content)} bytes) to '{self.bucket}/{path}'.")

        def do_upload():
            return bucket.upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "cache-control": self.cache_control, "upsert": "true"},
            )

        try:
            await asyncio.to_thread(do_upload)
        except Exception as e:
            logger.error(f"{job_prefix} Storage upload failed for {slot.name}: {e}", exc_info=True)
            raise MediaUploadError(f"Failed to upload {slot.kind} file: {e}") from e

        try:
            public_url = await asyncio.to_thread(bucket.get_public_url, path)
        except Exception as e:
            logger.error(f"{job_prefix} Could not resolve public URL for '{path}': {e}", exc_info=True)
            raise MediaUploadError(f"Failed to get public URL for {slot.kind}: {e}") from e
        if not public_url:
            raise MediaUploadError(f"Failed to get public URL for {slot.kind}")

        return StorageLocation(self.bucket, path), public_url

    async def _set_pointer(self, slot: MediaSlot, owner_id: str, value: Optional[str]) -> None:
        job_prefix = f"[{owner_id}]"
        update_data = {slot.url_column: value, "updated_at": utc_now_iso()}

        def db_call():
            return self.client.table(slot.table)\
                   .update(update_data)\
                   .eq("id", owner_id)\
                   .execute()

        try:
            response = await asyncio.to_thread(db_call)
        except PostgrestAPIError as e:
            logger.error(f"{job_prefix} Supabase error updating {slot.table}.{slot.url_column}: {e.message} (Code: {e.code}, Details: {e.details})", exc_info=False)
            raise DatastoreError(f"Failed to update {slot.table}.{slot.url_column}: {e.message}") from e
        except Exception as e:
            logger.error(f"{job_prefix} Unexpected error updating {slot.table}.{slot.url_column}: {e}", exc_info=True)
            raise DatastoreError(f"Failed to update {slot.table}.{slot.url_column}: {e}") from e

        if not response.data:
            logger.warning(f"{job_prefix} Update of {slot.table}.{slot.url_column} matched no row.")
            raise RecordNotFoundError(slot.table, owner_id)

    async def upload_media(self, slot_name: str, owner_id: str, filename: Optional[str],
                           content: bytes, content_type: Optional[str] = None) -> MediaUploadResult:
        """
        Uploads a file for a slot and stores its public URL on the owning row.

        Slots without a pointer column (staged uploads) only upload. A failed
        database write leaves the uploaded object orphaned.
        """
        slot = get_media_slot(slot_name)
        location, public_url = await self.store_object(slot, owner_id, filename, content, content_type)

        if slot.persists_pointer:
            await self._set_pointer(slot, owner_id, public_url)
            logger.info(f"[{owner_id}] Stored {slot.name} URL in {slot.table}.{slot.url_column}.")

        return MediaUploadResult(slot=slot.name, url=public_url, bucket=location.bucket, path=location.path)

    async def delete_media(self, slot_name: str, owner_id: str, current_url: Optional[str]) -> bool:
        """
        Best-effort removes the object behind current_url, then nulls the slot's column.

        Returns True if a storage object was removed. The column is cleared
        even when the URL does not parse or the storage delete fails.
        """
        slot = get_media_slot(slot_name)
        if not slot.persists_pointer:
            raise ValueError(f"Media slot '{slot.name}' has no pointer column to clear")
        job_prefix = f"[{owner_id}]"

        removed = False
        location = parse_storage_url(current_url)
        if location:
            storage_bucket = self.client.storage.from_(location.bucket)
            try:
                await asyncio.to_thread(storage_bucket.remove, [location.path])
                removed = True
                logger.info(f"{job_prefix} Removed '{location.bucket}/{location.path}' from storage.")
            except Exception as e:
                logger.warning(f"{job_prefix} Storage delete failed for '{location.bucket}/{location.path}': {e}")
        elif current_url:
            logger.warning(f"{job_prefix} {slot.name} URL is not a storage URL, skipping storage delete: {current_url}")

        await self._set_pointer(slot, owner_id, None)
        logger.info(f"[{owner_id}] Cleared {slot.table}.{slot.url_column}.")
        return removed
