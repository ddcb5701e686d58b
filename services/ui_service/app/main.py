# services/ui_service/app/main.py

import gradio as gr
import fastapi
import httpx
import logging
import mimetypes
import os
from core.config import settings
from core.models import (
    Category, TourSummary, TourDetail, Stop, AdminSession, MediaUploadResult,
)
from core.utils import normalize_hex6, safe_color_for_picker
from typing import Optional, List, Dict, Any, Tuple

# Setup logger
logger = logging.getLogger("TourAdmin_Core").getChild("UIService")

# Global httpx client for calling the admin API
api_client = httpx.AsyncClient(base_url=settings.ADMIN_API_URL, timeout=120.0)

FALLBACK_BUTTON_COLOR = "#111111"
STOP_TABLE_HEADERS = ["id", "#", "title", "lat", "lng", "radius_m", "pass_by", "audio", "image"]
TOUR_MEDIA_CHOICES = ["intro_audio", "cover_image", "highlights_image", "map_image", "start_image"]
STOP_MEDIA_CHOICES = ["audio", "image"]


# --- Helper Functions for API Calls ---
async def call_admin_api(method: str, endpoint: str, token: Optional[str] = None,
                         payload: Optional[Dict] = None, files: Optional[Dict] = None) -> Dict:
    """Helper to call the admin API and turn any failure into {"error": message}."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    try:
        response = await api_client.request(method.upper(), endpoint, json=payload, files=files, headers=headers)
        response.raise_for_status(); api_response = response.json()
        if api_response.get("status") == "success": return {"data": api_response.get("data"), "message": api_response.get("message")}
        error_msg = api_response.get("message", "Unknown API error")
        logger.error(f"Admin API returned error at {endpoint}: {error_msg} (Status: {response.status_code})")
        return {"error": error_msg}
    except httpx.HTTPStatusError as e:
        downstream_error = e.response.text
        try: downstream_error = e.response.json().get('detail', e.response.text)
        except Exception: pass
        if isinstance(downstream_error, list):
            # FastAPI validation errors
            downstream_error = "; ".join(str(item.get("msg", item)) for item in downstream_error)
        logger.error(f"Admin API error ({e.response.status_code}) calling {endpoint}: {downstream_error}")
        return {"error": str(downstream_error)}
    except httpx.RequestError as e:
        logger.error(f"Network error calling admin API endpoint {endpoint}: {e}")
        return {"error": f"Cannot reach admin API at {settings.ADMIN_API_URL}"}


def _file_part(file_path: str) -> Dict[str, Tuple[str, bytes, str]]:
    filename = os.path.basename(file_path)
    content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    with open(file_path, "rb") as f:
        return {"file": (filename, f.read(), content_type)}


def format_stop_rows(stops: List[Stop]) -> List[List[Any]]:
    return [
        [s.id, s.sort_order, s.title or "", "" if s.lat is None else s.lat, "" if s.lng is None else s.lng,
         s.radius_m, s.pass_by, "yes" if s.audio_url else "", "yes" if s.image_url else ""]
        for s in stops
    ]


def format_media_markdown(tour: TourDetail) -> str:
    lines = ["**Tour media**"]
    for label, url in (
        ("Intro audio", tour.intro_audio_url), ("Cover image", tour.cover_image_url),
        ("Highlights button", tour.highlights_image_url), ("Map button", tour.map_image_url),
        ("Start button", tour.start_image_url),
    ):
        lines.append(f"- {label}: {url if url else '_none_'}")
    return "\n".join(lines)


# --- Gradio Interface Functions ---

async def login_ui(email: str, password: str):
    if not email or not password:
        return "Enter email and password.", None
    api_result = await call_admin_api("POST", "/auth/login", payload={"email": email, "password": password})
    if "error" in api_result:
        return f"Sign-in failed: {api_result['error']}", None
    session = AdminSession(**api_result["data"])
    logger.info(f"UI session started for {session.email}")
    return f"Signed in as {session.email}", session.access_token


async def logout_ui(token: Optional[str]):
    if not token:
        return "Not signed in.", None
    api_result = await call_admin_api("POST", "/auth/logout", token=token)
    if "error" in api_result:
        return f"Sign-out failed: {api_result['error']}", token
    return "Signed out.", None


async def load_categories_ui(token: Optional[str]):
    api_result = await call_admin_api("GET", "/categories/", token=token)
    if "error" in api_result:
        return f"Error loading categories: {api_result['error']}", gr.update(choices=[])
    categories = [Category(**c) for c in api_result.get("data") or []]
    if not categories:
        return "No categories yet.", gr.update(choices=[], value=None)
    listing = "\n".join(f"- **{c.name}** (`{c.id}`)" for c in categories)
    return listing, gr.update(choices=[(c.name, c.id) for c in categories], value=None)


async def create_category_ui(token: Optional[str], name: str):
    if not name or not name.strip():
        return "Enter a category name."
    api_result = await call_admin_api("POST", "/categories/", token=token, payload={"name": name})
    if "error" in api_result:
        return f"Error: {api_result['error']}"
    return api_result.get("message") or "Category created"


async def delete_category_ui(token: Optional[str], category_id: Optional[str]):
    if not category_id:
        return "Select a category to delete."
    api_result = await call_admin_api("DELETE", f"/categories/{category_id}", token=token)
    if "error" in api_result:
        return f"Error: {api_result['error']}"
    return api_result.get("message") or "Category deleted"


async def load_tours_ui(token: Optional[str]):
    api_result = await call_admin_api("GET", "/tours/", token=token)
    if "error" in api_result:
        return f"Error loading tours: {api_result['error']}", gr.update(choices=[])
    tours = [TourSummary(**t) for t in api_result.get("data") or []]
    if not tours:
        return "No tours yet.", gr.update(choices=[], value=None)
    listing = "\n".join(
        f"- **{t.title or '(untitled)'}** {('· ' + t.city) if t.city else ''} · {'Published' if t.is_published else 'Draft'}"
        for t in tours
    )
    return listing, gr.update(choices=[(t.title or t.id, t.id) for t in tours], value=None)


async def create_tour_ui(token: Optional[str], title: str, city: str, is_published: bool):
    if not title or not title.strip():
        return "Title is required.", None
    api_result = await call_admin_api("POST", "/tours/", token=token,
                                      payload={"title": title, "city": city, "is_published": is_published})
    if "error" in api_result:
        return f"Error: {api_result['error']}", None
    tour_id = api_result["data"]["id"]
    return f"Tour created: {tour_id}", tour_id


async def load_tour_ui(token: Optional[str], tour_id: Optional[str]):
    """
    Returns the editor field values for one tour.

    The four pickers always get a displayable color; the stored hex values
    (possibly None) come last and are what save_tour_ui sends back.
    """
    empty = ("", "", False, None) + (FALLBACK_BUTTON_COLOR,) * 4 + ([], "") + (None,) * 4
    if not tour_id:
        return ("Select a tour.",) + empty
    api_result = await call_admin_api("GET", f"/tours/{tour_id}", token=token)
    if "error" in api_result:
        return (f"Error loading tour: {api_result['error']}",) + empty
    tour = TourDetail(**api_result["data"])
    return (
        f"Editing **{tour.title}**" + (f" in category {tour.category_name}" if tour.category_name else ""),
        tour.title or "",
        tour.city or "",
        bool(tour.is_published),
        tour.category_id,
        safe_color_for_picker(tour.start_touring_color_hex, FALLBACK_BUTTON_COLOR),
        safe_color_for_picker(tour.highlights_button_color_hex, FALLBACK_BUTTON_COLOR),
        safe_color_for_picker(tour.map_button_color_hex, FALLBACK_BUTTON_COLOR),
        safe_color_for_picker(tour.where_starts_button_color_hex, FALLBACK_BUTTON_COLOR),
        format_stop_rows(tour.stops),
        format_media_markdown(tour),
        normalize_hex6(tour.start_touring_color_hex),
        normalize_hex6(tour.highlights_button_color_hex),
        normalize_hex6(tour.map_button_color_hex),
        normalize_hex6(tour.where_starts_button_color_hex),
    )


def pick_color_ui(value: Optional[str]) -> Optional[str]:
    return normalize_hex6(value)


def clear_color_ui():
    """Resets a picker to the fallback and forgets the stored color."""
    return FALLBACK_BUTTON_COLOR, None


async def save_tour_ui(token, tour_id, title, city, is_published, category_id,
                       start_hex, highlights_hex, map_hex, where_starts_hex):
    if not tour_id:
        return "Select a tour."
    if not title or not title.strip():
        return "Tour title is required."
    payload = {
        "title": title, "city": city, "is_published": is_published, "category_id": category_id,
        "start_touring_color_hex": start_hex, "highlights_button_color_hex": highlights_hex,
        "map_button_color_hex": map_hex, "where_starts_button_color_hex": where_starts_hex,
    }
    api_result = await call_admin_api("PUT", f"/tours/{tour_id}", token=token, payload=payload)
    if "error" in api_result:
        return f"Error: {api_result['error']}"
    return api_result.get("message") or "Tour saved"


async def delete_tour_ui(token: Optional[str], tour_id: Optional[str], confirmed: bool):
    if not tour_id:
        return "Select a tour."
    if not confirmed:
        return "Tick the confirmation box: deleting a tour also deletes all its stops."
    api_result = await call_admin_api("DELETE", f"/tours/{tour_id}", token=token)
    if "error" in api_result:
        return f"Error: {api_result['error']}"
    return api_result.get("message") or "Tour deleted"


async def add_stop_ui(token, tour_id, title, lat, lng, radius_m, pass_by, staged_audio_url, staged_image_url):
    if not tour_id:
        return "Select a tour."
    if not title or not title.strip():
        return "Stop title is required."
    payload = {"title": title, "lat": lat, "lng": lng, "radius_m": radius_m, "pass_by": bool(pass_by),
               "audio_url": staged_audio_url or None, "image_url": staged_image_url or None}
    api_result = await call_admin_api("POST", f"/tours/{tour_id}/stops", token=token, payload=payload)
    if "error" in api_result:
        return f"Error: {api_result['error']}"
    return api_result.get("message") or "Stop added"


async def load_stop_ui(token: Optional[str], stop_id: Optional[str]):
    """Fills the edit-stop form from the stored row: (message, title, lat, lng, radius_m, pass_by)."""
    empty = ("", "", "", settings.DEFAULT_STOP_RADIUS_M, False)
    if not stop_id or not str(stop_id).strip():
        return ("Enter or select a stop id.",) + empty
    api_result = await call_admin_api("GET", f"/stops/{str(stop_id).strip()}", token=token)
    if "error" in api_result:
        return (f"Error loading stop: {api_result['error']}",) + empty
    stop = Stop(**api_result["data"])
    return (
        f"Editing stop **{stop.title or stop.id}**",
        stop.title or "",
        "" if stop.lat is None else str(stop.lat),
        "" if stop.lng is None else str(stop.lng),
        settings.DEFAULT_STOP_RADIUS_M if stop.radius_m is None else stop.radius_m,
        bool(stop.pass_by),
    )


def select_stop_row(table, evt: gr.SelectData) -> str:
    """Stop id of the clicked stops-table row."""
    rows = table.values.tolist() if hasattr(table, "values") else (table or [])
    row_index = evt.index[0] if isinstance(evt.index, (list, tuple)) else evt.index
    if row_index is None or row_index >= len(rows):
        return ""
    return str(rows[row_index][0])


async def save_stop_ui(token, stop_id, title, lat, lng, radius_m, pass_by):
    if not stop_id:
        return "Enter the id of the stop to save."
    payload = {"title": title, "lat": lat, "lng": lng, "radius_m": radius_m, "pass_by": bool(pass_by)}
    api_result = await call_admin_api("PUT", f"/stops/{stop_id}", token=token, payload=payload)
    if "error" in api_result:
        return f"Error: {api_result['error']}"
    return api_result.get("message") or "Stop saved"


async def move_stop_ui(token, tour_id, stop_id, direction):
    if not tour_id or not stop_id:
        return "Select a tour and enter a stop id."
    api_result = await call_admin_api("POST", f"/tours/{tour_id}/stops/{stop_id}/move", token=token,
                                      payload={"direction": direction})
    if "error" in api_result:
        return f"Error: {api_result['error']}"
    return api_result.get("message") or "Stop moved"


async def delete_stop_ui(token, stop_id):
    if not stop_id:
        return "Enter the id of the stop to delete."
    api_result = await call_admin_api("DELETE", f"/stops/{stop_id}", token=token)
    if "error" in api_result:
        return f"Error: {api_result['error']}"
    return api_result.get("message") or "Stop deleted"


def _media_endpoint(owner: str, owner_id: str, slot: str) -> str:
    return f"/tours/{owner_id}/media/{slot}" if owner == "tour" else f"/stops/{owner_id}/media/{slot}"


async def upload_media_ui(token, owner: str, owner_id: str, slot: str, file_path: Optional[str]):
    if not owner_id or not slot:
        return "Choose what the file belongs to."
    if not file_path:
        return "Choose a file to upload."
    api_result = await call_admin_api("PUT", _media_endpoint(owner, owner_id, slot), token=token,
                                      files=_file_part(file_path))
    if "error" in api_result:
        return f"Upload failed: {api_result['error']}"
    result = MediaUploadResult(**api_result["data"])
    return f"Uploaded: {result.url}"


async def delete_media_ui(token, owner: str, owner_id: str, slot: str):
    if not owner_id or not slot:
        return "Choose which media to delete."
    api_result = await call_admin_api("DELETE", _media_endpoint(owner, owner_id, slot), token=token)
    if "error" in api_result:
        return f"Delete failed: {api_result['error']}"
    return api_result.get("message") or "Media deleted"


async def stage_media_ui(token, tour_id: str, slot: str, file_path: Optional[str]):
    """Uploads audio/image for the stop being added; returns (message, url)."""
    if not tour_id:
        return "Select a tour.", ""
    if not file_path:
        return "Choose a file to upload.", ""
    api_result = await call_admin_api("POST", f"/tours/{tour_id}/staged-media/{slot}", token=token,
                                      files=_file_part(file_path))
    if "error" in api_result:
        return f"Upload failed: {api_result['error']}", ""
    url = api_result["data"]["url"]
    return f"Uploaded new-stop {slot}.", url


# --- Build Gradio Interface ---
with gr.Blocks(theme=gr.themes.Soft(), title="Tour Admin") as demo:
    gr.Markdown("# Tour Admin")
    session_token = gr.State(None)
    with gr.Tabs():
        with gr.TabItem("Sign in"):
            with gr.Row():
                email_input = gr.Textbox(label="Email"); password_input = gr.Textbox(label="Password", type="password")
            with gr.Row():
                login_button = gr.Button("Sign in", variant="primary"); logout_button = gr.Button("Logout")
            auth_status = gr.Markdown("Not signed in.")
        with gr.TabItem("Categories"):
            gr.Markdown("Categories are the top-level grouping users browse before tours.")
            refresh_categories_button = gr.Button("Refresh")
            categories_display = gr.Markdown()
            with gr.Row():
                new_category_name = gr.Textbox(label="New category name"); create_category_button = gr.Button("Create", variant="primary")
            with gr.Row():
                category_to_delete = gr.Dropdown(label="Category", choices=[]); delete_category_button = gr.Button("Delete category", variant="stop")
            category_status = gr.Markdown()
        with gr.TabItem("Tours"):
            refresh_tours_button = gr.Button("Refresh")
            tours_display = gr.Markdown()
            with gr.Accordion("New tour", open=False):
                new_tour_title = gr.Textbox(label="Title", placeholder="Lobster Tour"); new_tour_city = gr.Textbox(label="City", placeholder="Portland")
                new_tour_published = gr.Checkbox(label="Published", value=True); create_tour_button = gr.Button("Create Tour", variant="primary")
                new_tour_status = gr.Markdown()
        with gr.TabItem("Tour editor"):
            with gr.Row():
                tour_selector = gr.Dropdown(label="Tour", choices=[]); load_tour_button = gr.Button("Load")
            editor_status = gr.Markdown()
            with gr.Row():
                tour_title = gr.Textbox(label="Title"); tour_city = gr.Textbox(label="City")
                tour_published = gr.Checkbox(label="Published"); tour_category = gr.Dropdown(label="Category", choices=[], allow_custom_value=True)
            with gr.Row():
                start_color = gr.ColorPicker(label="Start touring button", value=FALLBACK_BUTTON_COLOR)
                highlights_color = gr.ColorPicker(label="Highlights button", value=FALLBACK_BUTTON_COLOR)
                map_color = gr.ColorPicker(label="Map button", value=FALLBACK_BUTTON_COLOR)
                where_starts_color = gr.ColorPicker(label="Where it starts button", value=FALLBACK_BUTTON_COLOR)
            with gr.Row():
                clear_start_button = gr.Button("Clear start color", size="sm"); clear_highlights_button = gr.Button("Clear highlights color", size="sm")
                clear_map_button = gr.Button("Clear map color", size="sm"); clear_where_starts_button = gr.Button("Clear where-it-starts color", size="sm")
            # Stored hex values; None means no color is saved
            start_hex = gr.State(None); highlights_hex = gr.State(None); map_hex = gr.State(None); where_starts_hex = gr.State(None)
            with gr.Row():
                save_tour_button = gr.Button("Save tour", variant="primary")
                confirm_delete_tour = gr.Checkbox(label="Yes, delete this tour and all its stops")
                delete_tour_button = gr.Button("Delete tour", variant="stop")
            media_display = gr.Markdown()
            stops_table = gr.Dataframe(headers=STOP_TABLE_HEADERS, interactive=False, label="Stops")
            with gr.Accordion("Add stop", open=False):
                with gr.Row():
                    new_stop_title = gr.Textbox(label="Title"); new_stop_lat = gr.Textbox(label="Latitude"); new_stop_lng = gr.Textbox(label="Longitude")
                    new_stop_radius = gr.Number(label="Radius (m)", value=settings.DEFAULT_STOP_RADIUS_M); new_stop_pass_by = gr.Checkbox(label="Pass-by")
                with gr.Row():
                    staged_audio_file = gr.File(label="Stop audio", type="filepath"); staged_image_file = gr.File(label="Stop image", type="filepath")
                staged_audio_url = gr.Textbox(label="Staged audio URL", interactive=False); staged_image_url = gr.Textbox(label="Staged image URL", interactive=False)
                add_stop_button = gr.Button("Add stop", variant="primary")
            with gr.Accordion("Edit stop", open=False):
                with gr.Row():
                    edit_stop_id = gr.Textbox(label="Stop id"); load_stop_button = gr.Button("Load stop"); edit_stop_title = gr.Textbox(label="Title")
                    edit_stop_lat = gr.Textbox(label="Latitude"); edit_stop_lng = gr.Textbox(label="Longitude")
                    edit_stop_radius = gr.Number(label="Radius (m)", value=settings.DEFAULT_STOP_RADIUS_M); edit_stop_pass_by = gr.Checkbox(label="Pass-by")
                with gr.Row():
                    save_stop_button = gr.Button("Save stop", variant="primary"); move_up_button = gr.Button("Move up")
                    move_down_button = gr.Button("Move down"); delete_stop_button = gr.Button("Delete stop", variant="stop")
            with gr.Accordion("Media", open=False):
                with gr.Row():
                    media_owner = gr.Radio(label="Belongs to", choices=["tour", "stop"], value="tour")
                    media_stop_id = gr.Textbox(label="Stop id (for stop media)")
                    media_slot = gr.Dropdown(label="Slot", choices=TOUR_MEDIA_CHOICES + STOP_MEDIA_CHOICES)
                media_file = gr.File(label="File", type="filepath")
                with gr.Row():
                    upload_media_button = gr.Button("Upload", variant="primary"); delete_media_button = gr.Button("Delete", variant="stop")
            stop_status = gr.Markdown()

    # --- Connect UI elements to functions ---
    editor_outputs = [editor_status, tour_title, tour_city, tour_published, tour_category, start_color,
                      highlights_color, map_color, where_starts_color, stops_table, media_display,
                      start_hex, highlights_hex, map_hex, where_starts_hex]

    login_button.click(login_ui, inputs=[email_input, password_input], outputs=[auth_status, session_token])
    logout_button.click(logout_ui, inputs=[session_token], outputs=[auth_status, session_token])

    async def refresh_categories(token):
        listing, choices = await load_categories_ui(token)
        return listing, choices, choices
    refresh_categories_button.click(refresh_categories, inputs=[session_token], outputs=[categories_display, category_to_delete, tour_category])
    create_category_button.click(create_category_ui, inputs=[session_token, new_category_name], outputs=[category_status])
    delete_category_button.click(delete_category_ui, inputs=[session_token, category_to_delete], outputs=[category_status])

    refresh_tours_button.click(load_tours_ui, inputs=[session_token], outputs=[tours_display, tour_selector])
    async def create_tour_wrapper(token, title, city, is_published):
        message, _ = await create_tour_ui(token, title, city, is_published)
        return message
    create_tour_button.click(create_tour_wrapper, inputs=[session_token, new_tour_title, new_tour_city, new_tour_published], outputs=[new_tour_status])

    load_tour_button.click(load_tour_ui, inputs=[session_token, tour_selector], outputs=editor_outputs)
    save_tour_button.click(save_tour_ui, inputs=[session_token, tour_selector, tour_title, tour_city, tour_published, tour_category,
                                                 start_hex, highlights_hex, map_hex, where_starts_hex], outputs=[editor_status])
    for picker, stored, clear_button in ((start_color, start_hex, clear_start_button), (highlights_color, highlights_hex, clear_highlights_button),
                                         (map_color, map_hex, clear_map_button), (where_starts_color, where_starts_hex, clear_where_starts_button)):
        picker.input(pick_color_ui, inputs=[picker], outputs=[stored])
        clear_button.click(clear_color_ui, outputs=[picker, stored])
    delete_tour_button.click(delete_tour_ui, inputs=[session_token, tour_selector, confirm_delete_tour], outputs=[editor_status])

    async def stage_audio(token, tour_id, path):
        return await stage_media_ui(token, tour_id, "audio", path)
    async def stage_image(token, tour_id, path):
        return await stage_media_ui(token, tour_id, "image", path)
    staged_audio_file.upload(stage_audio, inputs=[session_token, tour_selector, staged_audio_file], outputs=[stop_status, staged_audio_url])
    staged_image_file.upload(stage_image, inputs=[session_token, tour_selector, staged_image_file], outputs=[stop_status, staged_image_url])
    add_stop_button.click(add_stop_ui, inputs=[session_token, tour_selector, new_stop_title, new_stop_lat, new_stop_lng, new_stop_radius,
                                               new_stop_pass_by, staged_audio_url, staged_image_url], outputs=[stop_status])
    save_stop_button.click(save_stop_ui, inputs=[session_token, edit_stop_id, edit_stop_title, edit_stop_lat, edit_stop_lng,
                                                 edit_stop_radius, edit_stop_pass_by], outputs=[stop_status])
    async def move_up(token, tour_id, stop_id):
        return await move_stop_ui(token, tour_id, stop_id, "up")
    async def move_down(token, tour_id, stop_id):
        return await move_stop_ui(token, tour_id, stop_id, "down")
    move_up_button.click(move_up, inputs=[session_token, tour_selector, edit_stop_id], outputs=[stop_status])
    move_down_button.click(move_down, inputs=[session_token, tour_selector, edit_stop_id], outputs=[stop_status])
    delete_stop_button.click(delete_stop_ui, inputs=[session_token, edit_stop_id], outputs=[stop_status])
    edit_stop_outputs = [stop_status, edit_stop_title, edit_stop_lat, edit_stop_lng, edit_stop_radius, edit_stop_pass_by]
    load_stop_button.click(load_stop_ui, inputs=[session_token, edit_stop_id], outputs=edit_stop_outputs)
    def select_stop(table, evt: gr.SelectData):
        stop_id = select_stop_row(table, evt)
        return stop_id, stop_id
    stops_table.select(select_stop, inputs=[stops_table], outputs=[edit_stop_id, media_stop_id]).then(
        load_stop_ui, inputs=[session_token, edit_stop_id], outputs=edit_stop_outputs)

    def _media_owner_id(owner, tour_id, stop_id):
        return tour_id if owner == "tour" else stop_id
    async def upload_media_wrapper(token, owner, tour_id, stop_id, slot, path):
        return await upload_media_ui(token, owner, _media_owner_id(owner, tour_id, stop_id), slot, path)
    async def delete_media_wrapper(token, owner, tour_id, stop_id, slot):
        return await delete_media_ui(token, owner, _media_owner_id(owner, tour_id, stop_id), slot)
    upload_media_button.click(upload_media_wrapper, inputs=[session_token, media_owner, tour_selector, media_stop_id, media_slot, media_file], outputs=[stop_status])
    delete_media_button.click(delete_media_wrapper, inputs=[session_token, media_owner, tour_selector, media_stop_id, media_slot], outputs=[stop_status])


# --- Mount Gradio app within FastAPI ---
app = fastapi.FastAPI()
@app.get("/")
async def root():
    return {"message": "Tour Admin UI Service is running. Access the Gradio interface at /ui"}
app = gr.mount_gradio_app(app, demo, path="/ui")
logger.info("UI Service Ready. Gradio interface available at /ui")
