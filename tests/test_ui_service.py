import pytest
import httpx
from unittest.mock import patch, AsyncMock, MagicMock

from services.ui_service.app import main as ui


def tour_payload(**overrides):
    data = {
        "id": "T1", "title": "Harbor Walk", "city": "Portland", "is_published": True,
        "category_id": "c1", "category_name": "Waterfront",
        "start_touring_color_hex": "#FF785A", "highlights_button_color_hex": "bad",
        "map_button_color_hex": None, "where_starts_button_color_hex": "00aa11",
        "intro_audio_url": "https://proj.supabase.co/storage/v1/object/public/tour-audio/tours/T1/intro/a.mp3",
        "stops": [
            {"id": "S1", "tour_id": "T1", "title": "Pier", "lat": 43.65, "lng": -70.25, "radius_m": 75,
             "pass_by": False, "sort_order": 0, "audio_url": "https://x/a.mp3", "image_url": None},
        ],
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_login_ui_returns_token():
    with patch.object(ui, "call_admin_api", new_callable=AsyncMock) as mock_call:
        mock_call.return_value = {"data": {"access_token": "jwt-1", "email": "admin@example.com"}, "message": "Signed in"}
        message, token = await ui.login_ui("admin@example.com", "pw")

    assert token == "jwt-1"
    assert "admin@example.com" in message
    mock_call.assert_awaited_once_with("POST", "/auth/login", payload={"email": "admin@example.com", "password": "pw"})

@pytest.mark.asyncio
async def test_login_ui_failure_keeps_signed_out():
    with patch.object(ui, "call_admin_api", new_callable=AsyncMock) as mock_call:
        mock_call.return_value = {"error": "Invalid login credentials"}
        message, token = await ui.login_ui("admin@example.com", "wrong")

    assert token is None
    assert "Invalid login credentials" in message

@pytest.mark.asyncio
async def test_load_tour_ui_fills_editor():
    with patch.object(ui, "call_admin_api", new_callable=AsyncMock) as mock_call:
        mock_call.return_value = {"data": tour_payload(), "message": None}
        result = await ui.load_tour_ui("jwt-1", "T1")

    (status, title, city, published, category_id, start, highlights, map_hex, where_starts, rows, media,
     *stored_colors) = result
    assert "Harbor Walk" in status and "Waterfront" in status
    assert (title, city, published, category_id) == ("Harbor Walk", "Portland", True, "c1")
    assert start == "#FF785A"
    assert highlights == ui.FALLBACK_BUTTON_COLOR
    assert map_hex == ui.FALLBACK_BUTTON_COLOR
    assert where_starts == "#00AA11"
    assert rows[0][0] == "S1" and rows[0][7] == "yes"
    assert "tours/T1/intro/a.mp3" in media
    assert stored_colors == ["#FF785A", None, None, "#00AA11"]

@pytest.mark.asyncio
async def test_load_tour_ui_error_resets_editor():
    with patch.object(ui, "call_admin_api", new_callable=AsyncMock) as mock_call:
        mock_call.return_value = {"error": "Record T9 not found in tours"}
        result = await ui.load_tour_ui("jwt-1", "T9")

    assert len(result) == 15
    assert "not found" in result[0]
    assert result[5] == ui.FALLBACK_BUTTON_COLOR

@pytest.mark.asyncio
async def test_delete_tour_needs_confirmation():
    with patch.object(ui, "call_admin_api", new_callable=AsyncMock) as mock_call:
        message = await ui.delete_tour_ui("jwt-1", "T1", False)

    assert "confirmation" in message
    mock_call.assert_not_called()

@pytest.mark.asyncio
async def test_delete_category_in_use_surfaces_message():
    with patch.object(ui, "call_admin_api", new_callable=AsyncMock) as mock_call:
        mock_call.return_value = {"error": "This category has 2 tour(s). Move those tours to another category before deleting."}
        message = await ui.delete_category_ui("jwt-1", "c1")

    assert message.startswith("Error: This category has 2 tour(s)")

@pytest.mark.asyncio
async def test_stage_media_ui_returns_url(tmp_path):
    audio = tmp_path / "walk.mp3"
    audio.write_bytes(b"ID3")
    with patch.object(ui, "call_admin_api", new_callable=AsyncMock) as mock_call:
        mock_call.return_value = {"data": {"url": "https://x/tours/T1/new-stop/audio/u.mp3"}, "message": "Upload complete"}
        message, url = await ui.stage_media_ui("jwt-1", "T1", "audio", str(audio))

    assert url.endswith("/new-stop/audio/u.mp3")
    args, kwargs = mock_call.call_args
    assert args == ("POST", "/tours/T1/staged-media/audio")
    assert kwargs["files"]["file"] == ("walk.mp3", b"ID3", "audio/mpeg")

@pytest.mark.asyncio
async def test_upload_media_ui_routes_stop_slots(tmp_path):
    image = tmp_path / "pier.png"
    image.write_bytes(b"png")
    with patch.object(ui, "call_admin_api", new_callable=AsyncMock) as mock_call:
        mock_call.return_value = {"data": {"slot": "stop_image", "url": "https://x/p.png", "bucket": "tour-audio", "path": "stops/S1/images/p.png"}}
        message = await ui.upload_media_ui("jwt-1", "stop", "S1", "image", str(image))

    assert message == "Uploaded: https://x/p.png"
    assert mock_call.call_args.args == ("PUT", "/stops/S1/media/image")


# --- call_admin_api ---

@pytest.mark.asyncio
async def test_call_admin_api_flattens_validation_errors():
    request = httpx.Request("POST", "http://test/tours/T1/stops")
    response = httpx.Response(422, json={"detail": [{"msg": "Value error, Latitude must be a number"}]}, request=request)
    with patch.object(ui.api_client, "request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = response
        result = await ui.call_admin_api("POST", "/tours/T1/stops", token="jwt-1", payload={"title": "Pier", "lat": "x"})

    assert result == {"error": "Value error, Latitude must be a number"}
    assert mock_request.call_args.kwargs["headers"] == {"Authorization": "Bearer jwt-1"}

@pytest.mark.asyncio
async def test_call_admin_api_network_error():
    with patch.object(ui.api_client, "request", new_callable=AsyncMock) as mock_request:
        mock_request.side_effect = httpx.ConnectError("refused")
        result = await ui.call_admin_api("GET", "/tours/")

    assert "Cannot reach admin API" in result["error"]


# --- Button colors ---

@pytest.mark.asyncio
async def test_saving_loaded_tour_keeps_colors_unchanged():
    with patch.object(ui, "call_admin_api", new_callable=AsyncMock) as mock_call:
        mock_call.return_value = {"data": tour_payload(start_touring_color_hex=None, where_starts_button_color_hex=None,
                                                        map_button_color_hex="#123456"), "message": None}
        loaded = await ui.load_tour_ui("jwt-1", "T1")
        mock_call.return_value = {"data": None, "message": "Tour saved"}
        # The save button sends the stored values, not the picker fallbacks
        await ui.save_tour_ui("jwt-1", "T1", loaded[1], loaded[2], loaded[3], loaded[4], *loaded[11:15])

    payload = mock_call.call_args.kwargs["payload"]
    assert payload["start_touring_color_hex"] is None
    assert payload["highlights_button_color_hex"] is None
    assert payload["map_button_color_hex"] == "#123456"
    assert payload["where_starts_button_color_hex"] is None
    assert loaded[5] == ui.FALLBACK_BUTTON_COLOR

def test_picking_and_clearing_colors():
    assert ui.pick_color_ui("#abcdef") == "#ABCDEF"
    assert ui.clear_color_ui() == (ui.FALLBACK_BUTTON_COLOR, None)


# --- Edit stop form ---

@pytest.mark.asyncio
async def test_load_stop_ui_fills_edit_form():
    with patch.object(ui, "call_admin_api", new_callable=AsyncMock) as mock_call:
        mock_call.return_value = {"data": {"id": "S1", "tour_id": "T1", "title": "Pier", "lat": 43.65, "lng": -70.25,
                                           "radius_m": 40, "pass_by": None, "sort_order": None}, "message": None}
        message, title, lat, lng, radius, pass_by = await ui.load_stop_ui("jwt-1", " S1 ")

    assert (title, lat, lng, radius, pass_by) == ("Pier", "43.65", "-70.25", 40, False)
    assert "Pier" in message
    mock_call.assert_awaited_once_with("GET", "/stops/S1", token="jwt-1")

@pytest.mark.asyncio
async def test_load_stop_ui_without_id_does_not_call_api():
    with patch.object(ui, "call_admin_api", new_callable=AsyncMock) as mock_call:
        result = await ui.load_stop_ui("jwt-1", "")

    assert result[0] == "Enter or select a stop id."
    mock_call.assert_not_called()

def test_select_stop_row_returns_row_id():
    rows = [["S1", 0, "Pier"], ["S2", 1, "Lighthouse"]]
    evt = MagicMock(index=[1, 2])
    assert ui.select_stop_row(rows, evt) == "S2"
