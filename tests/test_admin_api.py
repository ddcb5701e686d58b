import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch, AsyncMock, MagicMock

from services.admin_api.app.main import (
    app, get_db_client, get_auth_client, get_media_store, require_admin_session,
)
from core.exceptions import CategoryInUseError, MediaUploadError, RecordNotFoundError, DatastoreError
from core.models import Category, MediaUploadResult, Stop, Tour, TourSummary
from core.storage import MediaStore


@pytest.fixture
def db_client():
    return MagicMock()

@pytest.fixture
def media_store():
    store = MagicMock(spec=MediaStore)
    store.upload_media = AsyncMock()
    store.delete_media = AsyncMock()
    return store

@pytest.fixture
def client(db_client, media_store):
    original_overrides = app.dependency_overrides.copy()
    app.dependency_overrides[get_db_client] = lambda: db_client
    app.dependency_overrides[get_media_store] = lambda: media_store
    app.dependency_overrides[require_admin_session] = lambda: None
    with TestClient(app) as c:
        yield c
    app.dependency_overrides = original_overrides

@pytest.fixture
def unauthenticated_client(db_client):
    original_overrides = app.dependency_overrides.copy()
    app.dependency_overrides[get_db_client] = lambda: db_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides = original_overrides


# --- Meta ---

def test_health_check(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert "Admin API is running" in response.json()["message"]

def test_read_root(client: TestClient):
    response = client.get("/")
    assert response.json() == {"status": "success", "data": None, "message": "Welcome to the Tour Admin API"}


# --- Auth ---

def test_login_returns_session_tokens(client: TestClient):
    auth_client = MagicMock()
    auth_client.auth.sign_in_with_password.return_value = MagicMock(
        session=MagicMock(access_token="jwt-123", refresh_token="r-1"),
        user=MagicMock(id="u1", email="admin@example.com"),
    )
    app.dependency_overrides[get_auth_client] = lambda: auth_client

    response = client.post("/auth/login", json={"email": "  admin@example.com ", "password": "pw"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["access_token"] == "jwt-123"
    assert data["user_id"] == "u1"
    auth_client.auth.sign_in_with_password.assert_called_once_with({"email": "admin@example.com", "password": "pw"})

def test_login_with_bad_credentials(client: TestClient):
    auth_client = MagicMock()
    auth_client.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")
    app.dependency_overrides[get_auth_client] = lambda: auth_client

    response = client.post("/auth/login", json={"email": "admin@example.com", "password": "wrong"})

    assert response.status_code == 401
    assert "Invalid login credentials" in response.json()["detail"]

def test_routes_require_bearer_token(unauthenticated_client: TestClient):
    response = unauthenticated_client.get("/categories/")
    assert response.status_code == 401

def test_valid_token_is_accepted(unauthenticated_client: TestClient):
    auth_client = MagicMock()
    auth_client.auth.get_user.return_value = MagicMock(user=MagicMock(id="u1", email="admin@example.com"))
    app.state.auth_client = auth_client

    with patch("services.admin_api.app.crud.list_categories", new_callable=AsyncMock) as mock_list:
        mock_list.return_value = []
        response = unauthenticated_client.get("/categories/", headers={"Authorization": "Bearer jwt-123"})

    assert response.status_code == 200
    auth_client.auth.get_user.assert_called_once_with("jwt-123")

def test_rejected_token(unauthenticated_client: TestClient):
    auth_client = MagicMock()
    auth_client.auth.get_user.side_effect = Exception("invalid JWT")
    app.state.auth_client = auth_client

    response = unauthenticated_client.get("/tours/", headers={"Authorization": "Bearer expired"})

    assert response.status_code == 401


# --- Categories ---

def test_list_categories(client: TestClient, db_client):
    categories = [Category(id="c1", name="Food"), Category(id="c2", name="History")]
    with patch("services.admin_api.app.crud.list_categories", new_callable=AsyncMock) as mock_list:
        mock_list.return_value = categories
        response = client.get("/categories/")

    assert response.status_code == 200
    assert [c["name"] for c in response.json()["data"]] == ["Food", "History"]
    mock_list.assert_called_once_with(db_client)

def test_create_category_requires_name(client: TestClient):
    response = client.post("/categories/", json={"name": "   "})
    assert response.status_code == 422

def test_delete_category_in_use(client: TestClient):
    with patch("services.admin_api.app.crud.delete_category", new_callable=AsyncMock) as mock_delete:
        mock_delete.side_effect = CategoryInUseError("c1", 3)
        response = client.delete("/categories/c1")

    assert response.status_code == 409
    assert "This category has 3 tour(s)" in response.json()["detail"]


# --- Tours ---

def test_list_tours(client: TestClient):
    with patch("services.admin_api.app.crud.list_tours", new_callable=AsyncMock) as mock_list:
        mock_list.return_value = [TourSummary(id="T1", title="Harbor", is_published=False)]
        response = client.get("/tours/")

    assert response.json()["data"][0]["title"] == "Harbor"

def test_create_tour(client: TestClient, db_client):
    with patch("services.admin_api.app.crud.create_tour", new_callable=AsyncMock) as mock_create:
        mock_create.return_value = "T9"
        response = client.post("/tours/", json={"title": "Lobster Tour", "city": "Portland"})

    assert response.status_code == 201
    assert response.json()["data"] == {"id": "T9"}
    sent = mock_create.call_args.args[1]
    assert sent.is_published is True

def test_create_tour_without_title(client: TestClient):
    response = client.post("/tours/", json={"title": "  "})
    assert response.status_code == 422

def test_get_missing_tour(client: TestClient):
    with patch("services.admin_api.app.crud.get_tour_detail", new_callable=AsyncMock) as mock_get:
        mock_get.side_effect = RecordNotFoundError("tours", "nope")
        response = client.get("/tours/nope")

    assert response.status_code == 404

def test_update_tour_datastore_failure(client: TestClient):
    with patch("services.admin_api.app.crud.update_tour", new_callable=AsyncMock) as mock_update:
        mock_update.side_effect = DatastoreError("Failed to save tour: permission denied")
        response = client.put("/tours/T1", json={"title": "Harbor", "is_published": True})

    assert response.status_code == 502
    assert "permission denied" in response.json()["detail"]


# --- Stops ---

def test_add_stop_rejects_non_numeric_latitude(client: TestClient):
    response = client.post("/tours/T1/stops", json={"title": "Pier", "lat": "north", "lng": "-70.2"})
    assert response.status_code == 422

def test_add_stop(client: TestClient):
    with patch("services.admin_api.app.crud.create_stop", new_callable=AsyncMock) as mock_create:
        mock_create.return_value = Stop(id="S1", tour_id="T1", title="Pier", lat=43.6, lng=-70.2, radius_m=75, sort_order=0)
        response = client.post("/tours/T1/stops", json={"title": "Pier", "lat": "43.6", "lng": -70.2})

    assert response.status_code == 201
    sent = mock_create.call_args.args[2]
    assert sent.lat == 43.6 and sent.radius_m == 75

def test_move_stop_at_top(client: TestClient):
    with patch("services.admin_api.app.crud.move_stop", new_callable=AsyncMock) as mock_move, \
         patch("services.admin_api.app.crud.list_stops", new_callable=AsyncMock) as mock_list:
        mock_move.return_value = False
        mock_list.return_value = []
        response = client.post("/tours/T1/stops/S1/move", json={"direction": "up"})

    assert response.status_code == 200
    assert response.json()["message"] == "Stop is already at the top"

def test_move_stop_invalid_direction(client: TestClient):
    response = client.post("/tours/T1/stops/S1/move", json={"direction": "sideways"})
    assert response.status_code == 422


# --- Media ---

def test_upload_tour_intro_audio(client: TestClient, media_store):
    media_store.upload_media.return_value = MediaUploadResult(
        slot="tour_intro_audio", bucket="tour-audio", path="tours/T1/intro/x.mp3",
        url="https://proj.supabase.co/storage/v1/object/public/tour-audio/tours/T1/intro/x.mp3",
    )

    response = client.put("/tours/T1/media/intro_audio", files={"file": ("intro.mp3", b"ID3audio", "audio/mpeg")})

    assert response.status_code == 200
    assert response.json()["data"]["path"] == "tours/T1/intro/x.mp3"
    media_store.upload_media.assert_awaited_once_with("tour_intro_audio", "T1", "intro.mp3", b"ID3audio", "audio/mpeg")

def test_upload_unknown_slot(client: TestClient, media_store):
    response = client.put("/tours/T1/media/video", files={"file": ("a.mp4", b"x", "video/mp4")})
    assert response.status_code == 404
    media_store.upload_media.assert_not_called()

def test_upload_empty_file(client: TestClient, media_store):
    response = client.put("/stops/S1/media/image", files={"file": ("a.jpg", b"", "image/jpeg")})
    assert response.status_code == 400
    media_store.upload_media.assert_not_called()

def test_upload_storage_failure(client: TestClient, media_store):
    media_store.upload_media.side_effect = MediaUploadError("Failed to upload image file: bucket not found")
    response = client.put("/stops/S1/media/image", files={"file": ("a.jpg", b"jpg", "image/jpeg")})
    assert response.status_code == 502

def test_delete_stop_audio_uses_stored_url(client: TestClient, media_store):
    url = "https://proj.supabase.co/storage/v1/object/public/tour-audio/stops/S1/audio/a.mp3"
    media_store.delete_media.return_value = False
    with patch("services.admin_api.app.crud.get_stop", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = Stop(id="S1", tour_id="T1", audio_url=url)
        response = client.delete("/stops/S1/media/audio")

    assert response.status_code == 200
    assert response.json()["data"] == {"removed_from_storage": False}
    media_store.delete_media.assert_awaited_once_with("stop_audio", "S1", url)

def test_delete_tour_media_without_pointer_is_noop(client: TestClient, media_store):
    with patch("services.admin_api.app.crud.get_tour", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = Tour(id="T1", cover_image_url=None)
        response = client.delete("/tours/T1/media/cover_image")

    assert response.status_code == 200
    assert response.json()["message"] == "Nothing to delete"
    media_store.delete_media.assert_not_called()

def test_staged_stop_image_upload(client: TestClient, media_store):
    media_store.upload_media.return_value = MediaUploadResult(
        slot="staged_stop_image", bucket="tour-audio", path="tours/T1/new-stop/images/x.png",
        url="https://proj.supabase.co/storage/v1/object/public/tour-audio/tours/T1/new-stop/images/x.png",
    )

    response = client.post("/tours/T1/staged-media/image", files={"file": ("x.png", b"png", "image/png")})

    assert response.status_code == 201
    media_store.upload_media.assert_awaited_once_with("staged_stop_image", "T1", "x.png", b"png", "image/png")

def test_update_tour_requires_published_flag(client: TestClient):
    with patch("services.admin_api.app.crud.update_tour", new_callable=AsyncMock) as mock_update:
        response = client.put("/tours/T1", json={"title": "Harbor"})

    assert response.status_code == 422
    mock_update.assert_not_called()

def test_generic_content_type_uses_slot_default(client: TestClient, media_store):
    media_store.upload_media.return_value = MediaUploadResult(
        slot="stop_audio", bucket="tour-audio", path="stops/S1/audio/x.mp3",
        url="https://proj.supabase.co/storage/v1/object/public/tour-audio/stops/S1/audio/x.mp3",
    )

    response = client.put("/stops/S1/media/audio", files={"file": ("walk", b"audio", "application/octet-stream")})

    assert response.status_code == 200
    media_store.upload_media.assert_awaited_once_with("stop_audio", "S1", "walk", b"audio", None)
