# services/admin_api/app/routers/tours.py
from fastapi import APIRouter, Body, Depends
from core.models import TourCreate, TourUpdate, StopCreate, StopMoveRequest, AdminResponse
from core.exceptions import TourAdminError
import logging

from .. import crud
from ..main import get_db_client, require_admin_session, to_http_exception

logger = logging.getLogger("TourAdmin_Core").getChild("AdminAPI").getChild("TourRouter")

router = APIRouter(dependencies=[Depends(require_admin_session)])


@router.get("/", response_model=AdminResponse)
async def list_tours(db_client=Depends(get_db_client)):
    try:
        tours = await crud.list_tours(db_client)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", data=tours)


@router.post("/", response_model=AdminResponse, status_code=201)
async def create_tour(
    db_client=Depends(get_db_client),
    payload: TourCreate = Body(...)
):
    logger.info(f"Creating tour '{payload.title}' (city={payload.city}, published={payload.is_published})")
    try:
        tour_id = await crud.create_tour(db_client, payload)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", data={"id": tour_id}, message="Tour created")


@router.get("/{tour_id}", response_model=AdminResponse)
async def get_tour(tour_id: str, db_client=Depends(get_db_client)):
    try:
        tour = await crud.get_tour_detail(db_client, tour_id)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", data=tour)


@router.put("/{tour_id}", response_model=AdminResponse)
async def update_tour(
    tour_id: str,
    db_client=Depends(get_db_client),
    payload: TourUpdate = Body(...)
):
    logger.info(f"Saving tour {tour_id}")
    try:
        await crud.update_tour(db_client, tour_id, payload)
        tour = await crud.get_tour_detail(db_client, tour_id)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", data=tour, message="Tour saved")


@router.delete("/{tour_id}", response_model=AdminResponse)
async def delete_tour(tour_id: str, db_client=Depends(get_db_client)):
    logger.info(f"Deleting tour {tour_id} and its stops")
    try:
        await crud.delete_tour(db_client, tour_id)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", message="Tour deleted")


# --- Stops of a tour ---

@router.get("/{tour_id}/stops", response_model=AdminResponse)
async def list_stops(tour_id: str, db_client=Depends(get_db_client)):
    try:
        stops = await crud.list_stops(db_client, tour_id)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", data=stops)


@router.post("/{tour_id}/stops", response_model=AdminResponse, status_code=201)
async def add_stop(
    tour_id: str,
    db_client=Depends(get_db_client),
    payload: StopCreate = Body(...)
):
    logger.info(f"Adding stop '{payload.title}' to tour {tour_id}")
    try:
        stop = await crud.create_stop(db_client, tour_id, payload)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", data=stop, message="Stop added")


@router.post("/{tour_id}/stops/{stop_id}/move", response_model=AdminResponse)
async def move_stop(
    tour_id: str,
    stop_id: str,
    db_client=Depends(get_db_client),
    payload: StopMoveRequest = Body(...)
):
    try:
        moved = await crud.move_stop(db_client, tour_id, stop_id, payload.direction)
        stops = await crud.list_stops(db_client, tour_id)
    except TourAdminError as e:
        raise to_http_exception(e)
    message = f"Stop moved {payload.direction}" if moved else f"Stop is already at the {'top' if payload.direction == 'up' else 'bottom'}"
    return AdminResponse(status="success", data=stops, message=message)
