# services/admin_api/app/routers/stops.py
from fastapi import APIRouter, Body, Depends
from core.models import StopUpdate, AdminResponse
from core.exceptions import TourAdminError
import logging

from .. import crud
from ..main import get_db_client, require_admin_session, to_http_exception

logger = logging.getLogger("TourAdmin_Core").getChild("AdminAPI").getChild("StopRouter")

router = APIRouter(dependencies=[Depends(require_admin_session)])


@router.get("/{stop_id}", response_model=AdminResponse)
async def get_stop(stop_id: str, db_client=Depends(get_db_client)):
    try:
        stop = await crud.get_stop(db_client, stop_id)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", data=stop)


@router.put("/{stop_id}", response_model=AdminResponse)
async def update_stop(
    stop_id: str,
    db_client=Depends(get_db_client),
    payload: StopUpdate = Body(...)
):
    logger.info(f"Saving stop {stop_id}")
    try:
        await crud.update_stop(db_client, stop_id, payload)
        stop = await crud.get_stop(db_client, stop_id)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", data=stop, message="Stop saved")


@router.delete("/{stop_id}", response_model=AdminResponse)
async def delete_stop(stop_id: str, db_client=Depends(get_db_client)):
    logger.info(f"Deleting stop {stop_id}")
    try:
        await crud.delete_stop(db_client, stop_id)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", message="Stop deleted")
