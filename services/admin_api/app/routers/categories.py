# services/admin_api/app/routers/categories.py
from fastapi import APIRouter, Body, Depends
from core.models import CategoryCreate, AdminResponse
from core.exceptions import TourAdminError
import logging

from .. import crud
from ..main import get_db_client, require_admin_session, to_http_exception

logger = logging.getLogger("TourAdmin_Core").getChild("AdminAPI").getChild("CategoryRouter")

router = APIRouter(dependencies=[Depends(require_admin_session)])


@router.get("/", response_model=AdminResponse)
async def list_categories(db_client=Depends(get_db_client)):
    try:
        categories = await crud.list_categories(db_client)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", data=categories)


@router.post("/", response_model=AdminResponse, status_code=201)
async def create_category(
    db_client=Depends(get_db_client),
    payload: CategoryCreate = Body(...)
):
    logger.info(f"Creating category '{payload.name}'")
    try:
        category = await crud.create_category(db_client, payload)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", data=category, message="Category created")


@router.delete("/{category_id}", response_model=AdminResponse)
async def delete_category(category_id: str, db_client=Depends(get_db_client)):
    logger.info(f"Deleting category {category_id}")
    try:
        await crud.delete_category(db_client, category_id)
    except TourAdminError as e:
        raise to_http_exception(e)
    return AdminResponse(status="success", message="Category deleted")
