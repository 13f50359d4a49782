"""
Inspection API Routes

Endpoints for the inspection record lifecycle (all scoped to the caller):
- GET / - List the caller's inspections
- POST / - Create an inspection (Draft unless stated otherwise)
- POST /temp/upload - Upload a photo to the image host
- GET /{inspection_id} - Get one inspection
- PUT /{inspection_id} - Shallow-merge top-level fields
- DELETE /{inspection_id} - Delete an inspection
- GET /{inspection_id}/report - Download the PDF report
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from pdc_pro.adapters.image_host_adapter_interface import ImageHostAdapterInterface
from pdc_pro.core.config import settings
from pdc_pro.core.dependencies import get_current_user, get_image_uploader
from pdc_pro.core.exceptions import ImageUploadError
from pdc_pro.models.user import User
from pdc_pro.schemas.inspection import (
    ImageUploadResponseSchema,
    InspectionEnvelopeSchema,
    InspectionListSchema,
    InspectionPayloadSchema,
    MessageSchema
)
from pdc_pro.services.inspection_service import get_inspection_service
from pdc_pro.services.report_service import generate_inspection_report

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = "Inspection not found"


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)


@router.get(
    "",
    response_model=InspectionListSchema,
    summary="List inspections",
    description="All inspections of the current user, in storage order."
)
async def list_inspections(current_user: User = Depends(get_current_user)):
    service = get_inspection_service()
    inspections = await service.list_inspections(str(current_user.id))
    if inspections is None:
        raise _not_found()
    return {"inspections": inspections}


@router.post(
    "",
    response_model=InspectionEnvelopeSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create inspection",
    description="Create an inspection from the supplied fields over defaults. Status defaults to Draft."
)
async def create_inspection(
    payload: InspectionPayloadSchema,
    current_user: User = Depends(get_current_user)
):
    service = get_inspection_service()
    inspection = await service.create_inspection(str(current_user.id), payload)
    if not inspection:
        raise _not_found()
    return {"inspection": inspection}


@router.post(
    "/temp/upload",
    response_model=ImageUploadResponseSchema,
    summary="Upload photo",
    description="Send an image to the image host (bounded to 800x600, good quality) and return its public URL."
)
async def upload_image(
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    uploader: ImageHostAdapterInterface = Depends(get_image_uploader)
):
    if image is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only image uploads are accepted")

    data = await image.read(settings.MAX_UPLOAD_BYTES + 1)
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Image too large")

    try:
        url = await uploader.upload(data, content_type, image.filename or "image")
    except ImageUploadError as e:
        logger.error(f"Image upload failed for user {current_user.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Image upload failed"
        )

    return {"imageUrl": url}


@router.get(
    "/{inspection_id}",
    response_model=InspectionEnvelopeSchema,
    summary="Get inspection"
)
async def get_inspection(
    inspection_id: str,
    current_user: User = Depends(get_current_user)
):
    service = get_inspection_service()
    inspection = await service.get_inspection(str(current_user.id), inspection_id)
    if not inspection:
        raise _not_found()
    return {"inspection": inspection}


@router.put(
    "/{inspection_id}",
    response_model=InspectionEnvelopeSchema,
    summary="Update inspection",
    description="Replace each supplied top-level field wholesale and refresh updatedAt. Used by autosave and completion."
)
async def update_inspection(
    inspection_id: str,
    payload: InspectionPayloadSchema,
    current_user: User = Depends(get_current_user)
):
    service = get_inspection_service()
    inspection = await service.update_inspection(str(current_user.id), inspection_id, payload)
    if not inspection:
        raise _not_found()
    return {"inspection": inspection}


@router.delete(
    "/{inspection_id}",
    response_model=MessageSchema,
    summary="Delete inspection"
)
async def delete_inspection(
    inspection_id: str,
    current_user: User = Depends(get_current_user)
):
    service = get_inspection_service()
    if not await service.delete_inspection(str(current_user.id), inspection_id):
        raise _not_found()
    return {"message": "Inspection deleted successfully"}


@router.get(
    "/{inspection_id}/report",
    summary="Download report",
    description="Render the inspection as a paginated A4 PDF.",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}}
)
async def download_report(
    inspection_id: str,
    current_user: User = Depends(get_current_user)
):
    service = get_inspection_service()
    inspection = await service.get_inspection_model(str(current_user.id), inspection_id)
    if not inspection:
        raise _not_found()

    filename, pdf = await generate_inspection_report(inspection)
    # Header values must stay latin-1
    filename = filename.encode("ascii", "ignore").decode("ascii")
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
