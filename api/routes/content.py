"""
Content Routes

Raw upload/fetch/pin passthrough for content not tied to a stage:
- POST   /api/v1/ipfs/upload
- GET    /api/v1/ipfs/get/{cid}
- POST   /api/v1/ipfs/pin/{cid}
- DELETE /api/v1/ipfs/pin/{cid}
- GET    /api/v1/ipfs/pin/{cid}
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from api.deps import get_content_service
from api.models.requests import IpfsUploadRequest
from core.schemas.records import ContentRecord, PinStatus, UploadReceipt
from orchestrator.content import ContentService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/ipfs", tags=["content"])


@router.post("/upload", response_model=UploadReceipt, status_code=status.HTTP_201_CREATED)
def upload(
    body: IpfsUploadRequest,
    content: ContentService = Depends(get_content_service),
) -> UploadReceipt:
    logger.debug("Uploading generic data")
    return content.upload(body.data, pin=body.pin)


@router.get("/get/{cid}", response_model=ContentRecord)
def get_content(cid: str, content: ContentService = Depends(get_content_service)) -> ContentRecord:
    logger.debug(f"Fetching content: {cid}")
    return content.fetch(cid)


@router.post("/pin/{cid}", response_model=PinStatus)
def pin(cid: str, content: ContentService = Depends(get_content_service)) -> PinStatus:
    return content.pin(cid)


@router.delete("/pin/{cid}", response_model=PinStatus)
def unpin(cid: str, content: ContentService = Depends(get_content_service)) -> PinStatus:
    return content.unpin(cid)


@router.get("/pin/{cid}", response_model=PinStatus)
def pin_status(cid: str, content: ContentService = Depends(get_content_service)) -> PinStatus:
    return content.pin_status(cid)
