from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from typing import List, Optional
import logging
from starlette.concurrency import run_in_threadpool

from src.core.dependencies import get_video_store
from src.database.schemas.metadata import LibraryStats, UpdateVideoPayload, VideoRecord, VideoUpload
from src.services.video_store import VideoStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[VideoRecord], response_model_by_alias=True)
def list_videos(q: Optional[str] = None, store: VideoStore = Depends(get_video_store)):
    return store.list(search=q)


@router.get("/stats", response_model=LibraryStats, response_model_by_alias=True)
def library_stats(store: VideoStore = Depends(get_video_store)):
    return store.stats()


@router.get("/{video_id}", response_model=VideoRecord, response_model_by_alias=True)
def get_video(video_id: str, store: VideoStore = Depends(get_video_store)):
    return store.get(video_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=VideoRecord,
    response_model_by_alias=True,
)
async def upload_video(
    file: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    store: VideoStore = Depends(get_video_store),
):
    upload = None
    if file is not None:
        upload = VideoUpload(
            file_name=file.filename or "",
            content=await file.read(),
            content_type=file.content_type,
        )
        logger.info("Received upload %s (%d bytes)", upload.file_name, upload.size)

    # the store talks to S3 synchronously, keep it off the event loop
    return await run_in_threadpool(
        store.create,
        upload,
        title=title,
        description=description,
        tags=tags,
    )


@router.patch("/{video_id}", response_model=VideoRecord, response_model_by_alias=True)
def update_video(video_id: str, payload: UpdateVideoPayload, store: VideoStore = Depends(get_video_store)):
    return store.update(video_id, payload)


@router.delete("/{video_id}")
def delete_video(video_id: str, store: VideoStore = Depends(get_video_store)):
    store.delete(video_id)
    return {"success": True}
