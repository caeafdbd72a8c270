from functools import lru_cache

from src.core.config import settings
from src.services.video_store import VideoStore
from src.storage.object_store import ObjectStore


@lru_cache
def get_object_store() -> ObjectStore:
    return ObjectStore(settings)


def get_video_store() -> VideoStore:
    return VideoStore(get_object_store())
