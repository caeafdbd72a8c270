class VideoStoreError(Exception):
    """Base class for every failure raised by the video store."""

    public_message = "Unexpected video library error."


class InvalidInputError(VideoStoreError):
    public_message = "A valid video file must be provided."


class VideoNotFoundError(VideoStoreError):
    public_message = "Video not found."

    def __init__(self, video_id: str):
        super().__init__(f"Video not found: {video_id}")
        self.video_id = video_id


class StorageUnavailableError(VideoStoreError):
    public_message = "The video storage backend is unavailable."


class CorruptRecordError(VideoStoreError):
    public_message = "Stored video metadata could not be read."


class MissingCredentialsError(VideoStoreError):
    public_message = "Video storage is not configured."
