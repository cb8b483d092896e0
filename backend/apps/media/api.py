from ninja import Router, File, Form
from ninja.files import UploadedFile
from api.dependencies import AuthBearer
from api.exceptions import ValidationError
from django.conf import settings
from .services import MediaItem, MediaResolver, MediaService
from .schemas import MediaUploadResponseSchema, RecentUploadsPageSchema

router = Router()


def media_item_from_upload(file: UploadedFile) -> MediaItem:
    """Read an uploaded file into a draft media item"""
    return MediaItem(
        name=file.name,
        content_type=file.content_type or '',
        size=file.size,
        content=file.read(),
    )


@router.get("/recent", auth=AuthBearer(), response=RecentUploadsPageSchema)
def list_recent_uploads(request, platform: str, account_id: str, page: int = 0):
    """Recent uploads for an account, 20 per page, newest first"""
    return MediaResolver().list_recent(platform.lower(), account_id, page=page)


@router.post("/upload", auth=AuthBearer(), response=MediaUploadResponseSchema)
def upload_media(
    request,
    file: UploadedFile = File(...),
    platform: str = Form(...),
    account_id: str = Form(...),
):
    """
    Upload one file to the platform's bucket under the account's folder

    Args:
        file: The file to upload
        platform: 'facebook', 'instagram' or 'gmb'
        account_id: Folder the file is stored under

    Returns:
        MediaUploadResponseSchema: Public URL and file information
    """
    platform = platform.lower()
    bucket = settings.STORAGE_BUCKETS.get(platform)
    if not bucket:
        raise ValidationError(f"No media bucket for platform: {platform}")

    item = media_item_from_upload(file)
    errors = MediaService.check([item], [platform], stored=True)
    if errors:
        raise ValidationError(errors[0], errors)

    width = height = None
    if item.is_image:
        width, height = MediaService.inspect_image(item)

    resolver = MediaResolver()
    url = resolver.storage.upload(
        bucket, f"{account_id}/{resolver.object_name(item)}", item.content, item.content_type, name=item.name
    )

    return {
        "file_url": url,
        "file_type": item.media_type,
        "file_size": item.size,
        "width": width,
        "height": height,
        "message": "File uploaded successfully",
    }
