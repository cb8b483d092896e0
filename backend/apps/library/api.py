"""
Media Library API Endpoints
"""
from typing import List, Optional
from django.http import HttpResponse
from ninja import Router
from api.dependencies import AuthBearer, get_backend
from .schemas import BulkDeleteResponseSchema, DownloadPlanSchema, LibraryItemSchema, SelectionSchema
from .services import LibraryService

router = Router()


@router.get("/", auth=AuthBearer(), response=List[LibraryItemSchema])
def list_library(request, platform: Optional[str] = None):
    """Every post's media, newest first"""
    return LibraryService(get_backend(request)).list_items(platform=platform)


@router.post("/bulk-delete", auth=AuthBearer(), response=BulkDeleteResponseSchema)
def bulk_delete(request, data: SelectionSchema):
    """Delete the selected items (and the posts they belong to)"""
    return LibraryService(get_backend(request)).bulk_delete(data.ids)


@router.post("/bulk-download/plan", auth=AuthBearer(), response=DownloadPlanSchema)
def bulk_download_plan(request, data: SelectionSchema):
    """Which selected items go into the zip and which open in a new tab"""
    return LibraryService(get_backend(request)).download_plan(data.ids)


@router.post("/bulk-download", auth=AuthBearer())
def bulk_download(request, data: SelectionSchema):
    """
    Download the selected storage-hosted items as a zip archive

    Returns:
        Zip file; links that could not be zipped are listed in X-Open-Urls
    """
    content, plan = LibraryService(get_backend(request)).build_zip(data.ids)

    response = HttpResponse(content, content_type='application/zip')
    response['Content-Disposition'] = 'attachment; filename="media_library.zip"'
    response['X-Open-Urls'] = ' '.join(item['media_url'] for item in plan['open'])
    response['X-Skipped-Ids'] = ','.join(plan['skipped'])
    return response
