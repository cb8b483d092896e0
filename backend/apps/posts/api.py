import json
import logging
from typing import List
from ninja import Router, File, Form
from ninja.files import UploadedFile
from api.dependencies import AuthBearer, get_backend
from api.exceptions import ValidationError
from apps.accounts.services import AccountService
from apps.media.api import media_item_from_upload
from .composer import Draft, MODE_PUBLISH, MODE_SCHEDULE, validate_draft
from .schemas import ComposerStateSchema, DraftSchema, SubmitResponseSchema, ValidationResultSchema
from .services import PostService

router = Router()
logger = logging.getLogger('platforms')


def composer_state(draft: Draft) -> dict:
    return {
        "account_ids": draft.selection.account_ids,
        "gmb_location_ids": list(draft.selection.gmb_locations),
        "platforms": draft.selection.platforms,
        "carousel_available": draft.carousel_available,
        "carousel_images_only": draft.carousel_images_only,
        "accepts": draft.accepts,
        "notice": draft.notice,
    }


def _split_ids(value: str) -> List[str]:
    return [part for part in (value or '').split(',') if part]


@router.get("/composer", auth=AuthBearer(), response=ComposerStateSchema)
def composer_preselect(request, accounts: str = "", gmb: str = ""):
    """Selection state for a deep link such as ?accounts=a,b&gmb=loc1"""
    draft = Draft(AccountService(get_backend(request)).list_accounts())
    draft.selection.preselect(_split_ids(accounts), _split_ids(gmb))
    return composer_state(draft)


@router.post("/validate", auth=AuthBearer(), response=ValidationResultSchema)
def validate_post(request, data: DraftSchema):
    """Check a draft without uploading or publishing anything"""
    service = PostService(get_backend(request))
    try:
        draft = service.build_draft(data)
    except ValidationError as e:
        return {"valid": False, "errors": e.errors}

    errors = validate_draft(draft)
    return {"valid": not errors, "errors": errors, "state": composer_state(draft)}


def _submit(request, draft_json: str, files, mode: str):
    try:
        payload = json.loads(draft_json)
    except ValueError as e:
        raise ValidationError(f"Invalid draft: {str(e)}")
    if not isinstance(payload, dict):
        raise ValidationError("Invalid draft: expected a JSON object")
    try:
        data = DraftSchema(**payload)
    except ValueError as e:
        raise ValidationError(f"Invalid draft: {str(e)}")
    data.mode = mode

    logger.info(f"[SUBMIT_START] User: {request.auth.user_id} | Mode: {mode} | Files: {len(files or [])}")
    service = PostService(get_backend(request))
    uploads = [media_item_from_upload(f) for f in (files or [])]
    draft = service.build_draft(data, uploads)
    response_data = service.submit(draft)

    if response_data["fail_count"] == 0:
        return response_data  # 200 OK
    elif response_data["success_count"] > 0:
        return 207, response_data  # 207 Multi-Status (partial success)
    return 400, response_data  # 400 Bad Request (all failed)


@router.post("/publish", auth=AuthBearer(), response={200: SubmitResponseSchema, 207: SubmitResponseSchema, 400: SubmitResponseSchema})
def publish_post(request, draft: str = Form(...), files: List[UploadedFile] = File(None)):
    """
    Post now to every selected destination

    ``draft`` is a JSON-encoded DraftSchema; local media travel as ``files``
    and are referenced from the draft by ``upload_index``.
    """
    return _submit(request, draft, files, MODE_PUBLISH)


@router.post("/schedule", auth=AuthBearer(), response={200: SubmitResponseSchema, 207: SubmitResponseSchema, 400: SubmitResponseSchema})
def schedule_post(request, draft: str = Form(...), files: List[UploadedFile] = File(None)):
    """Schedule the draft for ``schedule_at`` on every selected destination"""
    return _submit(request, draft, files, MODE_SCHEDULE)
