from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict

from process_status.api.deps import Tracker
from process_status.domain.errors import StoreUnavailableError

router = APIRouter()

class ProcessStatusResponse(BaseModel):
    # Values are passed back exactly as stored, whatever their type
    status: Any = None
    job_class: Any = None
    vars: Any = None
    created_at: Any = None
    started_at: Any = None
    failed_at: Any = None
    stopped_at: Any = None
    retries: Any = None
    # Fields written by other producers of the document are passed through
    model_config = ConfigDict(extra="allow")

@router.get("/{identity}", response_model=ProcessStatusResponse, response_model_exclude_none=True)
async def get_process_status(identity: str, tracker: Tracker):
    try:
        document = await tracker.describe(identity)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    if document is None:
        raise HTTPException(status_code=404, detail="Process not found")
    return ProcessStatusResponse.model_validate(document.to_dict())
