"""Admin review endpoints for the Group Finder API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import JSONResponse

from groupfinder.api.v1.dependencies import AdminCallerDep, CallerDep, ContainerDep
from groupfinder.models.submission import SubmissionStatus
from groupfinder.schemas.results import ActionFailure, ActionResult
from groupfinder.schemas.submission import ReviewRequest, Submission
from groupfinder.services.errors import ErrorKind, TransientStoreError

router = APIRouter(prefix="/admin", tags=["admin"])

STATUS_FOR_ERROR: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorKind.TRANSIENT_STORE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _respond(result: ActionResult) -> JSONResponse:
    """Serialize an action result with a status code matching its outcome."""
    code = status.HTTP_200_OK
    if isinstance(result, ActionFailure):
        code = STATUS_FOR_ERROR[result.error]
    return JSONResponse(status_code=code, content=result.model_dump(mode="json"))


@router.get("/submissions", response_model=list[Submission])
async def list_submissions(
    _admin: AdminCallerDep,
    container: ContainerDep,
    status_filter: SubmissionStatus = Query(SubmissionStatus.PENDING, alias="status"),
) -> list[Submission]:
    """List submissions in one status, newest first."""
    try:
        return await container.repository.list_by_status(status_filter)
    except TransientStoreError as err:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Network issue, please try again",
        ) from err


@router.post("/submissions/{submission_id}/approve")
async def approve_submission(
    submission_id: int,
    caller: CallerDep,
    container: ContainerDep,
    review: ReviewRequest | None = None,
) -> JSONResponse:
    """Approve a pending submission so it appears in the directory."""
    notes = review.notes if review else None
    return _respond(await container.admin.approve(caller, submission_id, notes))


@router.post("/submissions/{submission_id}/reject")
async def reject_submission(
    submission_id: int,
    caller: CallerDep,
    container: ContainerDep,
    review: ReviewRequest | None = None,
) -> JSONResponse:
    """Reject a pending submission."""
    notes = review.notes if review else None
    return _respond(await container.admin.reject(caller, submission_id, notes))


@router.post("/submissions/{submission_id}/delist")
async def delist_submission(
    submission_id: int,
    caller: CallerDep,
    container: ContainerDep,
) -> JSONResponse:
    """Take an approved community off the public directory."""
    return _respond(await container.admin.delist(caller, submission_id))


@router.delete("/submissions/{submission_id}")
async def delete_submission(
    submission_id: int,
    caller: CallerDep,
    container: ContainerDep,
) -> JSONResponse:
    """Permanently delete a submission record."""
    return _respond(await container.admin.delete(caller, submission_id))
