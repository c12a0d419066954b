"""Submission endpoints used by the public form and by submitters."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from groupfinder.api.v1.dependencies import CallerDep, ContainerDep, SignedInCallerDep
from groupfinder.schemas.submission import Submission, SubmissionCreate
from groupfinder.services.errors import NotFoundError, TransientStoreError

router = APIRouter(prefix="/submissions", tags=["submissions"])


def _unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Network issue, please try again",
    )


@router.post("/", response_model=Submission, status_code=status.HTTP_201_CREATED)
async def create_submission(
    submission_data: SubmissionCreate,
    caller: CallerDep,
    container: ContainerDep,
) -> Submission:
    """Submit a community for review."""
    try:
        return await container.engine.submit(submission_data, owner_id=caller.user_id)
    except TransientStoreError as err:
        raise _unavailable() from err


@router.get("/mine", response_model=list[Submission])
async def list_my_submissions(
    caller: SignedInCallerDep,
    container: ContainerDep,
) -> list[Submission]:
    """List the signed-in user's own submissions, newest first."""
    try:
        return await container.repository.list_by_owner(caller.user_id or "")
    except TransientStoreError as err:
        raise _unavailable() from err


@router.get("/{submission_id}", response_model=Submission)
async def get_submission(
    submission_id: int,
    caller: SignedInCallerDep,
    container: ContainerDep,
) -> Submission:
    """Return a submission to its owner or to an admin."""
    try:
        submission = await container.repository.get_by_id(submission_id)
        allowed = container.authorizer.is_admin(caller) or await container.authorizer.is_owner(
            caller, submission_id
        )
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Submission not found",
        ) from err
    except TransientStoreError as err:
        raise _unavailable() from err

    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You're not authorized to view this submission",
        )
    return submission
