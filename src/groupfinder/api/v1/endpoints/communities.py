"""Public directory endpoints for the Group Finder API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from groupfinder.api.v1.dependencies import ContainerDep
from groupfinder.models.submission import JoinType
from groupfinder.schemas.community import DirectoryQuery, LiveCommunity
from groupfinder.services.search import filter_communities

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("/", response_model=list[LiveCommunity])
async def list_communities(
    container: ContainerDep,
    category: str | None = None,
    platform: str | None = None,
    join_type: JoinType | None = None,
    q: str | None = None,
) -> list[LiveCommunity]:
    """List live communities, newest approvals first, then the examples."""
    communities = await container.projection.get_live_communities()
    query = DirectoryQuery(category=category, platform=platform, join_type=join_type, q=q)
    return filter_communities(communities, query)


@router.get("/{community_id}", response_model=LiveCommunity)
async def get_community(
    community_id: str,
    container: ContainerDep,
) -> LiveCommunity:
    """Get a single live community by its directory id."""
    community = container.projection.find(community_id)
    if community is None:
        await container.projection.refresh()
        community = container.projection.find(community_id)
    if community is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Community not found",
        )
    return community
