"""
Talent API Routes

Owner-scoped talent CRUD, search, favorites and score adjustments.
Every route acts on the talents of the logged-in user only.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from loguru import logger

from talentledger.api.dependencies import (
    get_current_owner_id,
    get_talent_repository,
    get_scoring_service,
)
from talentledger.api.schemas import (
    TalentCreate,
    TalentUpdate,
    TalentResponse,
    TalentListResponse,
    TalentDetailResponse,
    AdjustmentCreate,
    AdjustmentCreatedResponse,
    ErrorResponse,
)
from talentledger.scoring import ScoringService
from talentledger.storage import TalentRepository


router = APIRouter(prefix="/talents", tags=["talents"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Talent not found"}}


@router.get("", response_model=TalentListResponse)
def list_talents(
    q: Optional[str] = Query(None, description="Substring of name or affiliation"),
    owner_id: int = Depends(get_current_owner_id),
    repo: TalentRepository = Depends(get_talent_repository),
):
    """List talents, favorites first. With ``q``, only matching talents."""
    if q:
        talents = repo.search(owner_id, q)
    else:
        talents = repo.list_by_owner(owner_id)

    return TalentListResponse(
        talents=[TalentResponse.model_validate(t) for t in talents],
        total=len(talents),
        query=q or None,
    )


@router.get("/favorites", response_model=TalentListResponse)
def list_favorites(
    owner_id: int = Depends(get_current_owner_id),
    repo: TalentRepository = Depends(get_talent_repository),
):
    talents = repo.list_favorites(owner_id)
    return TalentListResponse(
        talents=[TalentResponse.model_validate(t) for t in talents],
        total=len(talents),
    )


@router.post(
    "",
    response_model=TalentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Invalid talent data"}},
)
def create_talent(
    talent: TalentCreate,
    owner_id: int = Depends(get_current_owner_id),
    repo: TalentRepository = Depends(get_talent_repository),
):
    logger.info(f"Creating talent: {talent.name}")

    talent_id = repo.create(
        owner_id,
        talent.name,
        talent.affiliation,
        talent.beauty,
        talent.cuteness,
        talent.talent,
    )
    return repo.get(talent_id, owner_id)


@router.get("/{talent_id}", response_model=TalentDetailResponse, responses=NOT_FOUND)
def get_talent(
    talent_id: int,
    owner_id: int = Depends(get_current_owner_id),
    scoring: ScoringService = Depends(get_scoring_service),
):
    """Talent with totals and its adjustment history."""
    return scoring.detail(talent_id, owner_id)


@router.put("/{talent_id}", response_model=TalentResponse, responses=NOT_FOUND)
def update_talent(
    talent_id: int,
    talent: TalentUpdate,
    owner_id: int = Depends(get_current_owner_id),
    repo: TalentRepository = Depends(get_talent_repository),
):
    logger.info(f"Updating talent: {talent_id}")

    repo.update(
        talent_id,
        owner_id,
        talent.name,
        talent.affiliation,
        talent.beauty,
        talent.cuteness,
        talent.talent,
    )
    return repo.get(talent_id, owner_id)


@router.delete(
    "/{talent_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_talent(
    talent_id: int,
    owner_id: int = Depends(get_current_owner_id),
    repo: TalentRepository = Depends(get_talent_repository),
):
    """Delete a talent and its history. Unknown ids succeed too."""
    repo.delete(talent_id, owner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{talent_id}/favorite", response_model=TalentResponse, responses=NOT_FOUND)
def toggle_favorite(
    talent_id: int,
    owner_id: int = Depends(get_current_owner_id),
    repo: TalentRepository = Depends(get_talent_repository),
):
    repo.toggle_favorite(talent_id, owner_id)
    return repo.get(talent_id, owner_id)


@router.post(
    "/{talent_id}/adjustments",
    response_model=AdjustmentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=NOT_FOUND,
)
def add_adjustment(
    talent_id: int,
    adjustment: AdjustmentCreate,
    owner_id: int = Depends(get_current_owner_id),
    scoring: ScoringService = Depends(get_scoring_service),
    repo: TalentRepository = Depends(get_talent_repository),
):
    """Record a point adjustment and return the talent's new totals."""
    adjustment_id = scoring.adjust(
        talent_id,
        owner_id,
        adjustment.adjustment_type,
        adjustment.points,
        adjustment.reason,
    )
    return AdjustmentCreatedResponse(
        id=adjustment_id,
        talent=TalentResponse.model_validate(repo.get(talent_id, owner_id)),
    )
