"""Points and rewards routes for the signed-in user (keyed by Auth0 subject)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import CurrentUser, PointsRepoDep, get_claim_reward_workflow
from app.application.use_cases import ClaimRewardWorkflow
from app.core.limiter import limit_claims
from app.schemas.points import (
    ClaimListResponse,
    PointsSummaryResponse,
    RewardClaimRequest,
    RewardClaimResponse,
    RewardListResponse,
    TransactionListResponse,
)

router = APIRouter()


@router.get("/summary", response_model=PointsSummaryResponse)
async def get_points_summary(user: CurrentUser, points_repo: PointsRepoDep) -> PointsSummaryResponse:
    return PointsSummaryResponse(summary=await points_repo.get_points_summary(user.sub))


@router.get("/transactions", response_model=TransactionListResponse)
async def list_transactions(user: CurrentUser, points_repo: PointsRepoDep) -> TransactionListResponse:
    return TransactionListResponse(
        transactions=await points_repo.get_transactions_by_user(user.sub)
    )


@router.get("/rewards", response_model=RewardListResponse)
async def list_rewards(points_repo: PointsRepoDep, _: CurrentUser) -> RewardListResponse:
    return RewardListResponse(rewards=await points_repo.get_rewards())


@router.get("/claimed", response_model=ClaimListResponse)
async def list_claimed_rewards(user: CurrentUser, points_repo: PointsRepoDep) -> ClaimListResponse:
    return ClaimListResponse(claims=await points_repo.fetch_claimed_rewards(user.sub))


@router.post("/rewards/{reward_id}/claim", response_model=RewardClaimResponse, status_code=201)
@limit_claims
async def claim_reward(
    request: Request,
    reward_id: str,
    user: CurrentUser,
    workflow: Annotated[ClaimRewardWorkflow, Depends(get_claim_reward_workflow)],
    body: RewardClaimRequest | None = None,
) -> RewardClaimResponse:
    """Spend points on a reward (409 when the balance is too low)."""
    result = await workflow.execute(
        user.sub, reward_id, delivery_details=body.delivery_details if body else ""
    )
    return RewardClaimResponse(
        claim=result.claim,
        reward=result.reward,
        transaction=result.transaction,
        points_remaining=result.points_remaining,
    )
