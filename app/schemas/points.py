"""Points and rewards API schemas."""

from pydantic import BaseModel, Field, field_validator

from app.application.dtos import (
    PointsSummary,
    PointsTransaction,
    Reward,
    RewardClaim,
)
from app.shared.utils.sanitization import sanitize_text


class PointsSummaryResponse(BaseModel):
    summary: PointsSummary


class TransactionListResponse(BaseModel):
    transactions: list[PointsTransaction]


class RewardListResponse(BaseModel):
    rewards: list[Reward]


class ClaimListResponse(BaseModel):
    claims: list[RewardClaim]


class RewardClaimRequest(BaseModel):
    delivery_details: str = Field(default="", max_length=2000)

    @field_validator("delivery_details")
    @classmethod
    def _clean_text(cls, v: str) -> str:
        return sanitize_text(v) or ""


class RewardClaimResponse(BaseModel):
    claim: RewardClaim
    reward: Reward
    transaction: PointsTransaction | None
    points_remaining: int
