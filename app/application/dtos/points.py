"""DTOs for points, rewards and reward claims."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PointsTransaction:
    """Points earned (positive) or spent (negative) by a user or a team."""

    id: str
    points: int
    type: str
    description: str
    status: str
    user_auth0_id: str
    team_id: str | None
    program_id: str | None
    program_name: str
    cohort_id: str | None
    cohort_name: str
    milestone_id: str | None
    milestone_name: str
    created_time: str | None


@dataclass(frozen=True)
class Reward:
    id: str
    name: str
    description: str
    points_cost: int
    category: str
    status: str
    image_url: str
    inventory_count: int
    is_limited: bool


@dataclass(frozen=True)
class RewardClaim:
    id: str
    user_auth0_id: str
    reward_id: str | None
    reward_name: str
    points_used: int
    status: str
    delivery_details: str
    fulfilled_date: str | None
    created_time: str | None


@dataclass(frozen=True)
class PointsSummary:
    """Totals over completed transactions; spent is reported as a positive number."""

    total_earned: int
    total_spent: int
    available: int
    transaction_count: int


@dataclass(frozen=True)
class ClaimResult:
    """Outcome of a reward claim: the claim, the reward and the remaining balance."""

    claim: RewardClaim
    reward: Reward
    transaction: PointsTransaction | None
    points_remaining: int
