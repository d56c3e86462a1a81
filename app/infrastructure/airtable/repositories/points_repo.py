"""Points transactions, rewards and reward claims.

Points belong to a user (by Auth0 subject) or to a team. Earned points are
positive transactions, spent points negative ones; only Completed
transactions count toward a balance.
"""

from typing import Any

from app.application.dtos.points import PointsSummary, PointsTransaction, Reward, RewardClaim
from app.core.constants import CACHE_PREFIX_POINTS, CACHE_PREFIX_REWARDS
from app.domain.enums import TransactionStatus
from app.domain.exceptions import ValidationException
from app.infrastructure.airtable import formulas, tables
from app.infrastructure.airtable.normalizers import (
    claim_to_fields,
    normalize_claim,
    normalize_reward,
    normalize_transaction,
    transaction_to_fields,
)
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.cache.keys import build_key
from app.shared.telemetry.tracing import traced

_NEWEST_FIRST = [("Created Time", "desc")]


def summarize_points(transactions: list[PointsTransaction]) -> PointsSummary:
    """Totals over Completed transactions (spent reported as a positive number)."""
    earned = spent = 0
    for tx in transactions:
        if tx.status != TransactionStatus.COMPLETED.value:
            continue
        if tx.points > 0:
            earned += tx.points
        else:
            spent += abs(tx.points)
    return PointsSummary(
        total_earned=earned,
        total_spent=spent,
        available=earned - spent,
        transaction_count=len(transactions),
    )


class PointsRepository(AirtableRepository):
    table_name = tables.POINTS
    cache_prefix = CACHE_PREFIX_POINTS

    async def _on_after_write(self) -> None:
        await self._invalidate(CACHE_PREFIX_POINTS, CACHE_PREFIX_REWARDS)

    @traced()
    async def fetch_transactions_by_user(self, user_auth0_id: str) -> list[PointsTransaction]:
        self._require(user_auth0_id, "user_auth0_id", "User ID is required")
        with self._store_errors("fetching user points transactions"):
            records = await self._table().select(
                formula=formulas.field_equals("User Auth0 ID", user_auth0_id),
                sort=_NEWEST_FIRST,
            )
        return [normalize_transaction(r) for r in records]

    async def get_transactions_by_user(self, user_auth0_id: str) -> list[PointsTransaction]:
        self._require(user_auth0_id, "user_auth0_id", "User ID is required")
        return await self._cached(
            build_key(self.cache_prefix, "user", user_auth0_id),
            lambda: self.fetch_transactions_by_user(user_auth0_id),
        )

    @traced()
    async def fetch_transactions_by_team(self, team_id: str) -> list[PointsTransaction]:
        self._require(team_id, "team_id", "Team ID is required")
        with self._store_errors("fetching team points transactions", team_id=team_id):
            records = await self._table().select(
                formula=formulas.field_equals("Team Record ID", team_id),
                sort=_NEWEST_FIRST,
            )
        return [normalize_transaction(r) for r in records]

    @traced()
    async def create_transaction(self, data: dict[str, Any]) -> PointsTransaction:
        """Record a points transaction; status defaults to Completed.

        Raises:
            ValidationException: Neither user nor team given, zero points or no type.
        """
        if not data.get("user_auth0_id") and not data.get("team_id"):
            raise ValidationException(
                "Either user_auth0_id or team_id is required for a points transaction",
                field="user_auth0_id",
            )
        if not data.get("points"):
            raise ValidationException("Points amount is required", field="points")
        self._require(data.get("type"), "type", "Transaction type is required")
        fields = transaction_to_fields(
            {"status": TransactionStatus.COMPLETED.value, "description": "", **data}
        )
        with self._store_errors("creating points transaction", type=data["type"]):
            record = await self._table().create(fields)
        await self._on_after_write()
        return normalize_transaction(record)

    async def fetch_points_summary(self, user_auth0_id: str) -> PointsSummary:
        return summarize_points(await self.fetch_transactions_by_user(user_auth0_id))

    async def get_points_summary(self, user_auth0_id: str) -> PointsSummary:
        return summarize_points(await self.get_transactions_by_user(user_auth0_id))

    @traced()
    async def fetch_rewards(self) -> list[Reward]:
        """Rewards with status Available, cheapest first."""
        with self._store_errors("fetching rewards"):
            records = await self._table(tables.REWARDS).select(
                formula=formulas.field_equals("Status", "Available"),
                sort=[("Points Cost", "asc")],
            )
        return [normalize_reward(r) for r in records]

    async def get_rewards(self) -> list[Reward]:
        return await self._cached(build_key(CACHE_PREFIX_REWARDS, "available"), self.fetch_rewards)

    @traced()
    async def fetch_reward(self, reward_id: str) -> Reward | None:
        self._require(reward_id, "reward_id", "Reward ID is required")
        with self._store_errors("fetching reward", reward_id=reward_id):
            record = await self._table(tables.REWARDS).find(reward_id)
        return normalize_reward(record)

    @traced()
    async def fetch_claimed_rewards(self, user_auth0_id: str) -> list[RewardClaim]:
        self._require(user_auth0_id, "user_auth0_id", "User ID is required")
        with self._store_errors("fetching claimed rewards"):
            records = await self._table(tables.CLAIMED_REWARDS).select(
                formula=formulas.field_equals("User Auth0 ID", user_auth0_id),
                sort=_NEWEST_FIRST,
            )
        return [normalize_claim(r) for r in records]

    @traced()
    async def create_reward_claim(self, data: dict[str, Any]) -> RewardClaim:
        """Create a Pending claim for a reward."""
        self._require(data.get("user_auth0_id"), "user_auth0_id", "User ID is required")
        self._require(data.get("reward_id"), "reward_id", "Reward ID is required")
        fields = claim_to_fields({"status": "Pending", "delivery_details": "", **data})
        with self._store_errors("creating reward claim", reward_id=data["reward_id"]):
            record = await self._table(tables.CLAIMED_REWARDS).create(fields)
        await self._on_after_write()
        return normalize_claim(record)

    @traced()
    async def delete_reward_claim(self, claim_id: str) -> str:
        self._require(claim_id, "claim_id", "Claim ID is required")
        with self._store_errors(
            "deleting reward claim", missing=("reward claim", claim_id), record_id=claim_id
        ):
            deleted = await self._table(tables.CLAIMED_REWARDS).delete(claim_id)
        await self._on_after_write()
        return deleted
