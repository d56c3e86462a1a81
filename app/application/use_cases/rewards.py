"""Claim reward workflow: balance check, claim record, negative transaction."""

from __future__ import annotations

import logging

from app.application.dtos.points import ClaimResult
from app.application.interfaces.repositories import IPointsRepository
from app.application.use_cases.saga import Saga
from app.domain.enums import REWARD_CLAIM_TRANSACTION_TYPE, TransactionStatus
from app.domain.exceptions import (
    InsufficientPointsException,
    ResourceNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)


class ClaimRewardWorkflow:
    """Spends a user's points on a reward."""

    def __init__(self, points_repo: IPointsRepository) -> None:
        self._points_repo = points_repo

    async def execute(
        self, user_auth0_id: str, reward_id: str, delivery_details: str = ""
    ) -> ClaimResult:
        """Claim a reward for the user.

        The balance is read uncached so a just-spent balance cannot be reused.

        Raises:
            ValidationException: Missing user or reward id.
            ResourceNotFoundException: Reward does not exist.
            InsufficientPointsException: Available points below the reward cost.
            WorkflowFailedException: The transaction failed; the claim was deleted.
        """
        if not user_auth0_id:
            raise ValidationException("User ID is required", field="user_auth0_id")
        if not reward_id:
            raise ValidationException("Reward ID is required", field="reward_id")
        reward = await self._points_repo.fetch_reward(reward_id)
        if reward is None:
            raise ResourceNotFoundException("reward", reward_id)
        summary = await self._points_repo.fetch_points_summary(user_auth0_id)
        if summary.available < reward.points_cost:
            raise InsufficientPointsException(reward.points_cost, summary.available)

        saga = Saga("claim_reward")
        saga.step(
            "create_claim",
            lambda: self._points_repo.create_reward_claim(
                {
                    "user_auth0_id": user_auth0_id,
                    "reward_id": reward.id,
                    "reward_name": reward.name,
                    "points_used": reward.points_cost,
                    "delivery_details": delivery_details or "",
                }
            ),
            lambda claim: self._points_repo.delete_reward_claim(claim.id),
        )
        # Free rewards need no transaction (zero-point transactions are rejected).
        if reward.points_cost > 0:
            saga.step(
                "create_transaction",
                lambda: self._points_repo.create_transaction(
                    {
                        "user_auth0_id": user_auth0_id,
                        "points": -reward.points_cost,
                        "type": REWARD_CLAIM_TRANSACTION_TYPE,
                        "description": f"Claimed: {reward.name or 'Unknown reward'}",
                        "status": TransactionStatus.COMPLETED.value,
                    }
                ),
            )
        results = await saga.run()
        logger.info("Reward %s claimed for %s points", reward.id, reward.points_cost)
        return ClaimResult(
            claim=results["create_claim"],
            reward=reward,
            transaction=results.get("create_transaction"),
            points_remaining=summary.available - reward.points_cost,
        )
