"""Reward claims and cooldown release."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from engine.achievement_log import AchievementLog
from engine.clock import Clock, elapsed_days, local_now
from engine.progression import ProgressionEngine
from engine.types.achievements import Achievement
from engine.types.rewards import Reward

logger = logging.getLogger("ht.reward_vault")


@dataclass
class ClaimDecision:
    """Represents a claim allow/reject decision."""

    applied: bool
    reason: str
    achievement: Achievement | None = None


class RewardVault:
    """Owns the claim and cooldown state of every catalog reward."""

    def __init__(
        self,
        rewards: list[Reward],
        progression: ProgressionEngine,
        achievements: AchievementLog,
        clock: Clock = local_now,
    ) -> None:
        self.rewards = rewards
        self.progression = progression
        self.achievements = achievements
        self.clock = clock

    def get(self, reward_id: int) -> Reward | None:
        return next((r for r in self.rewards if r.id == reward_id), None)

    def claim(self, reward_id: int) -> ClaimDecision:
        """Spend points on a reward unless unaffordable or still cooling down."""
        reward = self.get(reward_id)
        if reward is None:
            return ClaimDecision(False, "unknown_reward")
        if reward.claimed:
            return ClaimDecision(False, "already_claimed")
        if not self.progression.spend(reward.cost):
            return ClaimDecision(False, "insufficient_points")
        reward.claimed = True
        reward.claimed_at = self.clock()
        logger.info("Claimed reward %s (%s) for %d points", reward.id, reward.name, reward.cost)
        achievement = self.achievements.append(f"Reward: {reward.name}!", kind="reward")
        return ClaimDecision(True, "ok", achievement)

    def tick(self, now: datetime | None = None) -> list[int]:
        """Release rewards whose cooldown elapsed. Returns the released ids."""
        now = now or self.clock()
        released: list[int] = []
        for reward in self.rewards:
            if not reward.claimed or reward.claimed_at is None:
                continue
            if elapsed_days(now, reward.claimed_at) >= reward.reset_interval_days:
                reward.claimed = False
                reward.claimed_at = None
                released.append(reward.id)
        if released:
            logger.info("Released rewards after cooldown: %s", released)
        return released

    def days_until_available(self, reward: Reward, now: datetime | None = None) -> int:
        if not reward.claimed or reward.claimed_at is None:
            return 0
        now = now or self.clock()
        return max(0, reward.reset_interval_days - elapsed_days(now, reward.claimed_at))
