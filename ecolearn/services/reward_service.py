"""
Reward Service

Catalog management and point redemption. Redemption runs as sequential
writes (account, reward stock, redemption record) with no compensation.
"""
import logging
from typing import Dict, Any, List

from ecolearn import dynamo, dynamo_rewards
from ecolearn.errors import NotFoundError
from ecolearn.logic import rewards as rules

logger = logging.getLogger(__name__)


class RewardService:

    async def get_reward(self, reward_id: str) -> Dict[str, Any]:
        reward = await dynamo_rewards.get_reward(reward_id)
        if not reward:
            raise NotFoundError("Reward not found")
        return reward

    async def list_active(self) -> List[Dict[str, Any]]:
        rewards = await dynamo_rewards.list_rewards(active_only=True)
        return sorted(rewards, key=lambda r: r.get('pointsRequired', 0))

    async def list_all(self) -> List[Dict[str, Any]]:
        return await dynamo_rewards.list_rewards()

    async def create_reward(self, user: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        reward = rules.prepare_reward({
            **data,
            'reward_id': dynamo.new_id(),
            'createdBy': user['user_id'],
            'createdAt': dynamo.utc_now().isoformat(),
        })
        await dynamo_rewards.save_reward(reward)
        logger.info(f"Reward {reward['reward_id']} created ({reward.get('type')})")
        return reward

    async def update_reward(self, reward_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        reward = await self.get_reward(reward_id)
        reward.update(updates)
        return await dynamo_rewards.save_reward(rules.prepare_reward(reward))

    async def delete_reward(self, reward_id: str) -> None:
        await self.get_reward(reward_id)
        await dynamo_rewards.delete_reward(reward_id)

    async def redeem(self, user: Dict[str, Any], reward_id: str) -> Dict[str, Any]:
        """
        Redeem a reward for the caller.

        Returns:
            {reward, pointsSpent, remainingPoints, redemptionId}
        """
        reward = await self.get_reward(reward_id)
        if not reward.get('isActive', True):
            raise NotFoundError("Reward not found")

        redemption = rules.redeem(user, reward)

        await dynamo.save_user(user)
        if reward.get('stock') is not None:
            await dynamo_rewards.save_reward(reward)
        await dynamo_rewards.save_redemption(redemption)

        return {
            'reward': reward,
            'pointsSpent': redemption['pointsSpent'],
            'remainingPoints': user['points'],
            'redemptionId': redemption['redemption_id'],
        }

    async def history(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        redemptions = await dynamo_rewards.list_user_redemptions(user['user_id'])
        return sorted(redemptions, key=lambda r: r.get('redeemedAt', ''), reverse=True)

    async def all_redemptions(self) -> List[Dict[str, Any]]:
        redemptions = await dynamo_rewards.list_redemptions()
        return sorted(redemptions, key=lambda r: r.get('redeemedAt', ''), reverse=True)

    async def update_redemption_status(self, redemption_id: str, status: str) -> Dict[str, Any]:
        redemption = await dynamo_rewards.get_redemption(redemption_id)
        if not redemption:
            raise NotFoundError("Redemption not found")
        rules.set_redemption_status(redemption, status)
        logger.info(f"Redemption {redemption_id} -> {status}")
        return await dynamo_rewards.save_redemption(redemption)


reward_service = RewardService()
