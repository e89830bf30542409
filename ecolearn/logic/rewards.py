"""
Reward catalog and redemption rules
"""
from typing import Dict, Any, Optional
from datetime import datetime
import logging
import secrets
import string

from ecolearn.dynamo import new_id, utc_now
from ecolearn.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)

REWARD_CATEGORIES = ["Eco Product", "Discount Coupon", "Merchandise", "Experience", "Other"]
REWARD_TYPES = ["product", "coupon"]
REDEMPTION_STATUSES = ["pending", "completed", "cancelled"]


def generate_product_id() -> str:
    return f"PROD_{int(utc_now().timestamp() * 1000)}_{secrets.token_hex(3).upper()}"


def generate_coupon_code(length: int = 8) -> str:
    alphabet = string.ascii_uppercase + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def prepare_reward(reward: Dict[str, Any]) -> Dict[str, Any]:
    """Assign productId or couponCode when the reward type needs one"""
    if reward.get('type') == 'product' and not reward.get('productId'):
        reward['productId'] = generate_product_id()
    if reward.get('type') == 'coupon' and not reward.get('couponCode'):
        reward['couponCode'] = generate_coupon_code()
    return reward


def redeem(user: Dict[str, Any], reward: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Spend points on a reward.

    Deducts pointsRequired from the account total directly (weekly/monthly
    counters and history are untouched) and decrements finite stock.

    Returns:
        New redemption record with status pending

    Raises:
        ValidationError: not enough points
        ConflictError: finite stock exhausted
    """
    cost = reward.get('pointsRequired', 0)
    if user.get('points', 0) < cost:
        raise ValidationError("Not enough points to redeem this reward")

    stock = reward.get('stock')
    if stock is not None and stock <= 0:
        raise ConflictError("This reward is out of stock")

    user['points'] = user.get('points', 0) - cost
    if stock is not None:
        reward['stock'] = stock - 1

    now_iso = (now or utc_now()).isoformat()
    redemption = {
        'redemption_id': new_id(),
        'user_id': user['user_id'],
        'reward': reward['reward_id'],
        'rewardName': reward.get('name'),
        'pointsSpent': cost,
        'status': 'pending',
        'redeemedAt': now_iso,
        'completedAt': None,
        'createdAt': now_iso,
    }

    logger.info(
        f"User {user['user_id']} redeemed reward {reward['reward_id']} for {cost} points. "
        f"Remaining: {user['points']}"
    )
    return redemption


def set_redemption_status(redemption: Dict[str, Any], status: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    if status not in REDEMPTION_STATUSES:
        raise ValidationError(f"Invalid status '{status}'. Must be one of: {', '.join(REDEMPTION_STATUSES)}")

    redemption['status'] = status
    if status == 'completed':
        redemption['completedAt'] = (now or utc_now()).isoformat()
    return redemption
