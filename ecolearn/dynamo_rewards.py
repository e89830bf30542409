"""
DynamoDB operations for the reward catalog and redemptions
"""
from typing import Optional, Dict, Any, List
import logging

from boto3.dynamodb.conditions import Attr, Key

from ecolearn import dynamo
from ecolearn.dynamo import get_document, put_document, delete_document, scan_all, query_all

logger = logging.getLogger(__name__)


# ============= REWARDS =============

async def get_reward(reward_id: str) -> Optional[Dict[str, Any]]:
    try:
        return get_document(dynamo.db_client.rewards_table, {'reward_id': reward_id})
    except Exception as e:
        logger.error(f"Error getting reward {reward_id}: {str(e)}")
        raise


async def save_reward(reward: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return put_document(dynamo.db_client.rewards_table, reward)
    except Exception as e:
        logger.error(f"Error saving reward {reward.get('reward_id')}: {str(e)}")
        raise


async def delete_reward(reward_id: str) -> None:
    try:
        delete_document(dynamo.db_client.rewards_table, {'reward_id': reward_id})
        logger.info(f"Deleted reward {reward_id}")
    except Exception as e:
        logger.error(f"Error deleting reward {reward_id}: {str(e)}")
        raise


async def list_rewards(active_only: bool = False) -> List[Dict[str, Any]]:
    try:
        kwargs = {}
        if active_only:
            kwargs['FilterExpression'] = Attr('isActive').eq(True)
        return scan_all(dynamo.db_client.rewards_table, **kwargs)
    except Exception as e:
        logger.error(f"Error listing rewards: {str(e)}")
        raise


# ============= REDEMPTIONS =============

async def get_redemption(redemption_id: str) -> Optional[Dict[str, Any]]:
    try:
        return get_document(dynamo.db_client.redemptions_table, {'redemption_id': redemption_id})
    except Exception as e:
        logger.error(f"Error getting redemption {redemption_id}: {str(e)}")
        raise


async def save_redemption(redemption: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return put_document(dynamo.db_client.redemptions_table, redemption)
    except Exception as e:
        logger.error(f"Error saving redemption {redemption.get('redemption_id')}: {str(e)}")
        raise


async def list_user_redemptions(user_id: str) -> List[Dict[str, Any]]:
    try:
        return query_all(
            dynamo.db_client.redemptions_table,
            IndexName='user_id-index',
            KeyConditionExpression=Key('user_id').eq(user_id)
        )
    except Exception as e:
        logger.error(f"Error listing redemptions for user {user_id}: {str(e)}")
        raise


async def list_redemptions() -> List[Dict[str, Any]]:
    try:
        return scan_all(dynamo.db_client.redemptions_table)
    except Exception as e:
        logger.error(f"Error listing redemptions: {str(e)}")
        raise
