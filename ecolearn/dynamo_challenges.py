"""
DynamoDB operations for challenges.

Participants and their submissions are nested in the challenge item and
the whole document is written back after each change.
"""
from typing import Optional, Dict, Any, List
import logging

from boto3.dynamodb.conditions import Attr

from ecolearn import dynamo
from ecolearn.dynamo import get_document, put_document, delete_document, scan_all

logger = logging.getLogger(__name__)


async def get_challenge(challenge_id: str) -> Optional[Dict[str, Any]]:
    try:
        return get_document(dynamo.db_client.challenges_table, {'challenge_id': challenge_id})
    except Exception as e:
        logger.error(f"Error getting challenge {challenge_id}: {str(e)}")
        raise


async def save_challenge(challenge: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return put_document(dynamo.db_client.challenges_table, challenge)
    except Exception as e:
        logger.error(f"Error saving challenge {challenge.get('challenge_id')}: {str(e)}")
        raise


async def delete_challenge(challenge_id: str) -> None:
    try:
        delete_document(dynamo.db_client.challenges_table, {'challenge_id': challenge_id})
        logger.info(f"Deleted challenge {challenge_id}")
    except Exception as e:
        logger.error(f"Error deleting challenge {challenge_id}: {str(e)}")
        raise


async def list_challenges(active_only: bool = False) -> List[Dict[str, Any]]:
    try:
        kwargs = {}
        if active_only:
            kwargs['FilterExpression'] = Attr('isActive').eq(True)
        return scan_all(dynamo.db_client.challenges_table, **kwargs)
    except Exception as e:
        logger.error(f"Error listing challenges: {str(e)}")
        raise
