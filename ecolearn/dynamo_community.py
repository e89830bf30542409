"""
DynamoDB operations for events, surveys and platform reviews
"""
from typing import Optional, Dict, Any, List
import logging

from boto3.dynamodb.conditions import Attr, Key

from ecolearn import dynamo
from ecolearn.dynamo import get_document, put_document, delete_document, scan_all, query_all

logger = logging.getLogger(__name__)


# ============= EVENTS =============

async def get_event(event_id: str) -> Optional[Dict[str, Any]]:
    try:
        return get_document(dynamo.db_client.events_table, {'event_id': event_id})
    except Exception as e:
        logger.error(f"Error getting event {event_id}: {str(e)}")
        raise


async def save_event(event: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return put_document(dynamo.db_client.events_table, event)
    except Exception as e:
        logger.error(f"Error saving event {event.get('event_id')}: {str(e)}")
        raise


async def delete_event(event_id: str) -> None:
    try:
        delete_document(dynamo.db_client.events_table, {'event_id': event_id})
        logger.info(f"Deleted event {event_id}")
    except Exception as e:
        logger.error(f"Error deleting event {event_id}: {str(e)}")
        raise


async def list_events(active_only: bool = False) -> List[Dict[str, Any]]:
    try:
        kwargs = {}
        if active_only:
            kwargs['FilterExpression'] = Attr('isActive').eq(True)
        return scan_all(dynamo.db_client.events_table, **kwargs)
    except Exception as e:
        logger.error(f"Error listing events: {str(e)}")
        raise


# ============= SURVEYS =============

async def get_survey(survey_id: str) -> Optional[Dict[str, Any]]:
    try:
        return get_document(dynamo.db_client.surveys_table, {'survey_id': survey_id})
    except Exception as e:
        logger.error(f"Error getting survey {survey_id}: {str(e)}")
        raise


async def save_survey(survey: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return put_document(dynamo.db_client.surveys_table, survey)
    except Exception as e:
        logger.error(f"Error saving survey {survey.get('survey_id')}: {str(e)}")
        raise


async def delete_survey(survey_id: str) -> None:
    try:
        delete_document(dynamo.db_client.surveys_table, {'survey_id': survey_id})
        logger.info(f"Deleted survey {survey_id}")
    except Exception as e:
        logger.error(f"Error deleting survey {survey_id}: {str(e)}")
        raise


async def list_surveys(active_only: bool = False) -> List[Dict[str, Any]]:
    try:
        kwargs = {}
        if active_only:
            kwargs['FilterExpression'] = Attr('isActive').eq(True)
        return scan_all(dynamo.db_client.surveys_table, **kwargs)
    except Exception as e:
        logger.error(f"Error listing surveys: {str(e)}")
        raise


# ============= PLATFORM REVIEWS =============

async def get_review(review_id: str) -> Optional[Dict[str, Any]]:
    try:
        return get_document(dynamo.db_client.reviews_table, {'review_id': review_id})
    except Exception as e:
        logger.error(f"Error getting review {review_id}: {str(e)}")
        raise


async def get_user_review(user_id: str) -> Optional[Dict[str, Any]]:
    """The account's review, if it has written one"""
    try:
        reviews = query_all(
            dynamo.db_client.reviews_table,
            IndexName='user_id-index',
            KeyConditionExpression=Key('user_id').eq(user_id)
        )
        return reviews[0] if reviews else None
    except Exception as e:
        logger.error(f"Error getting review for user {user_id}: {str(e)}")
        raise


async def save_review(review: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return put_document(dynamo.db_client.reviews_table, review)
    except Exception as e:
        logger.error(f"Error saving review {review.get('review_id')}: {str(e)}")
        raise


async def delete_review(review_id: str) -> None:
    try:
        delete_document(dynamo.db_client.reviews_table, {'review_id': review_id})
        logger.info(f"Deleted review {review_id}")
    except Exception as e:
        logger.error(f"Error deleting review {review_id}: {str(e)}")
        raise


async def list_reviews(status: Optional[str] = None) -> List[Dict[str, Any]]:
    try:
        kwargs = {}
        if status:
            kwargs['FilterExpression'] = Attr('status').eq(status)
        return scan_all(dynamo.db_client.reviews_table, **kwargs)
    except Exception as e:
        logger.error(f"Error listing reviews: {str(e)}")
        raise
