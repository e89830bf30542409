"""
DynamoDB operations for eco-map pins and the requests students file for them
"""
from typing import Optional, Dict, Any, List
import logging

from boto3.dynamodb.conditions import Attr

from ecolearn import dynamo
from ecolearn.dynamo import get_document, put_document, delete_document, scan_all

logger = logging.getLogger(__name__)


# ============= PINS =============

async def get_pin(pin_id: str) -> Optional[Dict[str, Any]]:
    try:
        return get_document(dynamo.db_client.eco_pins_table, {'pin_id': pin_id})
    except Exception as e:
        logger.error(f"Error getting pin {pin_id}: {str(e)}")
        raise


async def save_pin(pin: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return put_document(dynamo.db_client.eco_pins_table, pin)
    except Exception as e:
        logger.error(f"Error saving pin {pin.get('pin_id')}: {str(e)}")
        raise


async def delete_pin(pin_id: str) -> None:
    try:
        delete_document(dynamo.db_client.eco_pins_table, {'pin_id': pin_id})
        logger.info(f"Deleted pin {pin_id}")
    except Exception as e:
        logger.error(f"Error deleting pin {pin_id}: {str(e)}")
        raise


async def list_pins(active_only: bool = False) -> List[Dict[str, Any]]:
    try:
        kwargs = {}
        if active_only:
            kwargs['FilterExpression'] = Attr('isActive').eq(True)
        return scan_all(dynamo.db_client.eco_pins_table, **kwargs)
    except Exception as e:
        logger.error(f"Error listing pins: {str(e)}")
        raise


# ============= PIN REQUESTS =============

async def get_pin_request(request_id: str) -> Optional[Dict[str, Any]]:
    try:
        return get_document(dynamo.db_client.pin_requests_table, {'request_id': request_id})
    except Exception as e:
        logger.error(f"Error getting pin request {request_id}: {str(e)}")
        raise


async def save_pin_request(pin_request: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return put_document(dynamo.db_client.pin_requests_table, pin_request)
    except Exception as e:
        logger.error(f"Error saving pin request {pin_request.get('request_id')}: {str(e)}")
        raise


async def list_pin_requests(
    status: Optional[str] = None,
    requested_by: Optional[str] = None
) -> List[Dict[str, Any]]:
    try:
        condition = None
        if status:
            condition = Attr('status').eq(status)
        if requested_by:
            by_user = Attr('requestedBy').eq(requested_by)
            condition = by_user if condition is None else condition & by_user

        kwargs = {}
        if condition is not None:
            kwargs['FilterExpression'] = condition
        return scan_all(dynamo.db_client.pin_requests_table, **kwargs)
    except Exception as e:
        logger.error(f"Error listing pin requests: {str(e)}")
        raise
