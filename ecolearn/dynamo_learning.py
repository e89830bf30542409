"""
DynamoDB operations for learning content: modules, per-user module
progress, quizzes and quiz attempts.

Progress items:   PK user_id, SK module_id
Attempt items:    PK user_id, SK QUIZ#{quiz_id}#{submittedAt}
"""
from typing import Optional, Dict, Any, List
import logging

from boto3.dynamodb.conditions import Attr, Key

from ecolearn import dynamo
from ecolearn.dynamo import dynamodb_dict, python_dict, scan_all, query_all, utc_now

logger = logging.getLogger(__name__)


def build_attempt_sk(quiz_id: str, submitted_at: str) -> str:
    return f"QUIZ#{quiz_id}#{submitted_at}"


# ============= MODULES =============

async def get_module(module_id: str) -> Optional[Dict[str, Any]]:
    try:
        response = dynamo.db_client.modules_table.get_item(Key={'module_id': module_id})
        if 'Item' not in response:
            return None
        return python_dict(response['Item'])

    except Exception as e:
        logger.error(f"Error getting module {module_id}: {str(e)}")
        raise


async def put_module(module: Dict[str, Any]) -> Dict[str, Any]:
    try:
        module['updatedAt'] = utc_now().isoformat()
        dynamo.db_client.modules_table.put_item(Item=dynamodb_dict(module))
        return module

    except Exception as e:
        logger.error(f"Error saving module {module.get('module_id')}: {str(e)}")
        raise


async def delete_module(module_id: str) -> None:
    try:
        dynamo.db_client.modules_table.delete_item(Key={'module_id': module_id})
        logger.info(f"Deleted module {module_id}")
    except Exception as e:
        logger.error(f"Error deleting module {module_id}: {str(e)}")
        raise


async def list_modules(active_only: bool = False) -> List[Dict[str, Any]]:
    try:
        kwargs = {}
        if active_only:
            kwargs['FilterExpression'] = Attr('isActive').eq(True)
        return scan_all(dynamo.db_client.modules_table, **kwargs)

    except Exception as e:
        logger.error(f"Error listing modules: {str(e)}")
        raise


# ============= MODULE PROGRESS =============

async def get_progress(user_id: str, module_id: str) -> Optional[Dict[str, Any]]:
    """Get a user's progress record for one module"""
    try:
        response = dynamo.db_client.module_progress_table.get_item(
            Key={'user_id': user_id, 'module_id': module_id}
        )
        if 'Item' not in response:
            return None
        return python_dict(response['Item'])

    except Exception as e:
        logger.error(f"Error getting progress for user {user_id}, module {module_id}: {str(e)}")
        raise


async def put_progress(progress: Dict[str, Any]) -> Dict[str, Any]:
    try:
        progress['updatedAt'] = utc_now().isoformat()
        dynamo.db_client.module_progress_table.put_item(Item=dynamodb_dict(progress))
        return progress

    except Exception as e:
        logger.error(
            f"Error saving progress for user {progress.get('user_id')}, "
            f"module {progress.get('module_id')}: {str(e)}"
        )
        raise


async def list_user_progress(user_id: str) -> List[Dict[str, Any]]:
    try:
        return query_all(
            dynamo.db_client.module_progress_table,
            KeyConditionExpression=Key('user_id').eq(user_id)
        )
    except Exception as e:
        logger.error(f"Error listing progress for user {user_id}: {str(e)}")
        raise


# ============= QUIZZES =============

async def get_quiz(quiz_id: str) -> Optional[Dict[str, Any]]:
    try:
        response = dynamo.db_client.quizzes_table.get_item(Key={'quiz_id': quiz_id})
        if 'Item' not in response:
            return None
        return python_dict(response['Item'])

    except Exception as e:
        logger.error(f"Error getting quiz {quiz_id}: {str(e)}")
        raise


async def put_quiz(quiz: Dict[str, Any]) -> Dict[str, Any]:
    try:
        quiz['updatedAt'] = utc_now().isoformat()
        dynamo.db_client.quizzes_table.put_item(Item=dynamodb_dict(quiz))
        return quiz

    except Exception as e:
        logger.error(f"Error saving quiz {quiz.get('quiz_id')}: {str(e)}")
        raise


async def delete_quiz(quiz_id: str) -> None:
    try:
        dynamo.db_client.quizzes_table.delete_item(Key={'quiz_id': quiz_id})
        logger.info(f"Deleted quiz {quiz_id}")
    except Exception as e:
        logger.error(f"Error deleting quiz {quiz_id}: {str(e)}")
        raise


async def list_quizzes(active_only: bool = False, module_id: Optional[str] = None) -> List[Dict[str, Any]]:
    try:
        condition = None
        if active_only:
            condition = Attr('isActive').eq(True)
        if module_id:
            module_condition = Attr('module').eq(module_id)
            condition = module_condition if condition is None else condition & module_condition

        kwargs = {}
        if condition is not None:
            kwargs['FilterExpression'] = condition
        return scan_all(dynamo.db_client.quizzes_table, **kwargs)

    except Exception as e:
        logger.error(f"Error listing quizzes: {str(e)}")
        raise


async def list_daily_quizzes() -> List[Dict[str, Any]]:
    try:
        return scan_all(
            dynamo.db_client.quizzes_table,
            FilterExpression=Attr('isDailyQuestion').eq(True) & Attr('isActive').eq(True)
        )
    except Exception as e:
        logger.error(f"Error listing daily quizzes: {str(e)}")
        raise


# ============= QUIZ ATTEMPTS =============

async def has_attempt(user_id: str, quiz_id: str) -> bool:
    """True when any attempt for (user, quiz) has been stored"""
    try:
        response = dynamo.db_client.quiz_attempts_table.query(
            KeyConditionExpression=Key('user_id').eq(user_id) & Key('SK').begins_with(f"QUIZ#{quiz_id}#"),
            Limit=1
        )
        return len(response.get('Items', [])) > 0

    except Exception as e:
        logger.error(f"Error checking attempts for user {user_id}, quiz {quiz_id}: {str(e)}")
        raise


async def create_attempt(attempt: Dict[str, Any]) -> Dict[str, Any]:
    """Append an attempt record; attempts are never updated"""
    try:
        attempt['SK'] = build_attempt_sk(attempt['quiz_id'], attempt['submittedAt'])
        dynamo.db_client.quiz_attempts_table.put_item(Item=dynamodb_dict(attempt))
        logger.info(f"Stored attempt {attempt['attempt_id']} for user {attempt['user_id']}")
        return attempt

    except Exception as e:
        logger.error(f"Error creating quiz attempt: {str(e)}")
        raise


async def list_attempts(user_id: str, quiz_id: Optional[str] = None) -> List[Dict[str, Any]]:
    try:
        condition = Key('user_id').eq(user_id)
        if quiz_id:
            condition = condition & Key('SK').begins_with(f"QUIZ#{quiz_id}#")
        return query_all(dynamo.db_client.quiz_attempts_table, KeyConditionExpression=condition)

    except Exception as e:
        logger.error(f"Error listing attempts for user {user_id}: {str(e)}")
        raise
