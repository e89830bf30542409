"""
DynamoDB table layouts for EcoLearn Service

Shared by scripts/create_tables_local.py and the test fixtures so both
create exactly the tables the data layer reads from.
"""
from typing import Any, Dict, List

from ecolearn.config import Settings


def _simple_table(name: str, key: str) -> Dict[str, Any]:
    return {
        'TableName': name,
        'KeySchema': [{'AttributeName': key, 'KeyType': 'HASH'}],
        'AttributeDefinitions': [{'AttributeName': key, 'AttributeType': 'S'}],
        'BillingMode': 'PAY_PER_REQUEST'
    }


def table_definitions(settings: Settings) -> List[Dict[str, Any]]:
    """Return create_table kwargs for every table the service uses"""
    return [
        # Users table with email lookup
        {
            'TableName': settings.DYNAMODB_USERS_TABLE,
            'KeySchema': [{'AttributeName': 'user_id', 'KeyType': 'HASH'}],
            'AttributeDefinitions': [
                {'AttributeName': 'user_id', 'AttributeType': 'S'},
                {'AttributeName': 'email', 'AttributeType': 'S'}
            ],
            'GlobalSecondaryIndexes': [{
                'IndexName': 'email-index',
                'KeySchema': [{'AttributeName': 'email', 'KeyType': 'HASH'}],
                'Projection': {'ProjectionType': 'ALL'}
            }],
            'BillingMode': 'PAY_PER_REQUEST'
        },
        # One progress item per (user, module)
        {
            'TableName': settings.DYNAMODB_MODULE_PROGRESS_TABLE,
            'KeySchema': [
                {'AttributeName': 'user_id', 'KeyType': 'HASH'},
                {'AttributeName': 'module_id', 'KeyType': 'RANGE'}
            ],
            'AttributeDefinitions': [
                {'AttributeName': 'user_id', 'AttributeType': 'S'},
                {'AttributeName': 'module_id', 'AttributeType': 'S'}
            ],
            'BillingMode': 'PAY_PER_REQUEST'
        },
        # Append-only attempts, SK = QUIZ#{quiz_id}#{submittedAt}
        {
            'TableName': settings.DYNAMODB_QUIZ_ATTEMPTS_TABLE,
            'KeySchema': [
                {'AttributeName': 'user_id', 'KeyType': 'HASH'},
                {'AttributeName': 'SK', 'KeyType': 'RANGE'}
            ],
            'AttributeDefinitions': [
                {'AttributeName': 'user_id', 'AttributeType': 'S'},
                {'AttributeName': 'SK', 'AttributeType': 'S'}
            ],
            'BillingMode': 'PAY_PER_REQUEST'
        },
        # Redemptions with per-user history index
        {
            'TableName': settings.DYNAMODB_REDEMPTIONS_TABLE,
            'KeySchema': [{'AttributeName': 'redemption_id', 'KeyType': 'HASH'}],
            'AttributeDefinitions': [
                {'AttributeName': 'redemption_id', 'AttributeType': 'S'},
                {'AttributeName': 'user_id', 'AttributeType': 'S'}
            ],
            'GlobalSecondaryIndexes': [{
                'IndexName': 'user_id-index',
                'KeySchema': [{'AttributeName': 'user_id', 'KeyType': 'HASH'}],
                'Projection': {'ProjectionType': 'ALL'}
            }],
            'BillingMode': 'PAY_PER_REQUEST'
        },
        # One platform review per account, looked up by user_id
        {
            'TableName': settings.DYNAMODB_REVIEWS_TABLE,
            'KeySchema': [{'AttributeName': 'review_id', 'KeyType': 'HASH'}],
            'AttributeDefinitions': [
                {'AttributeName': 'review_id', 'AttributeType': 'S'},
                {'AttributeName': 'user_id', 'AttributeType': 'S'}
            ],
            'GlobalSecondaryIndexes': [{
                'IndexName': 'user_id-index',
                'KeySchema': [{'AttributeName': 'user_id', 'KeyType': 'HASH'}],
                'Projection': {'ProjectionType': 'ALL'}
            }],
            'BillingMode': 'PAY_PER_REQUEST'
        },
        _simple_table(settings.DYNAMODB_MODULES_TABLE, 'module_id'),
        _simple_table(settings.DYNAMODB_QUIZZES_TABLE, 'quiz_id'),
        _simple_table(settings.DYNAMODB_CHALLENGES_TABLE, 'challenge_id'),
        _simple_table(settings.DYNAMODB_REWARDS_TABLE, 'reward_id'),
        _simple_table(settings.DYNAMODB_EVENTS_TABLE, 'event_id'),
        _simple_table(settings.DYNAMODB_SURVEYS_TABLE, 'survey_id'),
        _simple_table(settings.DYNAMODB_ECO_PINS_TABLE, 'pin_id'),
        _simple_table(settings.DYNAMODB_PIN_REQUESTS_TABLE, 'request_id'),
        _simple_table(settings.DYNAMODB_OTP_TABLE, 'email'),
    ]
