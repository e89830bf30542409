"""
DynamoDB operations for EcoLearn Service

Holds the lazily initialised client, the account and OTP operations, and
the Decimal conversion helpers every dynamo_* module shares.
"""
import boto3
from boto3.dynamodb.conditions import Attr, Key
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from decimal import Decimal
import uuid
import logging

from ecolearn.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


class DynamoDBClient:
    """DynamoDB client with lazy initialization"""

    def __init__(self):
        self.settings = settings
        self._dynamodb = None
        self._tables: Dict[str, Any] = {}

    @property
    def dynamodb(self):
        """Lazy initialization of DynamoDB resource"""
        if self._dynamodb is None:
            kwargs = {
                'region_name': self.settings.AWS_REGION,
            }

            # Only use endpoint_url for LocalStack
            if self.settings.DYNAMODB_ENDPOINT:
                kwargs['endpoint_url'] = self.settings.DYNAMODB_ENDPOINT

            # Explicit credentials only in LocalStack mode, otherwise boto3 resolves them
            if self.settings.DYNAMODB_ENDPOINT and self.settings.AWS_ACCESS_KEY_ID:
                kwargs['aws_access_key_id'] = self.settings.AWS_ACCESS_KEY_ID
                kwargs['aws_secret_access_key'] = self.settings.AWS_SECRET_ACCESS_KEY
                logger.info("Using explicit AWS credentials (LocalStack mode)")
            else:
                logger.info("Using default AWS credential chain")

            self._dynamodb = boto3.resource('dynamodb', **kwargs)
        return self._dynamodb

    def table(self, name: str):
        if name not in self._tables:
            self._tables[name] = self.dynamodb.Table(name)
        return self._tables[name]

    @property
    def users_table(self):
        return self.table(self.settings.DYNAMODB_USERS_TABLE)

    @property
    def modules_table(self):
        return self.table(self.settings.DYNAMODB_MODULES_TABLE)

    @property
    def module_progress_table(self):
        return self.table(self.settings.DYNAMODB_MODULE_PROGRESS_TABLE)

    @property
    def quizzes_table(self):
        return self.table(self.settings.DYNAMODB_QUIZZES_TABLE)

    @property
    def quiz_attempts_table(self):
        return self.table(self.settings.DYNAMODB_QUIZ_ATTEMPTS_TABLE)

    @property
    def challenges_table(self):
        return self.table(self.settings.DYNAMODB_CHALLENGES_TABLE)

    @property
    def rewards_table(self):
        return self.table(self.settings.DYNAMODB_REWARDS_TABLE)

    @property
    def redemptions_table(self):
        return self.table(self.settings.DYNAMODB_REDEMPTIONS_TABLE)

    @property
    def events_table(self):
        return self.table(self.settings.DYNAMODB_EVENTS_TABLE)

    @property
    def surveys_table(self):
        return self.table(self.settings.DYNAMODB_SURVEYS_TABLE)

    @property
    def reviews_table(self):
        return self.table(self.settings.DYNAMODB_REVIEWS_TABLE)

    @property
    def eco_pins_table(self):
        return self.table(self.settings.DYNAMODB_ECO_PINS_TABLE)

    @property
    def pin_requests_table(self):
        return self.table(self.settings.DYNAMODB_PIN_REQUESTS_TABLE)

    @property
    def otp_table(self):
        return self.table(self.settings.DYNAMODB_OTP_TABLE)


# Global instance
db_client = DynamoDBClient()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def parse_time(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO timestamp, assuming UTC when no offset is present"""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ============= USER DATA OPERATIONS =============

async def get_user(user_id: str) -> Optional[Dict[str, Any]]:
    """
    Get user by ID

    Args:
        user_id: User identifier

    Returns:
        User document or None if not found
    """
    try:
        response = db_client.users_table.get_item(Key={'user_id': user_id})

        if 'Item' not in response:
            return None

        return python_dict(response['Item'])

    except Exception as e:
        logger.error(f"Error getting user {user_id}: {str(e)}")
        raise


async def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    """Look up a user through the email GSI (emails are stored lower-cased)"""
    try:
        response = db_client.users_table.query(
            IndexName='email-index',
            KeyConditionExpression=Key('email').eq(email.lower())
        )
        items = response.get('Items', [])
        return python_dict(items[0]) if items else None

    except Exception as e:
        logger.error(f"Error getting user by email {email}: {str(e)}")
        raise


async def create_user(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a new account document

    Args:
        payload: name, email, passwordHash and optional role/school/phone/rollNumber

    Returns:
        Created user document
    """
    try:
        logger.info(f"create_user called with payload keys: {list(payload.keys())}")
        now = utc_now().isoformat()

        user_data = {
            'user_id': payload.get('userId') or new_id(),
            'name': payload['name'],
            'email': payload['email'].lower(),
            'passwordHash': payload['passwordHash'],
            'role': payload.get('role', 'student'),
            'school': payload.get('school'),
            'phone': payload.get('phone'),
            'rollNumber': payload.get('rollNumber'),
            'bio': payload.get('bio', ''),
            'emailVerified': payload.get('emailVerified', False),
            'points': 0,
            'monthlyPoints': 0,
            'weeklyPoints': 0,
            'lastWeeklyReset': now,
            'lastMonthlyReset': now,
            'streak': 0,
            'lastLogin': None,
            'lastDailyQuestion': None,
            'modulesCompleted': 0,
            'badges': [],
            'quizAttempts': {},
            'completedSurveys': [],
            'pointsHistory': [],
            'createdAt': now,
            'updatedAt': now,
        }

        db_client.users_table.put_item(Item=dynamodb_dict(user_data))

        logger.info(f"Created user: {user_data['user_id']} ({user_data['role']})")
        return user_data

    except Exception as e:
        logger.error(f"Error creating user: {str(e)}")
        raise


async def save_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """Persist the whole account document (last write wins)"""
    try:
        user['updatedAt'] = utc_now().isoformat()
        db_client.users_table.put_item(Item=dynamodb_dict(user))
        return user

    except Exception as e:
        logger.error(f"Error saving user {user.get('user_id')}: {str(e)}")
        raise


async def update_user(user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Update user attributes

    Args:
        user_id: User identifier
        updates: Dict of attributes to update

    Returns:
        Updated user document
    """
    try:
        updates['updatedAt'] = utc_now().isoformat()

        # DynamoDB reserved keywords that need ExpressionAttributeNames
        reserved_keywords = {'name', 'role', 'status', 'type', 'data', 'timestamp', 'points'}

        expr_attr_names = {}
        update_parts = []

        for k in updates.keys():
            if k.lower() in reserved_keywords:
                placeholder = f'#{k}'
                expr_attr_names[placeholder] = k
                update_parts.append(f'{placeholder} = :{k}')
            else:
                update_parts.append(f'{k} = :{k}')

        update_params = {
            'Key': {'user_id': user_id},
            'UpdateExpression': 'SET ' + ', '.join(update_parts),
            'ExpressionAttributeValues': {f':{k}': dynamodb_value(v) for k, v in updates.items()},
            'ConditionExpression': Attr('user_id').exists(),
            'ReturnValues': 'ALL_NEW'
        }

        if expr_attr_names:
            update_params['ExpressionAttributeNames'] = expr_attr_names

        response = db_client.users_table.update_item(**update_params)
        return python_dict(response['Attributes'])

    except Exception as e:
        logger.error(f"Error updating user {user_id}: {str(e)}")
        raise


async def list_users(role: Optional[str] = None) -> List[Dict[str, Any]]:
    """Scan all accounts, optionally restricted to one role"""
    try:
        kwargs = {}
        if role:
            kwargs['FilterExpression'] = Attr('role').eq(role)
        return scan_all(db_client.users_table, **kwargs)

    except Exception as e:
        logger.error(f"Error listing users: {str(e)}")
        raise


async def find_admin() -> Optional[Dict[str, Any]]:
    admins = await list_users(role='admin')
    return admins[0] if admins else None


async def delete_user(user_id: str) -> None:
    try:
        db_client.users_table.delete_item(Key={'user_id': user_id})
        logger.info(f"Deleted user {user_id}")
    except Exception as e:
        logger.error(f"Error deleting user {user_id}: {str(e)}")
        raise


# ============= OTP OPERATIONS =============

async def put_otp(record: Dict[str, Any]) -> Dict[str, Any]:
    """Store an OTP record, replacing any previous code for the same email"""
    try:
        db_client.otp_table.put_item(Item=dynamodb_dict(record))
        return record

    except Exception as e:
        logger.error(f"Error storing OTP for {record.get('email')}: {str(e)}")
        raise


async def get_otp(email: str) -> Optional[Dict[str, Any]]:
    try:
        response = db_client.otp_table.get_item(Key={'email': email.lower()})

        if 'Item' not in response:
            return None

        return python_dict(response['Item'])

    except Exception as e:
        logger.error(f"Error getting OTP for {email}: {str(e)}")
        raise


async def delete_otp(email: str) -> None:
    try:
        db_client.otp_table.delete_item(Key={'email': email.lower()})
    except Exception as e:
        logger.error(f"Error deleting OTP for {email}: {str(e)}")
        raise


# ============= GENERIC DOCUMENT OPERATIONS =============

def get_document(table, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    response = table.get_item(Key=key)
    if 'Item' not in response:
        return None
    return python_dict(response['Item'])


def put_document(table, item: Dict[str, Any]) -> Dict[str, Any]:
    item['updatedAt'] = utc_now().isoformat()
    table.put_item(Item=dynamodb_dict(item))
    return item


def delete_document(table, key: Dict[str, Any]) -> None:
    table.delete_item(Key=key)


# ============= HELPER FUNCTIONS =============

def scan_all(table, **kwargs) -> List[Dict[str, Any]]:
    """Scan a table following LastEvaluatedKey pagination"""
    items = []
    while True:
        response = table.scan(**kwargs)
        items.extend(python_dict(item) for item in response.get('Items', []))
        last_key = response.get('LastEvaluatedKey')
        if not last_key:
            return items
        kwargs['ExclusiveStartKey'] = last_key


def query_all(table, **kwargs) -> List[Dict[str, Any]]:
    """Query a table or index following LastEvaluatedKey pagination"""
    items = []
    while True:
        response = table.query(**kwargs)
        items.extend(python_dict(item) for item in response.get('Items', []))
        last_key = response.get('LastEvaluatedKey')
        if not last_key:
            return items
        kwargs['ExclusiveStartKey'] = last_key


def dynamodb_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert Python dict to DynamoDB compatible dict (handles Decimal)"""
    return {k: dynamodb_value(v) for k, v in data.items()}


def dynamodb_value(value: Any) -> Any:
    """Convert Python value to DynamoDB compatible value"""
    if isinstance(value, float):
        return Decimal(str(value))
    elif isinstance(value, dict):
        return {k: dynamodb_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [dynamodb_value(item) for item in value]
    return value


def python_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert DynamoDB dict to Python dict (handles Decimal)"""
    return {k: python_value(v) for k, v in data.items()}


def python_value(value: Any) -> Any:
    """Convert DynamoDB value to Python value"""
    if isinstance(value, Decimal):
        return int(value) if value % 1 == 0 else float(value)
    elif isinstance(value, dict):
        return {k: python_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [python_value(item) for item in value]
    return value


def snake_to_camel(snake_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Convert snake_case keys to camelCase for API responses"""
    camel_dict = {}
    for key, value in snake_dict.items():
        # user_id -> userId, module_id -> moduleId
        if '_' in key:
            parts = key.split('_')
            camel_key = parts[0] + ''.join(word.capitalize() for word in parts[1:])
        else:
            camel_key = key
        camel_dict[camel_key] = value
    return camel_dict


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """API view of an account: camelCase keys, no password hash"""
    data = snake_to_camel(user)
    data.pop('passwordHash', None)
    return data
