"""
Shared fixtures: moto-backed DynamoDB tables, accounts and an API client
"""
import pytest
import boto3
from httpx import ASGITransport, AsyncClient
from moto import mock_aws

from ecolearn import dynamo
from ecolearn.config import get_settings
from ecolearn.middleware.auth import create_access_token
from ecolearn.services.auth_service import hash_password
from ecolearn.tables import table_definitions


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS credentials for moto"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def dynamodb_tables(aws_credentials, monkeypatch):
    """Create every service table in moto and point the data layer at it"""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        for definition in table_definitions(get_settings()):
            dynamodb.create_table(**definition)

        monkeypatch.setattr(dynamo, "db_client", dynamo.DynamoDBClient())
        yield dynamodb


@pytest.fixture
def create_account(dynamodb_tables):
    """Factory storing an account with a real bcrypt hash"""
    counter = {'n': 0}

    async def _create(role="student", school="Green Valley High", password="secret123", **extra):
        counter['n'] += 1
        payload = {
            'name': extra.pop('name', f"{role.title()} {counter['n']}"),
            'email': extra.pop('email', f"{role}{counter['n']}@example.com"),
            'passwordHash': hash_password(password),
            'role': role,
            'school': school,
            'emailVerified': True,
        }
        user = await dynamo.create_user(payload)
        if extra:
            user.update(extra)
            await dynamo.save_user(user)
        return user

    return _create


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}
    return _headers


@pytest.fixture
async def client(dynamodb_tables):
    from ecolearn.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
