"""
Tests for OTP verification, registration, login and admin provisioning
"""
import logging
import pytest
from datetime import timedelta

from ecolearn import dynamo
from ecolearn.errors import ConflictError, UnauthorizedError, ValidationError
from ecolearn.middleware.auth import verify_token
from ecolearn.services import auth_service as auth_service_module
from ecolearn.services.auth_service import auth_service, check_password, hash_password


class TestPasswords:

    def test_hash_roundtrip(self):
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert check_password("secret123", hashed)
        assert not check_password("wrong", hashed)

    def test_missing_hash(self):
        assert check_password("secret123", None) is False


class TestEmailOtp:

    async def test_send_and_verify(self, dynamodb_tables):
        sent = await auth_service.send_email_otp("Ana@Example.com")
        assert sent['email'] == "ana@example.com"
        otp = sent['debug']['otp']
        assert len(otp) == 6

        verified = await auth_service.verify_email_otp("ana@example.com", otp)
        assert len(verified['verificationToken']) == 64

    async def test_wrong_code(self, dynamodb_tables):
        await auth_service.send_email_otp("ana@example.com")
        with pytest.raises(ValidationError, match="Invalid OTP"):
            await auth_service.verify_email_otp("ana@example.com", "not-it")

    async def test_expired_code_is_deleted(self, dynamodb_tables):
        sent = await auth_service.send_email_otp("ana@example.com")
        record = await dynamo.get_otp("ana@example.com")
        record['expiresAt'] = (dynamo.utc_now() - timedelta(minutes=1)).isoformat()
        await dynamo.put_otp(record)

        with pytest.raises(ValidationError, match="expired"):
            await auth_service.verify_email_otp("ana@example.com", sent['debug']['otp'])
        assert await dynamo.get_otp("ana@example.com") is None


class TestRegisterAndLogin:

    async def _verified_token(self, email):
        sent = await auth_service.send_email_otp(email)
        verified = await auth_service.verify_email_otp(email, sent['debug']['otp'])
        return verified['verificationToken']

    async def test_register_requires_verification(self, dynamodb_tables):
        with pytest.raises(ValidationError):
            await auth_service.register({'name': "Ana", 'email': "ana@example.com", 'password': "secret123"})

        await auth_service.send_email_otp("ana@example.com")
        with pytest.raises(ValidationError):
            await auth_service.register({
                'name': "Ana", 'email': "ana@example.com", 'password': "secret123",
                'emailVerificationToken': "forged",
            })

    async def test_register_then_login(self, dynamodb_tables):
        token = await self._verified_token("ana@example.com")
        registered = await auth_service.register({
            'name': "Ana", 'email': "ana@example.com", 'password': "secret123",
            'school': "Green Valley High", 'emailVerificationToken': token,
        })

        assert registered['user']['role'] == 'student'
        assert 'passwordHash' not in registered['user']
        assert await dynamo.get_otp("ana@example.com") is None

        logged_in = await auth_service.login("ana@example.com", "secret123")
        payload = verify_token(logged_in['token'])
        assert payload['id'] == registered['user']['userId']
        assert payload['role'] == 'student'
        assert logged_in['user']['streak'] == 1

    async def test_duplicate_email(self, create_account):
        await create_account(email="ana@example.com")
        with pytest.raises(ConflictError):
            await auth_service.send_email_otp("ana@example.com")

    async def test_bad_credentials(self, create_account):
        await create_account(email="ana@example.com")
        with pytest.raises(UnauthorizedError):
            await auth_service.login("ana@example.com", "wrong-password")
        with pytest.raises(UnauthorizedError):
            await auth_service.login("nobody@example.com", "secret123")

    async def test_update_password_checks_current(self, create_account):
        user = await create_account(password="secret123")
        with pytest.raises(UnauthorizedError):
            await auth_service.update_password(user, "nope", "newsecret")

        await auth_service.update_password(user, "secret123", "newsecret")
        stored = await dynamo.get_user(user['user_id'])
        assert check_password("newsecret", stored['passwordHash'])


class TestAdminProvisioning:

    async def test_idempotent(self, dynamodb_tables):
        first = await auth_service.provision_admin("Admin", "admin@ecolearn.local", "supersecret")
        second = await auth_service.provision_admin("Other", "other@ecolearn.local", "supersecret")

        assert first['created'] is True
        assert first['user']['role'] == 'admin'
        assert second['created'] is False
        assert second['user']['email'] == "admin@ecolearn.local"
        assert len(await dynamo.list_users(role='admin')) == 1


class TestOtpLogging:

    async def test_code_stays_out_of_logs_outside_local(self, dynamodb_tables, monkeypatch, caplog):
        monkeypatch.setattr(auth_service_module.settings, "ENVIRONMENT", "production")

        logger_name = auth_service_module.logger.name
        with caplog.at_level(logging.DEBUG, logger=logger_name):
            sent = await auth_service.send_email_otp("ana@example.com")

        code = (await dynamo.get_otp("ana@example.com"))['otp']
        messages = [r.getMessage() for r in caplog.records if r.name == logger_name]
        assert 'debug' not in sent
        assert "OTP issued for ana@example.com" in messages
        assert not any(code in m for m in messages)
