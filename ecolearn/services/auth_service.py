"""
Auth Service

Email OTP verification, registration, login and account maintenance.
Passwords are hashed with bcrypt; tokens are issued by the auth middleware.
"""
import logging
import secrets
from datetime import timedelta
from typing import Dict, Any, Optional

import bcrypt

from ecolearn import dynamo
from ecolearn.config import get_settings
from ecolearn.errors import ConflictError, UnauthorizedError, ValidationError
from ecolearn.logic.gamification import update_login_streak
from ecolearn.middleware.auth import create_access_token

logger = logging.getLogger(__name__)
settings = get_settings()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def check_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))


def generate_otp() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


class AuthService:

    # ========== EMAIL OTP ==========

    async def send_email_otp(self, email: str) -> Dict[str, Any]:
        """
        Issue a fresh 6-digit code for this email, replacing any previous one.

        Delivery is handled outside this service; the code is logged and,
        in the local environment, echoed back under debug.otp.
        """
        email = email.lower()
        if await dynamo.get_user_by_email(email):
            raise ConflictError("User already exists with this email")

        now = dynamo.utc_now()
        otp = generate_otp()
        await dynamo.put_otp({
            'email': email,
            'otp': otp,
            'verificationToken': secrets.token_hex(32),
            'verified': False,
            'expiresAt': (now + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)).isoformat(),
            'createdAt': now.isoformat(),
        })
        logger.info(f"OTP issued for {email}")

        result = {'email': email, 'expiresInMinutes': settings.OTP_EXPIRE_MINUTES}
        if settings.ENVIRONMENT == "local":
            logger.info(f"Local OTP for {email}: {otp}")
            result['debug'] = {'otp': otp}
        return result

    async def verify_email_otp(self, email: str, otp: str) -> Dict[str, Any]:
        record = await dynamo.get_otp(email)
        if not record or record.get('otp') != otp:
            logger.warning(f"OTP verification failed for {email}")
            raise ValidationError("Invalid OTP or OTP not found")

        if dynamo.parse_time(record['expiresAt']) < dynamo.utc_now():
            await dynamo.delete_otp(email)
            raise ValidationError("OTP has expired")

        record['verified'] = True
        await dynamo.put_otp(record)
        return {'email': record['email'], 'verificationToken': record['verificationToken']}

    # ========== ACCOUNTS ==========

    async def register(self, data: Dict[str, Any], role: str = 'student') -> Dict[str, Any]:
        """
        Create an account from a verified email.

        Returns:
            {token, user}
        """
        email = data['email'].lower()
        token = data.get('emailVerificationToken')
        if not token:
            raise ValidationError("Email verification is required")

        record = await dynamo.get_otp(email)
        if not record or not record.get('verified') or record.get('verificationToken') != token:
            raise ValidationError("Email verification required or invalid verification token")

        if await dynamo.get_user_by_email(email):
            raise ConflictError("User already exists with this email")

        user = await dynamo.create_user({
            'name': data['name'],
            'email': email,
            'passwordHash': hash_password(data['password']),
            'role': role,
            'school': data.get('school'),
            'phone': data.get('phone'),
            'rollNumber': data.get('rollNumber'),
            'emailVerified': True,
        })
        await dynamo.delete_otp(email)

        return {'token': create_access_token(user), 'user': dynamo.public_user(user)}

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        user = await dynamo.get_user_by_email(email)
        if not user or not check_password(password, user.get('passwordHash')):
            logger.warning(f"Failed login for {email}")
            raise UnauthorizedError("Invalid credentials")

        update_login_streak(user)
        await dynamo.save_user(user)

        return {'token': create_access_token(user), 'user': dynamo.public_user(user)}

    async def update_details(self, user: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
        if not updates:
            return dynamo.public_user(user)
        updated = await dynamo.update_user(user['user_id'], updates)
        return dynamo.public_user(updated)

    async def update_password(self, user: Dict[str, Any], current_password: str, new_password: str) -> Dict[str, Any]:
        if not check_password(current_password, user.get('passwordHash')):
            raise UnauthorizedError("Password is incorrect")

        user['passwordHash'] = hash_password(new_password)
        await dynamo.save_user(user)
        return {'token': create_access_token(user)}

    # ========== ADMIN PROVISIONING ==========

    async def provision_admin(self, name: str, email: str, password: str) -> Dict[str, Any]:
        """
        Create the admin account unless one already exists.

        Returns:
            {created, user}; created is False when an admin was already present
        """
        existing = await dynamo.find_admin()
        if existing:
            logger.info(f"Admin already exists: {existing['email']}")
            return {'created': False, 'user': dynamo.public_user(existing)}

        if await dynamo.get_user_by_email(email):
            raise ConflictError("User already exists with this email")

        admin = await dynamo.create_user({
            'name': name,
            'email': email,
            'passwordHash': hash_password(password),
            'role': 'admin',
            'school': 'ADMIN',
            'emailVerified': True,
        })
        logger.info(f"Admin account created: {admin['email']}")
        return {'created': True, 'user': dynamo.public_user(admin)}


auth_service = AuthService()
