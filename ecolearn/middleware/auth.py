"""
Authentication middleware for EcoLearn Service

Issues and validates HS256 JWTs and resolves the caller's account
(user id, role, school) on every protected request.
"""
import jwt
from datetime import timedelta
from typing import Optional, Dict, Any, List
from fastapi import HTTPException, Security, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import logging

from ecolearn import dynamo
from ecolearn.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer()


def create_access_token(user: Dict[str, Any]) -> str:
    """Sign a token carrying the account id and role"""
    now = dynamo.utc_now()
    payload = {
        'id': user['user_id'],
        'role': user.get('role', 'student'),
        'iat': now,
        'exp': now + timedelta(days=settings.JWT_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode a JWT

    Raises:
        HTTPException 401: expired or invalid token
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={'verify_exp': True, 'require': ['id', 'exp']}
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized to access this route"
        )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> Dict[str, Any]:
    """
    Dependency to get the authenticated account document

    Returns:
        The stored account (role and school come from storage, not the token)
    """
    payload = verify_token(credentials.credentials)
    user = await dynamo.get_user(payload['id'])

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User no longer exists"
        )

    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False))
) -> Optional[Dict[str, Any]]:
    """Current account if a valid token is sent, otherwise None"""
    if credentials is None:
        return None

    try:
        payload = verify_token(credentials.credentials)
    except HTTPException:
        return None

    return await dynamo.get_user(payload['id'])


def require_roles(allowed_roles: List[str]):
    """
    Dependency factory restricting an endpoint to some roles

    Example:
        @router.post("/")
        async def create(user: dict = Depends(require_roles(["teacher", "admin"]))):
            ...
    """
    async def dependency(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if user.get('role') not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User role must be one of: {', '.join(allowed_roles)}"
            )
        return user

    return dependency


def require_teacher():
    """Teacher or admin"""
    return require_roles(["teacher", "admin"])


def require_admin():
    return require_roles(["admin"])
