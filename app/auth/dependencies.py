import os
import uuid
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from dotenv import load_dotenv

from app.models import UserRole
from app.schemas.actor import Actor

load_dotenv()

SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")

bearer_scheme = HTTPBearer()


# ---------------------------
# Verify token
# ---------------------------
def decode_access_token(token: str) -> dict:
    """
    Verify an access token issued by the identity provider and return its payload.

    Raises:
        JWTError: If the token is invalid, expired, or not an access token.
    """
    if not SECRET_KEY:
        raise JWTError("SECRET_KEY is not configured")
    payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    if payload.get("type") != "access":
        raise JWTError("Invalid token type. Expected 'access'.")
    return payload


async def get_current_actor(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> Actor:
    """
    Build the Actor for this request from the JWT access token.
    The token carries user_id and role; nothing is looked up here.
    Raises 401 if the token is invalid, expired, or its claims are malformed.
    """
    try:
        payload = decode_access_token(credentials.credentials)
        user_id = uuid.UUID(str(payload.get("user_id", "")))
        role = UserRole(payload.get("role"))
    except (JWTError, ValueError):  # ValueError for a bad UUID or unknown role
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return Actor(id=user_id, role=role)


async def is_teacher(actor: Actor = Depends(get_current_actor)) -> Actor:
    """
    Allow users with TEACHER role, and admins.
    """
    if actor.role not in (UserRole.TEACHER, UserRole.ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only teachers can access this resource"
        )
    return actor


async def is_student(actor: Actor = Depends(get_current_actor)) -> Actor:
    """
    Allow users with STUDENT role, and admins.
    """
    if actor.role not in (UserRole.STUDENT, UserRole.ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only students can access this resource"
        )
    return actor
