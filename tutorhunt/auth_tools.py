from typing import Any, Optional
from fastapi import Depends, HTTPException
from fastapi.security import APIKeyCookie
from jose import JWTError, jwt
from tutorhunt.logger import logger, security_logger
from tutorhunt.schemas.authentication_schema import DecodedAccessToken
from tutorhunt.config import get_settings
from datetime import datetime, timedelta, timezone

# CONSTANTS
SECRET_KEY = get_settings().secret_key
ALGORITHM = get_settings().hash_algorithm
TOKEN_EXPIRE_MINUTES = get_settings().access_token_expire_minutes
TOKEN_COOKIE_NAME = get_settings().token_cookie_name

# security scheme, the token travels in an http-only cookie
cookie_scheme = APIKeyCookie(name=TOKEN_COOKIE_NAME, auto_error=False)

def create_access_token(email: str, expires_in: int = TOKEN_EXPIRE_MINUTES) -> str:
    """Create a signed session token for the given email"""
    to_encode = {
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=expires_in),
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

def verify_token(token: Optional[str]) -> DecodedAccessToken:
    """
    Verify a session token and return its claims.

    Args:
    - token (str): The raw token, None when the cookie is missing

    Returns:
    - DecodedAccessToken: The caller's identity

    Raises:
    - HTTPException(401): If the token is missing, badly signed, expired or has no email
    """
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized access. No token provided.")

    try:
        payload: dict[str, Any] = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"Error decoding token: {str(e)}")
        raise HTTPException(status_code=401, detail="Unauthorized access. Invalid token.")

    if not payload.get("email"):
        raise HTTPException(status_code=401, detail="Unauthorized access. Token has no email.")

    return DecodedAccessToken(**payload)

##################################
### AUTHORIZATION DEPENDENCIES ###
##################################

def get_current_user(token: Optional[str] = Depends(cookie_scheme)) -> DecodedAccessToken:
    """
    Get the current user from the session cookie.

    Args:
    - token (str): The user's token

    Returns:
    - DecodedAccessToken: The user's identity
    """
    return verify_token(token)

def require_matching_email(current_user: DecodedAccessToken, email: str) -> DecodedAccessToken:
    """
    Verify that the caller acts on their own data.

    Raises:
    - HTTPException(403): If the requested email is not the token's email
    """
    if current_user.email != email:
        security_logger.log_security_event("identity_mismatch", current_user.email, {"requested_email": email})
        raise HTTPException(status_code=403, detail="Forbidden access.")
    return current_user
