"""
Authentication router issuing and clearing the session cookie.
The client logs in with its identity provider and exchanges the email for a
signed token, which is stored in an http-only cookie named 'token'.
"""
from fastapi import APIRouter, Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address
from tutorhunt.auth_tools import create_access_token, TOKEN_COOKIE_NAME, TOKEN_EXPIRE_MINUTES
from tutorhunt.schemas.authentication_schema import SessionRequest, StatusResponse
from tutorhunt.logger import logger, security_logger
from tutorhunt.config import get_settings

router = APIRouter()

# Add rate limiting
limiter = Limiter(key_func=get_remote_address)

def cookie_options() -> dict:
    """Production cookies are sent cross-site over https only, local ones stay same-site"""
    if get_settings().local:
        return {"httponly": True, "secure": False, "samesite": "strict"}
    return {"httponly": True, "secure": True, "samesite": "none"}

@router.post('/jwt', response_model=StatusResponse)
@limiter.limit(lambda: get_settings().token_rate_limit)
def issue_token(request: Request, response: Response, session: SessionRequest):
    """
    Issue a session cookie for the given email. The token is valid for 10 hours.

    Returns:
    - StatusResponse: success message, the token itself is only in the cookie
    """
    token = create_access_token(session.email)
    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=token,
        max_age=TOKEN_EXPIRE_MINUTES * 60,
        **cookie_options()
    )
    security_logger.log_security_event("token_issued", session.email, {"client": request.client.host if request.client else None})
    logger.info(f"Session token issued for {session.email}")
    return {"success": True, "message": "Token issued"}

@router.get('/logout', response_model=StatusResponse)
def logout(request: Request, response: Response):
    """Clear the session cookie"""
    response.delete_cookie(key=TOKEN_COOKIE_NAME, **cookie_options())
    return {"success": True, "message": "Logged out successfully"}
