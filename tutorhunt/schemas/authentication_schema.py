from pydantic import BaseModel, EmailStr

class SessionRequest(BaseModel):
    """Body of POST /jwt"""
    email: EmailStr

class StatusResponse(BaseModel):
    """Generic success response"""
    success: bool
    message: str

class DecodedAccessToken(BaseModel):
    """
    Decoded session token data
        Args:
        - email (str): User email
        - exp (int): Token expiration time
    """
    email: str
    exp: int
