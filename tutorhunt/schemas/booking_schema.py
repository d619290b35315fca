from pydantic import ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from bleach import clean
from tutorhunt.schemas.tutor_schema import CamelModel
from tutorhunt.utilities import MAX_ID

class BookingBase(CamelModel):
    """
    Base booking data. A booking links a user to a tutor they have engaged.
    Clients usually copy the tutor card into the booking, so unknown keys are
    accepted and stored as they are.
    """
    model_config = ConfigDict(extra="allow")

    tutor_id: int = Field(ge=1, le=MAX_ID)
    tutor_email: Optional[str] = None
    name: Optional[str] = None
    language: Optional[str] = None
    price: Optional[float] = None
    image: Optional[str] = None
    date: Optional[str] = None

class BookingCreate(BookingBase):
    """Booking creation data. userEmail defaults to the logged in user."""
    user_email: Optional[EmailStr] = None
    has_reviewed: Optional[bool] = None # Ignored, every booking starts unreviewed

    @field_validator('name', 'language')
    def sanitize_text(cls, v):
        return clean(v, strip=True) if v is not None else v

class BookingResponse(BookingBase):
    """Booking response data"""
    id: int
    user_email: str
    has_reviewed: bool

class BookingMutationResponse(CamelModel):
    success: bool
    message: str
    booking: BookingResponse

class ReviewResponse(CamelModel):
    """Review submission result, review is the tutor's new review count"""
    success: bool
    message: str
    review: int
