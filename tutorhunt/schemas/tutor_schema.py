from pydantic import BaseModel, ConfigDict, EmailStr, StringConstraints, field_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional, List
from bleach import clean

class CamelModel(BaseModel):
    """Accepts and renders camelCase keys (tutorId, totalPages...) while the code uses snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

############################
###### TUTOR SCHEMAS #######
############################

class TutorBase(CamelModel):
    """Base tutor data"""
    name: Optional[Annotated[str, StringConstraints(max_length=100)]] = None
    language: Annotated[str, StringConstraints(min_length=1, max_length=100, strip_whitespace=True)]
    price: float
    image: Optional[str] = None
    description: Optional[str] = None

    @field_validator('name', 'language')
    def sanitize_text(cls, v):
        return clean(v, strip=True) if v is not None else v

    @field_validator('description')
    def sanitize_description(cls, v):
        return clean(v) if v is not None else v

    @field_validator('price')
    def validate_price(cls, v):
        if v < 0:
            raise ValueError('Price cannot be negative')
        return v

class TutorCreate(TutorBase):
    """
    Tutor creation data. The email is the owner of the listing and defaults
    to the logged in user. The review counter is never taken from the client.
    """
    email: Optional[EmailStr] = None

class TutorUpdate(CamelModel):
    """
    Tutor update data. Only these four fields can be changed after creation.
    Sending null for image or description clears it, language and price are required columns.
    """
    image: Optional[str] = None
    language: Optional[Annotated[str, StringConstraints(min_length=1, max_length=100, strip_whitespace=True)]] = None
    price: Optional[float] = None
    description: Optional[str] = None

    @field_validator('language')
    def sanitize_language(cls, v):
        if v is None:
            raise ValueError('Language cannot be null')
        return clean(v, strip=True)

    @field_validator('description')
    def sanitize_description(cls, v):
        return clean(v) if v is not None else v

    @field_validator('price')
    def validate_price(cls, v):
        if v is None:
            raise ValueError('Price cannot be null')
        if v < 0:
            raise ValueError('Price cannot be negative')
        return v

class TutorResponse(CamelModel):
    """Tutor response data. Values were sanitized on the way in."""
    id: int
    name: Optional[str] = None
    email: str
    language: str
    price: float
    image: Optional[str] = None
    description: Optional[str] = None
    review: int

class TutorPage(CamelModel):
    """One page of the tutor listing"""
    items: List[TutorResponse]
    page: int
    total_pages: int
    total_items: int

class TutorMutationResponse(CamelModel):
    success: bool
    message: str
    tutor: TutorResponse

class TutorDeletedResponse(CamelModel):
    success: bool
    message: str
    deleted: bool

class StatsResponse(CamelModel):
    """Dashboard summary"""
    total_tutors: int
    total_languages: int
    total_reviews: int
    total_users: int
