from typing import Optional
from fastapi import HTTPException
from tutorhunt.database.database import BookedTutor

# Largest id a 64-bit INTEGER column can hold
MAX_ID = 2**63 - 1

def parse_positive_int(value: Optional[str], default: int, maximum: Optional[int] = None) -> int:
    """Parse a query parameter, falling back to the default when it is missing, not a number or below 1"""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < 1:
        return default
    if maximum is not None:
        return min(number, maximum)
    return number

def parse_tutor_id(tutor_id: str) -> int:
    """Turn a path id into an int. Ids that cannot exist in the table are reported as a missing tutor."""
    try:
        number = int(tutor_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Tutor not found")
    if number < 1 or number > MAX_ID:
        raise HTTPException(status_code=404, detail="Tutor not found")
    return number

def normalize_category(category: str) -> str:
    """'ENGLISH' -> 'English'. Languages are stored with only the first letter capitalized."""
    return category.lower().capitalize()

def booking_to_dict(booking: BookedTutor) -> dict:
    """Flatten a booking row and its free-form details into one dict"""
    return {
        **(booking.details or {}),
        "id": booking.id,
        "tutor_id": booking.tutor_id,
        "user_email": booking.user_email,
        "has_reviewed": booking.has_reviewed,
        "tutor_email": booking.tutor_email,
        "name": booking.name,
        "language": booking.language,
        "price": booking.price,
        "image": booking.image,
        "date": booking.date,
    }
