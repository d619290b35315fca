"""
Data access for the booked_tutors table.
A booking is identified by (tutor_id, user_email); the table has a unique
constraint on that pair.
"""
from typing import Optional, List
from sqlalchemy.orm import Session
from tutorhunt.database.database import BookedTutor

# Columns of BookedTutor a client may fill, everything else goes to details
BOOKING_FIELDS = ("tutor_email", "name", "language", "price", "image", "date")

def find_booking(db: Session, tutor_id: int, user_email: str) -> Optional[BookedTutor]:
    return db.query(BookedTutor).filter(
        BookedTutor.tutor_id == tutor_id,
        BookedTutor.user_email == user_email
    ).first()

def list_bookings_for_user(db: Session, user_email: str) -> List[BookedTutor]:
    return db.query(BookedTutor).filter(BookedTutor.user_email == user_email).order_by(BookedTutor.id.asc()).all()

def create_booking(db: Session, tutor_id: int, user_email: str, booking_data: dict, details: Optional[dict] = None) -> BookedTutor:
    """
    Insert a booking. has_reviewed always starts as False.
    An existing (tutor_id, user_email) pair makes the commit raise IntegrityError.
    """
    booking = BookedTutor(
        tutor_id=tutor_id,
        user_email=user_email,
        has_reviewed=False,
        details=details or {},
        **{field: booking_data.get(field) for field in BOOKING_FIELDS}
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking

def mark_reviewed(db: Session, tutor_id: int, user_email: str, commit: bool = True) -> bool:
    """
    Set has_reviewed on a booking that has not been reviewed yet.
    The guard is part of the UPDATE so two concurrent calls cannot both succeed.

    Returns:
    - bool: True if the flag flipped, False if the booking is missing or already reviewed
    """
    modified = db.query(BookedTutor).filter(
        BookedTutor.tutor_id == tutor_id,
        BookedTutor.user_email == user_email,
        BookedTutor.has_reviewed.is_(False)
    ).update({BookedTutor.has_reviewed: True}, synchronize_session=False)

    if modified and commit:
        db.commit()
    return bool(modified)
