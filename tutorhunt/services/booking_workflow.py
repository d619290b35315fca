"""
Booking and review workflow.

A booking moves from not booked, to booked, to booked and reviewed, and never
back. The database guards both steps: a unique constraint on (tutor, user) for
bookings, and an UPDATE conditioned on has_reviewed = false for reviews, so
concurrent requests cannot create two bookings or count a review twice.
"""
from typing import Optional
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from tutorhunt.auth_tools import require_matching_email
from tutorhunt.database.database import BookedTutor, Tutor
from tutorhunt.repositories import bookings as booking_repository
from tutorhunt.repositories import tutors as tutor_repository
from tutorhunt.schemas.authentication_schema import DecodedAccessToken
from tutorhunt.schemas.booking_schema import BookingCreate
from tutorhunt.logger import logger

# Keys clients copy from the tutor document that must not end up in details
IGNORED_DETAIL_KEYS = {"id", "_id", "review"}

def book_tutor(db: Session, current_user: DecodedAccessToken, booking: BookingCreate) -> BookedTutor:
    """
    Book a tutor for a user.

    Args:
        db (Session): The database session.
        current_user (DecodedAccessToken): The authenticated caller.
        booking (BookingCreate): The booking payload. Without userEmail the caller's email is used.
    Raises:
        HTTPException: 409 if the user already booked this tutor. Nothing is written in that case.
    Returns:
        BookedTutor: The new booking, with has_reviewed set to False.
    """
    user_email = booking.user_email or current_user.email

    if booking_repository.find_booking(db, booking.tutor_id, user_email):
        raise HTTPException(status_code=409, detail="You have already booked this tutor")

    booking_data = booking.model_dump(include=set(booking_repository.BOOKING_FIELDS))
    details = {key: value for key, value in (booking.model_extra or {}).items() if key not in IGNORED_DETAIL_KEYS}

    try:
        created = booking_repository.create_booking(db, booking.tutor_id, user_email, booking_data, details)
    except IntegrityError:
        # Another request inserted the same pair after our check
        db.rollback()
        logger.warning(f"Duplicate booking of tutor {booking.tutor_id} by {user_email} rejected by the database")
        raise HTTPException(status_code=409, detail="You have already booked this tutor")

    logger.info(f"Tutor {booking.tutor_id} booked by {user_email}")
    return created

def submit_review(db: Session, tutor_id: int, current_user: DecodedAccessToken, email: Optional[str]) -> Tutor:
    """
    Accept one review from a user who booked the tutor.

    Args:
        db (Session): The database session.
        tutor_id (int): The reviewed tutor.
        current_user (DecodedAccessToken): The authenticated caller.
        email (str): The email the review is submitted for, must be the caller's.
    Raises:
        HTTPException: 400 if email is missing.
        HTTPException: 403 if email is not the caller's, or the booking was already reviewed.
        HTTPException: 404 if the tutor does not exist or the user never booked it.
        HTTPException: 500 if the tutor's counter could not be updated. Nothing is written in that case.
    Returns:
        Tutor: The tutor with its updated review count.
    """
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")

    require_matching_email(current_user, email)

    tutor_repository.get_tutor(db, tutor_id)

    booking = booking_repository.find_booking(db, tutor_id, email)
    if not booking:
        raise HTTPException(status_code=404, detail="You have not booked this tutor")

    if booking.has_reviewed:
        raise HTTPException(status_code=403, detail="You have already reviewed this tutor")

    # Flag and counter are committed together
    try:
        if not booking_repository.mark_reviewed(db, tutor_id, email, commit=False):
            raise HTTPException(status_code=403, detail="You have already reviewed this tutor")
        tutor_repository.increment_review(db, tutor_id, commit=False)
        db.commit()
    except (HTTPException, SQLAlchemyError):
        db.rollback()
        raise

    logger.info(f"Review for tutor {tutor_id} accepted from {email}")
    return tutor_repository.get_tutor(db, tutor_id)
