"""
Booking router handling tutor bookings and reviews.
A user books a tutor once, and can review a booked tutor once.
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from typing import List, Optional
from tutorhunt.database.database import get_db
from tutorhunt.auth_tools import get_current_user, require_matching_email
from tutorhunt.repositories import bookings as booking_repository
from tutorhunt.services import booking_workflow
from tutorhunt.schemas.booking_schema import BookingCreate, BookingResponse, BookingMutationResponse, ReviewResponse
from tutorhunt.schemas.authentication_schema import DecodedAccessToken
from tutorhunt.utilities import booking_to_dict, parse_tutor_id

router = APIRouter()

@router.post('/booked-tutors', response_model=BookingMutationResponse, status_code=201)
def book_tutor(request: Request, booking: BookingCreate, current_user: DecodedAccessToken = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Book a tutor.

    Raises:
    - HTTPException(401): If not logged in
    - HTTPException(409): If this user already booked this tutor
    """
    created = booking_workflow.book_tutor(db, current_user, booking)
    return {"success": True, "message": "Tutor booked successfully", "booking": booking_to_dict(created)}

@router.get('/booked-tutors', response_model=List[BookingResponse])
def get_booked_tutors(request: Request, email: Optional[str] = None, current_user: DecodedAccessToken = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Get the bookings of the logged in user.

    Raises:
    - HTTPException(400): If email is missing
    - HTTPException(403): If email is not the logged in user's
    """
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")

    require_matching_email(current_user, email)
    return [booking_to_dict(booking) for booking in booking_repository.list_bookings_for_user(db, email)]

@router.patch('/tutors/{tutor_id}/review', response_model=ReviewResponse)
def review_tutor(request: Request, tutor_id: str, email: Optional[str] = None, current_user: DecodedAccessToken = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Review a booked tutor, adding one to its review count.

    Raises:
    - HTTPException(400): If email is missing
    - HTTPException(403): If email is not the logged in user's or the tutor was already reviewed
    - HTTPException(404): If the tutor does not exist or was not booked by this user
    """
    tutor = booking_workflow.submit_review(db, parse_tutor_id(tutor_id), current_user, email)
    return {"success": True, "message": "Review submitted successfully", "review": tutor.review}
