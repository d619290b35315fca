"""
Tutor router handling the tutor listings.
Browsing is public, creating, editing and deleting a listing requires a session.
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from typing import List, Optional
from tutorhunt.database.database import get_db
from tutorhunt.auth_tools import get_current_user
from tutorhunt.repositories import tutors as tutor_repository
from tutorhunt.schemas.tutor_schema import TutorCreate, TutorUpdate, TutorResponse, TutorPage, TutorMutationResponse, TutorDeletedResponse
from tutorhunt.schemas.authentication_schema import DecodedAccessToken
from tutorhunt.utilities import parse_positive_int, parse_tutor_id, MAX_ID
from tutorhunt.logger import logger, security_logger
from tutorhunt.config import get_settings

router = APIRouter()

DEFAULT_PAGE_SIZE = get_settings().default_page_size
MAX_PAGE_SIZE = get_settings().max_page_size
# Keeps the offset inside a 64-bit integer
MAX_PAGE = MAX_ID // MAX_PAGE_SIZE

@router.get('/find-tutors', response_model=TutorPage)
def find_tutors(
    request: Request,
    email: Optional[str] = None,
    language: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Get a page of tutors.

    Parameters:
    - email: Only tutors owned by this email
    - language: Only tutors whose language contains this text, case-insensitive
    - page: Page number, defaults to 1
    - limit: Page size, defaults to 10

    Returns:
    - TutorPage: items, page, totalPages, totalItems
    """
    page_number = parse_positive_int(page, 1, MAX_PAGE)
    page_size = parse_positive_int(limit, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
    return tutor_repository.list_tutors(db, email=email, language=language, page=page_number, page_size=page_size)

@router.get('/find-tutors/{category}', response_model=List[TutorResponse])
def find_tutors_by_category(request: Request, category: str, db: Session = Depends(get_db)):
    """Get all tutors teaching a language, e.g. /find-tutors/english returns the 'English' tutors"""
    return tutor_repository.get_tutors_by_category(db, category)

@router.post('/tutors', response_model=TutorMutationResponse, status_code=201)
def add_tutor(request: Request, tutor: TutorCreate, current_user: DecodedAccessToken = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Create a tutor listing. The owner email defaults to the logged in user.

    Returns:
    - TutorMutationResponse: success flag, message and the created tutor
    """
    tutor_data = tutor.model_dump()
    tutor_data["email"] = tutor.email or current_user.email
    created = tutor_repository.create_tutor(db, tutor_data)
    return {"success": True, "message": "Tutor added successfully", "tutor": created}

@router.get('/tutors/{tutor_id}', response_model=TutorResponse)
def get_tutor(request: Request, tutor_id: str, db: Session = Depends(get_db)):
    """Get a single tutor by id"""
    return tutor_repository.get_tutor(db, parse_tutor_id(tutor_id))

@router.patch('/tutors/{tutor_id}', response_model=TutorMutationResponse)
def update_tutor(request: Request, tutor_id: str, changes: TutorUpdate, current_user: DecodedAccessToken = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Update the image, language, price or description of a tutor.
    Any logged in user may edit any tutor, edits by someone else than the owner are audited.

    Raises:
    - HTTPException(400): If no field is given
    - HTTPException(404): If the tutor does not exist
    """
    tutor_id = parse_tutor_id(tutor_id)
    update_data = changes.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="Nothing to update")

    tutor = tutor_repository.get_tutor(db, tutor_id)
    if tutor.email != current_user.email:
        security_logger.log_security_event("foreign_tutor_update", current_user.email, {"tutor_id": tutor_id, "owner": tutor.email})

    updated = tutor_repository.update_tutor(db, tutor_id, update_data)
    logger.info(f"Tutor {tutor_id} updated by {current_user.email}: {sorted(update_data)}")
    return {"success": True, "message": "Tutor updated successfully", "tutor": updated}

@router.delete('/tutors/{tutor_id}', response_model=TutorDeletedResponse)
def delete_tutor(request: Request, tutor_id: str, current_user: DecodedAccessToken = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Delete a tutor. Like updates, this is not restricted to the owner.

    Raises:
    - HTTPException(404): If the tutor does not exist
    """
    tutor_id = parse_tutor_id(tutor_id)
    tutor = tutor_repository.get_tutor(db, tutor_id)
    if tutor.email != current_user.email:
        security_logger.log_security_event("foreign_tutor_delete", current_user.email, {"tutor_id": tutor_id, "owner": tutor.email})

    result = tutor_repository.delete_tutor(db, tutor_id)
    return {"success": True, "message": f"Tutor {tutor_id} deleted", **result}
