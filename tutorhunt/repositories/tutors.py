"""
Data access for the tutors table.
Every function takes the request's session and raises HTTPException for the
cases the caller has to report (missing tutor, counter not updated).
"""
import math
from typing import Optional, List
from fastapi import HTTPException
from sqlalchemy.orm import Session
from tutorhunt.database.database import Tutor
from tutorhunt.utilities import normalize_category
from tutorhunt.logger import logger

# Fields a tutor can change after creation
UPDATABLE_FIELDS = ("image", "language", "price", "description")

def list_tutors(db: Session, email: Optional[str] = None, language: Optional[str] = None, page: int = 1, page_size: int = 10) -> dict:
    """
    Get one page of tutors, optionally filtered by owner email and by a
    case-insensitive substring of the language.

    Returns:
    - dict: items, page, total_pages, total_items
    """
    query = db.query(Tutor)

    if email:
        query = query.filter(Tutor.email == email)

    if language:
        query = query.filter(Tutor.language.icontains(language, autoescape=True))

    total_items = query.count()
    items = query.order_by(Tutor.id.asc()).offset((page - 1) * page_size).limit(page_size).all()

    return {
        "items": items,
        "page": page,
        "total_pages": math.ceil(total_items / page_size),
        "total_items": total_items,
    }

def get_tutor(db: Session, tutor_id: int) -> Tutor:
    """Get a tutor by id or raise 404"""
    tutor = db.query(Tutor).filter(Tutor.id == tutor_id).first()
    if not tutor:
        raise HTTPException(status_code=404, detail="Tutor not found")
    return tutor

def get_tutors_by_category(db: Session, category: str) -> List[Tutor]:
    """Get all tutors whose language equals the normalized category ('english' -> 'English')"""
    return db.query(Tutor).filter(Tutor.language == normalize_category(category)).order_by(Tutor.id.asc()).all()

def create_tutor(db: Session, tutor_data: dict) -> Tutor:
    tutor = Tutor(**tutor_data)
    tutor.review = 0
    db.add(tutor)
    db.commit()
    db.refresh(tutor)
    logger.info(f"Tutor {tutor.id} created by {tutor.email}")
    return tutor

def update_tutor(db: Session, tutor_id: int, changes: dict) -> Tutor:
    """
    Apply a partial update. Keys outside UPDATABLE_FIELDS are ignored.

    Raises:
    - HTTPException(404): If the tutor does not exist
    """
    tutor = get_tutor(db, tutor_id)

    for field in UPDATABLE_FIELDS:
        if field in changes:
            setattr(tutor, field, changes[field])

    db.commit()
    db.refresh(tutor)
    return tutor

def delete_tutor(db: Session, tutor_id: int) -> dict:
    """
    Delete a tutor. Its bookings are kept.

    Raises:
    - HTTPException(404): If no tutor was deleted
    """
    deleted = db.query(Tutor).filter(Tutor.id == tutor_id).delete(synchronize_session=False)
    db.commit()

    if not deleted:
        raise HTTPException(status_code=404, detail="Tutor not found")

    logger.info(f"Tutor {tutor_id} deleted")
    return {"deleted": True}

def increment_review(db: Session, tutor_id: int, commit: bool = True) -> dict:
    """
    Add one to the tutor's review counter in a single UPDATE statement.
    Pass commit=False to leave the change in the caller's transaction.

    Raises:
    - HTTPException(500): If no tutor row was updated
    """
    modified = db.query(Tutor).filter(Tutor.id == tutor_id).update(
        {Tutor.review: Tutor.review + 1}, synchronize_session=False
    )

    if not modified:
        logger.error(f"Review counter of tutor {tutor_id} was not updated")
        raise HTTPException(status_code=500, detail="Failed to update tutor review count")

    if commit:
        db.commit()
    return {"modified": True}
