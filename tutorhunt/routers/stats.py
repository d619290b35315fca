from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from tutorhunt.database.database import get_db
from tutorhunt.schemas.tutor_schema import StatsResponse
from tutorhunt.services.stats import get_stats

router = APIRouter()

@router.get('/stats', response_model=StatsResponse)
def stats(request: Request, db: Session = Depends(get_db)):
    """Get totalTutors, totalLanguages, totalReviews and totalUsers"""
    return get_stats(db)
