"""Aggregate numbers for the landing page dashboard."""
import json
import redis
from sqlalchemy import distinct, func
from sqlalchemy.orm import Session
from tutorhunt.database.database import Tutor, BookedTutor
from tutorhunt.database.redis import redis_client
from tutorhunt.config import get_settings
from tutorhunt.logger import logger

# Check if we should use Redis
USE_REDIS = get_settings().use_redis
STATS_CACHE_KEY = "stats"

def compute_stats(db: Session) -> dict:
    """Count tutors, distinct languages, accepted reviews and distinct booking users"""
    total_tutors = db.query(func.count(Tutor.id)).scalar()
    total_languages = db.query(func.count(distinct(Tutor.language))).scalar()
    total_reviews = db.query(func.coalesce(func.sum(Tutor.review), 0)).scalar()
    total_users = db.query(func.count(distinct(BookedTutor.user_email))).scalar()

    return {
        "total_tutors": total_tutors or 0,
        "total_languages": total_languages or 0,
        "total_reviews": int(total_reviews or 0),
        "total_users": total_users or 0,
    }

def get_stats(db: Session) -> dict:
    """compute_stats, served from redis for a short while when USE_REDIS is set"""
    if not USE_REDIS:
        return compute_stats(db)

    try:
        cached_data = redis_client.get_cache(STATS_CACHE_KEY)
    except redis.RedisError as e:
        logger.warning(f"Could not read stats from redis: {str(e)}")
        return compute_stats(db)

    if cached_data:
        logger.info("Returning cached stats")
        return json.loads(cached_data)

    stats = compute_stats(db)
    try:
        redis_client.set_cache(STATS_CACHE_KEY, json.dumps(stats), expiration=get_settings().stats_cache_seconds)
    except redis.RedisError as e:
        logger.warning(f"Could not cache stats in redis: {str(e)}")
    return stats
