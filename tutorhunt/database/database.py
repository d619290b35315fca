from sqlalchemy import create_engine, Column, Integer, String, Float, Text, DateTime, Boolean, JSON, Index, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import declarative_base, sessionmaker
from datetime import datetime
from tutorhunt.config import get_settings

"""
Database models for the tutoring marketplace.
Includes models for tutors and booked tutors.
Uses SQLAlchemy ORM with PostgreSQL/SQLite backend.
"""

# Base class for ORM models
Base = declarative_base()

# Tutor Model
class Tutor(Base):
    """A tutor offering lessons in one language. Owned by the user with the same email."""
    __tablename__ = 'tutors'
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=False, index=True)  # Owner of the listing
    language = Column(String(100), nullable=False)
    price = Column(Float, nullable=False, default=0)
    image = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    review = Column(Integer, default=0, nullable=False)  # Number of accepted reviews
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    # Table-level constraints
    __table_args__ = (
        CheckConstraint('price >= 0', name='check_price_positive'),
        CheckConstraint('review >= 0', name='check_review_positive'),
    )

    def __repr__(self):
        """String representation of the Tutor object."""
        return f"<Tutor(id={self.id}, email={self.email}, language={self.language})>"

# Booked Tutor Model
class BookedTutor(Base):
    """
    A user's booking of a tutor. tutor_id is a logical reference only, there is
    no foreign key so bookings survive the deletion of their tutor.
    """
    __tablename__ = 'booked_tutors'
    id = Column(Integer, primary_key=True, autoincrement=True)
    tutor_id = Column(Integer, nullable=False, index=True)
    user_email = Column(String(255), nullable=False, index=True)
    has_reviewed = Column(Boolean, default=False, nullable=False)
    tutor_email = Column(String(255), nullable=True)
    name = Column(String(100), nullable=True)
    language = Column(String(100), nullable=True)
    price = Column(Float, nullable=True)
    image = Column(Text, nullable=True)
    date = Column(String(50), nullable=True)
    details = Column(JSON, nullable=False, default=dict)  # Any other fields sent by the client
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    # One booking per (tutor, user)
    __table_args__ = (
        UniqueConstraint('tutor_id', 'user_email', name='uq_booked_tutor_user'),
    )

    def __repr__(self):
        """String representation of the BookedTutor object."""
        return f"<BookedTutor(id={self.id}, tutor_id={self.tutor_id}, user_email={self.user_email}, has_reviewed={self.has_reviewed})>"

# Add indexes for frequently queried columns
Index('idx_tutor_language', Tutor.language)

def create_db_engine(url: str):
    """Create an engine for the given url. SQLite does not support the pool arguments."""
    if url.startswith("sqlite"):
        return create_engine(url, echo=False, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        echo=False,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30
    )

# Database setup
DATABASE_URL = get_settings().db_url
engine = create_db_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False)

def init_db():
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(engine)

# Dependency to get DB session
def get_db():
    """Provides a transactional scope around a series of operations."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
