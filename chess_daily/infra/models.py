"""
SQLAlchemy ORM models for database tables
"""

from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, DateTime, Date, Boolean, Text, JSON, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PuzzleModel(Base):
    """SQLAlchemy ORM model for puzzles table"""

    __tablename__ = "puzzles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    fen = Column(String(128), nullable=False)
    pgn = Column(Text, nullable=False, default="")
    to_move = Column(String(5), nullable=False)
    difficulty = Column(String(10), nullable=False)
    themes = Column(JSON, nullable=False, default=list)
    solution = Column(String(32), nullable=False)
    rating = Column(Integer, default=1500, nullable=False)
    popularity = Column(Integer, default=0, nullable=False)
    success_percentage = Column(Integer, default=0, nullable=False)

    __table_args__ = (
        Index('idx_puzzles_difficulty', 'difficulty'),
    )

    def __repr__(self):
        return f"<Puzzle(id={self.id}, difficulty='{self.difficulty}', to_move='{self.to_move}')>"


class UserModel(Base):
    """SQLAlchemy ORM model for users table"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    wallet_address = Column(String(255), nullable=False)
    username = Column(String(64), nullable=True)
    success_rate = Column(Integer, default=50, nullable=False)
    completed_puzzles = Column(Integer, default=0, nullable=False)
    preferred_themes = Column(JSON, nullable=False, default=list)
    preferred_difficulty = Column(String(10), default='medium', nullable=False)
    skill_level = Column(String(20), default='intermediate', nullable=False)
    last_recommendation_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index('idx_users_wallet', 'wallet_address', unique=True),
    )

    def __repr__(self):
        return f"<User(wallet_address='{self.wallet_address}', skill_level='{self.skill_level}')>"


class AttemptModel(Base):
    """SQLAlchemy ORM model for attempts table"""

    __tablename__ = "attempts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False)
    puzzle_id = Column(Integer, nullable=False)
    move = Column(String(16), nullable=False)
    is_correct = Column(Boolean, nullable=False)
    elapsed_seconds = Column(Integer, nullable=False)
    attempt_number = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    mint_reference = Column(String(255), nullable=True)

    __table_args__ = (
        Index('idx_attempts_user', 'user_id'),
        Index('idx_attempts_user_puzzle_number', 'user_id', 'puzzle_id', 'attempt_number', unique=True),
    )

    def __repr__(self):
        return (
            f"<Attempt(user_id='{self.user_id}', puzzle_id={self.puzzle_id}, "
            f"attempt_number={self.attempt_number}, is_correct={self.is_correct})>"
        )


class DailyAssignmentModel(Base):
    """SQLAlchemy ORM model for daily_assignments table"""

    __tablename__ = "daily_assignments"

    epoch_day = Column(Integer, primary_key=True, autoincrement=False)
    puzzle_date = Column(Date, nullable=False)
    puzzle_id = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self):
        return f"<DailyAssignment(puzzle_date='{self.puzzle_date}', puzzle_id={self.puzzle_id})>"
