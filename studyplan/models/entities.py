# studyplan/models/entities.py
from sqlalchemy import Boolean, Column, Integer, String, DateTime, Float, Text
from .db import Base

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)

class TimeSlot(Base):
    __tablename__ = "time_slots"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, index=True, nullable=False)
    subject = Column(String, nullable=False)
    start_time = Column(DateTime, index=True, nullable=False)
    duration = Column(Float, nullable=False)  # minutes
    notes = Column(Text, nullable=True)
    color = Column(String, nullable=False)

class Flashcard(Base):
    __tablename__ = "flashcards"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, index=True, nullable=False)
    front = Column(Text, nullable=False)
    back = Column(Text, nullable=False)
    tag = Column(String, index=True, nullable=True)
    last_reviewed = Column(DateTime, nullable=True)
    next_review = Column(DateTime, nullable=True)
    difficulty = Column(Integer, nullable=False, default=0)  # 0 easy, 1 medium, 2 hard

class Goal(Base):
    __tablename__ = "goals"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, index=True, nullable=False)
    text = Column(Text, nullable=False)
    completed = Column(Boolean, nullable=False, default=False, server_default="0")
    due_date = Column(DateTime, nullable=True)
