"""Database package: read-only access to the host platform tables."""

from .database import Base, engine, SessionLocal
from .models import (
    CalendarEvent,
    Course,
    CourseCategory,
    CourseModule,
    User,
    UserEnrolment,
    UserSession,
)

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "CalendarEvent",
    "Course",
    "CourseCategory",
    "CourseModule",
    "User",
    "UserEnrolment",
    "UserSession",
]
