"""SQLAlchemy models for the host platform tables the block reads.

The block never writes to these tables; they are owned by the host.
Timestamps are unix seconds, as the host stores them.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text

from .database import Base


class CourseCategory(Base):
    __tablename__ = "course_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    visible = Column(Boolean, nullable=False, default=True)

    def is_uservisible(self) -> bool:
        return bool(self.visible)

    def __repr__(self):
        return f"<CourseCategory(id={self.id}, name='{self.name}')>"


class Course(Base):
    __tablename__ = "course"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(Integer, ForeignKey("course_categories.id"), nullable=True)
    fullname = Column(String(254), nullable=False, default="")
    shortname = Column(String(255), nullable=False, default="")
    picture = Column(String(255), nullable=True)  # overview image file name
    visible = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Course(id={self.id}, shortname='{self.shortname}')>"


class CourseModule(Base):
    __tablename__ = "course_modules"

    id = Column(Integer, primary_key=True, index=True)
    course = Column(Integer, ForeignKey("course.id"), nullable=False)
    modname = Column(String(20), nullable=False)
    instance = Column(Integer, nullable=False)
    visible = Column(Boolean, nullable=False, default=True)

    @property
    def uservisible(self) -> bool:
        return bool(self.visible)


class User(Base):
    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), nullable=False, unique=True)
    firstname = Column(String(100), nullable=False, default="")
    lastname = Column(String(100), nullable=False, default="")
    picture = Column(Integer, nullable=False, default=0)  # 0 = no uploaded picture
    deleted = Column(Boolean, nullable=False, default=False)

    @property
    def fullname(self) -> str:
        return " ".join(filter(None, [self.firstname, self.lastname]))

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"


class UserEnrolment(Base):
    __tablename__ = "user_enrolments"

    id = Column(Integer, primary_key=True)
    userid = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    courseid = Column(Integer, ForeignKey("course.id"), nullable=False)


class UserSession(Base):
    """Host login session. ``sid`` is the session cookie value."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True)
    sid = Column(String(128), nullable=False, unique=True, index=True)
    userid = Column(Integer, nullable=False, default=0)  # 0 = not logged in
    sesskey = Column(String(10), nullable=False)
    timemodified = Column(Integer, nullable=False, default=0)


class CalendarEvent(Base):
    __tablename__ = "event"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    eventtype = Column(String(20), nullable=False)
    timestart = Column(Integer, nullable=False, index=True)
    timeduration = Column(Integer, nullable=False, default=0)
    courseid = Column(Integer, nullable=False, default=0)
    categoryid = Column(Integer, nullable=False, default=0)
    groupid = Column(Integer, nullable=False, default=0)
    userid = Column(Integer, nullable=False, default=0)
    course_module_id = Column(Integer, ForeignKey("course_modules.id"), nullable=True)
    visible = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<CalendarEvent(id={self.id}, name='{self.name}', timestart={self.timestart})>"
