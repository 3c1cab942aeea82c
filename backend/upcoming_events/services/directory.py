"""services/directory.py — Course, user and session lookups on the host DB.

Lookups return None for missing records; callers decide on the fallback.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from upcoming_events.db.models import Course, User, UserEnrolment, UserSession

logger = logging.getLogger(__name__)


class HostDirectory:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_course(self, courseid: int) -> Optional[Course]:
        if not courseid:
            return None
        return self.db.get(Course, courseid)

    def get_user(self, userid: Optional[int]) -> Optional[User]:
        if not userid:
            return None
        user = self.db.get(User, userid)
        if user is None or user.deleted:
            return None
        return user

    def get_admins(self, admin_ids: list[int]) -> list[User]:
        """Site administrators, in the configured order."""
        if not admin_ids:
            return []
        rows = self.db.execute(
            select(User).where(User.id.in_(admin_ids), User.deleted.is_(False))
        ).scalars().all()
        by_id = {u.id: u for u in rows}
        return [by_id[i] for i in admin_ids if i in by_id]

    def get_enrolled_course_ids(self, userid: int) -> list[int]:
        if not userid:
            return []
        return list(
            self.db.execute(
                select(UserEnrolment.courseid)
                .where(UserEnrolment.userid == userid)
                .order_by(UserEnrolment.courseid)
            ).scalars()
        )

    def get_session(self, sid: str) -> Optional[UserSession]:
        return self.db.execute(
            select(UserSession).where(UserSession.sid == sid)
        ).scalar_one_or_none()
