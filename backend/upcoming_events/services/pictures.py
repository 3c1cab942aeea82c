"""services/pictures.py — Avatar contexts for users and courses."""

from __future__ import annotations

from typing import Any

from upcoming_events.core.strings import get_string


class UserPicture:
    def __init__(self, user, link: bool = True, css_class: str = "personpicture", size: int = 35,
                 courseid: int = 0) -> None:
        self.user = user
        self.link = link
        self.css_class = css_class
        self.size = size
        self.courseid = courseid

    def export_for_template(self, output) -> dict[str, Any]:
        user = self.user
        if user.picture:
            url = output.url(f"user/pix.php/{user.id}/f2.jpg")
        else:
            url = output.pix_url("u/f2")
        profileurl = f"user/view.php?id={user.id}"
        if self.courseid:
            profileurl += f"&course={self.courseid}"
        return {
            "url": url,
            "alt": get_string("pictureof", user.fullname or user.username),
            "css_class": self.css_class,
            "size": self.size,
            "link": self.link,
            "linkurl": output.url(profileurl),
        }


class AnonymousPicture:
    """Stand-in avatar for a user record that does not exist."""

    def __init__(self, css_class: str = "personpicture", size: int = 35) -> None:
        self.css_class = css_class
        self.size = size

    def export_for_template(self, output) -> dict[str, Any]:
        return {
            "url": output.pix_url("u/f2"),
            "alt": get_string("anon"),
            "css_class": self.css_class,
            "size": self.size,
            "link": True,
            "linkurl": output.www_root,
        }


class CoursePicture:
    def __init__(self, course, link: bool = True, css_class: str = "coursepicture", size: int = 35) -> None:
        self.course = course
        self.link = link
        self.css_class = css_class
        self.size = size

    def export_for_template(self, output) -> dict[str, Any]:
        course = self.course
        if course.picture:
            url = output.url(f"course/pix.php/{course.id}/{course.picture}")
        else:
            url = output.pix_url("course/default")
        return {
            "url": url,
            "alt": course.fullname or course.shortname,
            "css_class": self.css_class,
            "size": self.size,
            "link": self.link,
            "courseurl": output.url(f"course/view.php?id={course.id}"),
            "shortname": course.shortname,
            "fullname": course.fullname,
        }
