"""Mini README: Member roster and member lifecycle.

``roster`` holds add/edit/list over the members document, ``removal`` the
journalled soft delete that also settles the member's donations, and
``images`` the uploaded member photographs.
"""

from .images import ImageStore
from .removal import MemberRemoval, RemovalOutcome
from .roster import Member, MemberRoster

__all__ = [
    "ImageStore",
    "Member",
    "MemberRemoval",
    "MemberRoster",
    "RemovalOutcome",
]
