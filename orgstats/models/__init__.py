"""Database models"""

from orgstats.models.commit import Commit
from orgstats.models.member import Member
from orgstats.models.pull_request import PullRequest

__all__ = [
    "Commit",
    "Member",
    "PullRequest",
]
