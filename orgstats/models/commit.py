"""Commit model keyed by sha."""

from sqlalchemy import Column, Index, Integer, String, Text, UniqueConstraint

from orgstats.config.database import Base


class Commit(Base):
    """Commit on a tracked repository, mapped to `commits` table."""

    __tablename__ = "commits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    repo = Column(String, nullable=False)
    sha = Column(String, nullable=False)
    username = Column(String, nullable=True)  # NULL when GitHub has no linked account
    committed_at = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    url = Column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("sha", name="uq_commits_sha"),
        Index("idx_commits_committed_at", "committed_at"),
    )

    def __repr__(self):
        return f"<Commit {self.repo}@{self.sha[:7]}>"
