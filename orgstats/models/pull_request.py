"""Pull request model keyed by repository and number."""

from sqlalchemy import Column, Index, Integer, String, UniqueConstraint

from orgstats.config.database import Base


class PullRequest(Base):
    """Pull request as first observed, mapped to `pull_requests` table.

    Timestamps are canonical RFC-3339 UTC strings so that range filters and
    month/year bucketing can work on plain string comparison and prefixes.
    `merged_at` is NULL while the pull request is unmerged.
    """

    __tablename__ = "pull_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    repo = Column(String, nullable=False)
    pr_num = Column(Integer, nullable=False)
    username = Column(String, nullable=False)
    title = Column(String, nullable=False)
    created_at = Column(String, nullable=False)
    merged_at = Column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("repo", "pr_num", name="uq_pull_requests_repo_pr_num"),
        Index("idx_pull_requests_merged_at", "merged_at"),
        Index("idx_pull_requests_username", "username"),
    )

    def __repr__(self):
        return f"<PullRequest {self.repo}#{self.pr_num}>"
