"""Organization member snapshot model."""

from sqlalchemy import Column, Integer, String, UniqueConstraint

from orgstats.config.database import Base


class Member(Base):
    """Organization member at fetch time, mapped to `members` table."""

    __tablename__ = "members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("username", name="uq_members_username"),
    )

    def __repr__(self):
        return f"<Member {self.username}>"
