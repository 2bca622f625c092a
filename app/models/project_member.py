import enum

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.user import User


class Role(str, enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


ADMIN_ROLES = frozenset({Role.OWNER, Role.ADMIN})


class ProjectMember(Base):
    __tablename__ = "project_members"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(
        Enum(Role, native_enum=False, length=16, values_callable=lambda e: [r.value for r in e]),
        nullable=False,
        default=Role.MEMBER,
    )
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship(User, lazy="joined")

    # one row per (project, user); add_member relies on this to reject races
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_member"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES
