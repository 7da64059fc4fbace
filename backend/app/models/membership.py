from app.db import Base
from app.models.project import Project
from app.models.user import User
from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship


class Membership(Base):
    __tablename__ = "membership"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("user.id"), nullable=False, index=True)
    project_id = Column(
        Integer, ForeignKey("project.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    project = relationship(Project, back_populates="memberships")
    user = relationship(User, backref="memberships")

    __table_args__ = (UniqueConstraint("user_id", "project_id", name="membership_user_project"),)
