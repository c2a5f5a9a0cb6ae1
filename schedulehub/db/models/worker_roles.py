from sqlalchemy import Integer, String, Date, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date
from typing import Optional
from schedulehub.db.database import Base


class WorkerRoles(Base):
    """Role membership. A membership is active while removed_date is NULL."""
    __tablename__ = "worker_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    organization_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    employee_id: Mapped[int] = mapped_column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False)
    proficiency_level: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)  # trainee/competent/proficient/expert
    assigned_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    removed_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    __table_args__ = (
        Index("ix_worker_roles_role_employee", "role_id", "employee_id"),
    )
