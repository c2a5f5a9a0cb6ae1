from sqlalchemy import Integer, String, Boolean, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional
from schedulehub.db.database import Base


class ShiftTemplateRoles(Base):
    """Per-role staffing requirement of a shift template."""
    __tablename__ = "shift_template_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    organization_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    template_id: Mapped[int] = mapped_column(Integer, ForeignKey("shift_templates.id", ondelete="CASCADE"), nullable=False, index=True)
    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("roles.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    min_proficiency: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    preferred_proficiency: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    is_flexible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_shift_template_roles_quantity"),
    )
