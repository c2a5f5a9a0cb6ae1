from sqlalchemy import Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from schedulehub.db.database import Base


class ShiftTemplateStations(Base):
    __tablename__ = "shift_template_stations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    template_id: Mapped[int] = mapped_column(Integer, ForeignKey("shift_templates.id", ondelete="CASCADE"), nullable=False, index=True)
    station_id: Mapped[int] = mapped_column(Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        UniqueConstraint("template_id", "station_id", name="uix_shift_template_stations"),
    )
