"""CfeTariff model: catalog of CFE (utility) tariff categories."""

from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from terraquote.models.base import Base


class CfeTariff(Base):
    """One CFE tariff category, e.g. "1C" or "DAC"."""

    __tablename__ = "cfe_tariffs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tariff_code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<CfeTariff id={self.id} tariff_code={self.tariff_code}>"
