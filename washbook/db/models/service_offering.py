from decimal import Decimal
from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..session import Base


class ServicePackage(Base):
    __tablename__ = "service_packages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    network_id: Mapped[int] = mapped_column(ForeignKey("networks.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str | None] = mapped_column(String(32))

    offerings = relationship("ServiceOffering", back_populates="service_package")


class ServiceOffering(Base):
    """Price and duration of a service package for one vehicle type."""

    __tablename__ = "service_prices"
    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_service_price_duration_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    network_id: Mapped[int] = mapped_column(ForeignKey("networks.id", ondelete="CASCADE"), index=True)
    service_package_id: Mapped[int] = mapped_column(
        ForeignKey("service_packages.id", ondelete="CASCADE")
    )
    vehicle_type: Mapped[str] = mapped_column(String(32), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="HUF", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    service_package = relationship("ServicePackage", back_populates="offerings")
