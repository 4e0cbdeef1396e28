from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .core.db import Base


class Shop(Base):
    __tablename__ = "shops"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    domain: Mapped[str] = mapped_column(String(255), nullable=False)
    website_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    seller_id: Mapped[int] = mapped_column(ForeignKey("sellers.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    seller: Mapped["Seller"] = relationship(lazy="joined")


class Seller(Base):
    __tablename__ = "sellers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(32), nullable=False)
    notification_email: Mapped[str] = mapped_column(String(255), nullable=False)

    # Company details
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(128), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(16), nullable=False)

    # Tax and registry
    registration_number: Mapped[str] = mapped_column(String(32), nullable=False)
    vat_number: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    vat_payer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    registry_city: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    registry_number: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    # Banking
    bank_account: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    bank_account_iban: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    bank_account_bic: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    # Payment gateway config, stored as raw JSON text
    gopay_config: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    external_sale: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    supplier: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
