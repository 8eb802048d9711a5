# marketplace/tables.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

Money = Numeric(12, 2)


class ProfileType(str, Enum):
    CLIENT = "client"
    CONTRACTOR = "contractor"


class ContractStatus(str, Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    TERMINATED = "terminated"


def _values(enum_cls):
    return [member.value for member in enum_cls]


class Base(DeclarativeBase):
    pass


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_profile_balance"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    profession: Mapped[str] = mapped_column(String(100))
    type: Mapped[ProfileType] = mapped_column(
        SAEnum(ProfileType, native_enum=False, values_callable=_values, length=16)
    )
    balance: Mapped[Decimal] = mapped_column(Money, default=Decimal("0"))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_client(self) -> bool:
        return self.type == ProfileType.CLIENT


class Contract(Base):
    __tablename__ = "contracts"

    id: Mapped[int] = mapped_column(primary_key=True)
    terms: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[ContractStatus] = mapped_column(
        SAEnum(ContractStatus, native_enum=False, values_callable=_values, length=16),
        default=ContractStatus.NEW,
    )
    client_id: Mapped[int] = mapped_column(ForeignKey("profiles.id"), index=True)
    contractor_id: Mapped[int] = mapped_column(ForeignKey("profiles.id"), index=True)

    client: Mapped[Profile] = relationship(foreign_keys=[client_id])
    contractor: Mapped[Profile] = relationship(foreign_keys=[contractor_id])
    jobs: Mapped[List["Job"]] = relationship(back_populates="contract")


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (CheckConstraint("price > 0", name="ck_job_price"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    description: Mapped[str] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Money)
    # null and false both mean unpaid
    paid: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=False)
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    contract_id: Mapped[int] = mapped_column(ForeignKey("contracts.id"), index=True)

    contract: Mapped[Contract] = relationship(back_populates="jobs")
