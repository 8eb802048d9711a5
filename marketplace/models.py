# marketplace/models.py
# Wire shapes. Field aliases keep the camelCase / PascalCase keys clients
# already consume (firstName, ClientId, paymentDate, ...).
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .tables import ContractStatus, ProfileType


class ApiModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ProfileOut(ApiModel):
    id: int
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    profession: str
    type: ProfileType
    balance: float


class ContractOut(ApiModel):
    id: int
    terms: str
    status: ContractStatus
    client_id: int = Field(alias="ClientId")
    contractor_id: int = Field(alias="ContractorId")


class JobOut(ApiModel):
    id: int
    description: str
    price: float
    paid: Optional[bool] = None
    payment_date: Optional[datetime] = Field(default=None, alias="paymentDate")
    contract_id: int = Field(alias="ContractId")


class DepositIn(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)


class BestProfessionOut(ApiModel):
    profession: Optional[str] = None
    paid: float = 0


class BestClientOut(ApiModel):
    id: int
    full_name: str = Field(alias="fullName")
    paid: float
