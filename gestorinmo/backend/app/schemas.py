# backend/app/schemas.py
from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional, List

from pydantic import BaseModel, Field, ConfigDict, model_validator

PropertyType = Literal["Piso", "Casa", "Local", "Garaje"]
PropertyStatus = Literal["Alquilado", "Vacío"]
ExpenseCategory = Literal["Reparación", "Comunidad", "Seguro", "Impuestos", "Otros"]
DocumentType = Literal["Escritura", "Contrato", "Recibo", "Impuesto", "Otro"]


# -------------------- Auth --------------------

class Credentials(BaseModel):
    email: str
    password: str


class PrincipalOut(BaseModel):
    user_id: int
    email: str


# -------------------- Documents --------------------

class DocumentCreate(BaseModel):
    name: str = Field(min_length=1)
    doc_type: DocumentType = "Otro"
    doc_date: Optional[date] = None  # defaults to today
    content: Optional[str] = None  # URL or data URL


class DocumentOut(BaseModel):
    id: int
    name: str
    doc_type: DocumentType
    doc_date: date
    content: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


# -------------------- Properties --------------------

class PropertyCreate(BaseModel):
    address: str
    city: str
    property_type: PropertyType = "Piso"
    status: PropertyStatus = "Vacío"
    purchase_price: float = Field(default=0.0, allow_inf_nan=False)
    image: Optional[str] = None


class PropertyOut(PropertyCreate):
    id: int
    documents: List[DocumentOut] = Field(default_factory=list)
    model_config = ConfigDict(from_attributes=True)


# -------------------- Tenants --------------------

class TenantCreate(BaseModel):
    name: str
    dni: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    contract_start: date
    contract_end: date
    monthly_rent: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    cpi_adjustment_month: int = Field(default=1, ge=1, le=12)

    # not checked for existence
    property_id: Optional[int] = None

    @model_validator(mode="after")
    def _contract_window(self) -> "TenantCreate":
        if self.contract_end < self.contract_start:
            raise ValueError("contract_end cannot be before contract_start")
        return self


class TenantOut(TenantCreate):
    id: int
    property_address: str = "Sin asignar"
    documents: List[DocumentOut] = Field(default_factory=list)
    model_config = ConfigDict(from_attributes=True)


# -------------------- Expenses --------------------

class ExpenseCreate(BaseModel):
    property_id: int
    amount: float = Field(allow_inf_nan=False)
    category: ExpenseCategory = "Otros"
    expense_date: date
    description: str = ""


class ExpenseOut(ExpenseCreate):
    id: int
    model_config = ConfigDict(from_attributes=True)


# -------------------- Dashboard --------------------

class MetricsOut(BaseModel):
    monthly_income: float
    monthly_expenses: float
    net_profit: float
    occupancy_rate: float


class AlertOut(BaseModel):
    type: Literal["expire", "cpi"]
    text: str
    priority: Literal["high", "medium"]
    tenant_id: Optional[int] = None


class RentPointOut(BaseModel):
    name: str
    rent: float


class DashboardOut(BaseModel):
    metrics: MetricsOut
    alerts: List[AlertOut]
    rent_by_tenant: List[RentPointOut]
    computed_at: datetime


class PropertyFinancialsOut(BaseModel):
    property_id: int
    address: str
    annual_revenue_estimate: float
    total_expenses: float
    expenses: List[ExpenseOut]


# -------------------- AI --------------------

class EmailDraftIn(BaseModel):
    topic: str
    context: str = ""


class EmailDraftOut(BaseModel):
    tenant_id: int
    draft: str


class ReceiptScanIn(BaseModel):
    image: str = Field(min_length=1, description="base64 payload or data URL")
    property_id: Optional[int] = None


class ReceiptScanOut(BaseModel):
    ok: bool
    message: str
    amount: Optional[float] = None
    expense_date: Optional[date] = None
    description: Optional[str] = None
    category: Optional[ExpenseCategory] = None
    property_id: Optional[int] = None


# -------------------- Settings --------------------

class SeedOut(BaseModel):
    ok: bool
    properties: int
    tenants: int
    expenses: int


class StatusOut(BaseModel):
    ai_configured: bool
    auth_mode: str
    collections: dict[str, int]
