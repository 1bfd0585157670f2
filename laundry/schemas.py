from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .domain import OrderStatus, PaymentMethod, ServiceType, UserRole
from .utils import kobo_to_naira, naira_to_kobo
from .validators import PHONE_ERROR, normalize_nigerian_phone, password_problem, validate_nigerian_phone


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ---- ready-order payment ----

class ReadyOrderPaymentIn(CamelModel):
    # both optional so a missing id reaches the gate and gets its 400
    order_id: Optional[str] = None
    customer_id: Optional[str] = None


class CheckoutOut(CamelModel):
    authorization_url: str
    reference: Optional[str] = None


class ReadyOrderPaymentOut(BaseModel):
    success: bool
    data: Optional[CheckoutOut] = None
    error: Optional[str] = None


# ---- registration ----

class RegisterCustomerIn(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str
    phone_country_code: Optional[str] = Field(default=None, pattern=r"^\+\d{1,4}$")
    password: str
    confirm_password: str

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        if not validate_nigerian_phone(v):
            raise ValueError(PHONE_ERROR)
        return normalize_nigerian_phone(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        problem = password_problem(v)
        if problem:
            raise ValueError(problem)
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class CustomerOut(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    created_at: datetime


class WorkingHours(BaseModel):
    start: str = "08:00"
    end: str = "17:00"


class RegisterStaffIn(CamelModel):
    email: EmailStr
    password: str
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    role: UserRole = UserRole.STAFF
    employee_id: Optional[str] = None
    hire_date: date = Field(default_factory=date.today)
    permissions: List[str] = []
    assigned_areas: List[str] = []
    working_hours: WorkingHours = WorkingHours()
    working_days: List[str] = []

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        problem = password_problem(v)
        if problem:
            raise ValueError(problem)
        return v

    @field_validator("role")
    @classmethod
    def not_a_customer(cls, v: UserRole) -> UserRole:
        if v is UserRole.CUSTOMER:
            raise ValueError("Staff cannot have the customer role")
        return v


class StaffOut(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    employee_id: Optional[str] = None
    assigned_areas: List[str] = []
    orders_handled: int
    performance: float
    status: str


# ---- services ----

class ServiceIn(CamelModel):
    """Owner's service form. Prices are entered in Naira and stored in kobo."""

    name: str = Field(..., min_length=1)
    type: ServiceType = ServiceType.WASH_AND_FOLD
    description: str = ""
    base_price: float = Field(..., ge=0)
    price_per_kg: Optional[float] = Field(default=None, ge=0)
    price_per_item: Optional[float] = Field(default=None, ge=0)
    estimated_duration: int = Field(default=0, ge=0)
    category: str = ""
    display_order: int = 0
    available_areas: List[str] = []
    tags: List[str] = []
    special_instructions: str = ""
    is_active: bool = True

    def to_model_fields(self) -> dict:
        fields = self.model_dump(exclude={"base_price", "price_per_kg", "price_per_item"})
        fields["base_price"] = naira_to_kobo(self.base_price)
        fields["price_per_kg"] = naira_to_kobo(self.price_per_kg) if self.price_per_kg is not None else None
        fields["price_per_item"] = naira_to_kobo(self.price_per_item) if self.price_per_item is not None else None
        return fields


class ServiceActiveIn(CamelModel):
    is_active: bool


class ServiceOut(CamelModel):
    id: str
    name: str
    type: ServiceType
    description: str
    base_price: int
    price_per_kg: Optional[int] = None
    price_per_item: Optional[int] = None
    estimated_duration: int
    category: str
    display_order: int
    available_areas: List[str]
    tags: List[str]
    special_instructions: str
    is_active: bool
    min_order_value: int
    max_order_value: int

    @computed_field
    @property
    def base_price_naira(self) -> float:
        return kobo_to_naira(self.base_price)


# ---- dashboard ----

class OrderOut(CamelModel):
    id: str
    order_number: Optional[str] = None
    customer_id: str
    final_amount: int
    status: OrderStatus
    payment_method: PaymentMethod
    created_at: datetime


class CustomerStatsOut(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    total_orders: int
    total_spent: int
    last_order_date: Optional[datetime] = None
    status: str


class OrderStatsOut(CamelModel):
    total_orders: int
    pending_orders: int
    completed_orders: int
    total_revenue: int
    monthly_revenue: int
    average_order_value: float
    completion_rate: float
    by_status: Dict[str, int]


class DashboardOut(CamelModel):
    orders: OrderStatsOut
    total_revenue_display: str
    recent_orders: List[OrderOut]
    total_customers: int
    active_customers: int
    total_staff: int
    active_staff: int
