import uuid
from typing import List, Optional
from datetime import date, datetime, timezone
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field

from .domain import OrderStatus, PaymentMethod, ServiceType, UserRole


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """Registered customer. Every row of this table is a customer."""

    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(index=True, unique=True)
    first_name: str
    last_name: str
    phone: Optional[str] = None
    phone_country_code: Optional[str] = None  # set when the phone was captured as a structured value
    password_hash: str
    created_at: datetime = Field(default_factory=utc_now)


class AdminUser(SQLModel, table=True):
    """Staff member who can log in to the admin side."""

    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(index=True, unique=True)
    first_name: str
    last_name: str
    phone: Optional[str] = None
    password_hash: str
    role: UserRole = UserRole.STAFF
    employee_id: Optional[str] = None
    hire_date: date = Field(default_factory=date.today)
    permissions: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    assigned_areas: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    working_hours_start: str = "08:00"
    working_hours_end: str = "17:00"
    working_days: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    is_active: bool = True
    total_orders_handled: Optional[int] = None
    average_rating: Optional[float] = None
    created_at: datetime = Field(default_factory=utc_now)


class Order(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    order_number: Optional[str] = Field(default=None, index=True)
    customer_id: str = Field(index=True)
    service_id: Optional[str] = None
    final_amount: int = 0  # kobo
    status: OrderStatus = Field(default=OrderStatus.PENDING, index=True)
    payment_method: PaymentMethod = PaymentMethod.ONLINE
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class Service(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    type: ServiceType = ServiceType.WASH_AND_FOLD
    description: str = ""
    # all prices in kobo
    base_price: int
    price_per_kg: Optional[int] = None
    price_per_item: Optional[int] = None
    estimated_duration: int = 0  # hours
    category: str = ""
    display_order: int = 0
    available_areas: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    special_instructions: str = ""
    is_active: bool = Field(default=True, index=True)
    min_order_value: int = 0
    max_order_value: int = 10_000_000  # ₦100,000
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
