"""Owner dashboard statistics.

The functions at the top are plain folds over order and user rows; the
coroutines below them fetch those rows through the stores and feed them in.
All money values are kobo.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from ..domain import OrderStatus, ServiceResult
from ..models import utc_now

logger = logging.getLogger(__name__)

ACTIVITY_WINDOW = timedelta(days=30)
DEFAULT_STAFF_RATING = 4.5
RECENT_ORDERS = 10
ORDERS_PER_STATUS = 100


def as_utc(moment: datetime) -> datetime:
    """SQLite hands timestamps back without a zone; they were written as UTC."""
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


@dataclass
class CustomerStats:
    id: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str]
    total_orders: int = 0
    total_spent: int = 0
    last_order_date: Optional[datetime] = None
    status: str = "inactive"


@dataclass
class StaffStats:
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    employee_id: Optional[str]
    assigned_areas: List[str]
    orders_handled: int
    performance: float
    status: str


@dataclass
class OrderStats:
    total_orders: int = 0
    pending_orders: int = 0
    completed_orders: int = 0
    total_revenue: int = 0
    monthly_revenue: int = 0
    average_order_value: float = 0.0
    completion_rate: float = 0.0
    by_status: Dict[str, int] = field(default_factory=dict)


def customer_stats(user, orders: Iterable, now: datetime) -> CustomerStats:
    """A customer is active when their latest order is less than 30 days old."""
    orders = list(orders)
    last_order_date = max((as_utc(o.created_at) for o in orders), default=None)
    active = last_order_date is not None and last_order_date > now - ACTIVITY_WINDOW
    return CustomerStats(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        total_orders=len(orders),
        total_spent=sum(o.final_amount for o in orders),
        last_order_date=last_order_date,
        status="active" if active else "inactive",
    )


def staff_stats(member) -> StaffStats:
    rating = member.average_rating
    return StaffStats(
        id=member.id,
        email=member.email,
        first_name=member.first_name,
        last_name=member.last_name,
        role=getattr(member.role, "value", member.role),
        employee_id=member.employee_id,
        assigned_areas=list(member.assigned_areas or []),
        orders_handled=member.total_orders_handled or 0,
        performance=rating if rating else DEFAULT_STAFF_RATING,
        status="active" if member.is_active else "inactive",
    )


def order_stats(orders: Iterable, now: datetime) -> OrderStats:
    """Revenue only counts delivered orders; the average spreads it over every order."""
    orders = list(orders)
    by_status = {s.value: 0 for s in OrderStatus}
    for o in orders:
        by_status[getattr(o.status, "value", o.status)] += 1

    delivered = [o for o in orders if o.status == OrderStatus.DELIVERED]
    total = len(orders)
    revenue = sum(o.final_amount for o in delivered)
    monthly = sum(o.final_amount for o in delivered if as_utc(o.created_at) > now - ACTIVITY_WINDOW)

    return OrderStats(
        total_orders=total,
        pending_orders=by_status[OrderStatus.PENDING.value],
        completed_orders=len(delivered),
        total_revenue=revenue,
        monthly_revenue=monthly,
        average_order_value=revenue / total if total else 0.0,
        completion_rate=len(delivered) / total * 100 if total else 0.0,
        by_status=by_status,
    )


def recent_orders(orders: Iterable, limit: int = RECENT_ORDERS) -> list:
    return sorted(orders, key=lambda o: as_utc(o.created_at), reverse=True)[:limit]


# ---- loaders ----

async def load_all_orders(order_store) -> list:
    """Collect orders status by status; a status whose query fails is skipped."""
    statuses = list(OrderStatus)
    results = await asyncio.gather(*(order_store.get_orders_by_status(s, ORDERS_PER_STATUS) for s in statuses))
    orders = []
    for status, res in zip(statuses, results):
        if res.success:
            orders.extend(res.data or [])
        else:
            logger.warning("could not load orders", extra={"order_status": status.value, "error": res.error})
    return orders


async def load_customers(identity, order_store, now: Optional[datetime] = None) -> ServiceResult:
    """``data`` is a list of CustomerStats; a failed user query is passed through."""
    now = now or utc_now()
    users_res = await identity.get_all_users(500)
    if not users_res.success:
        logger.error("could not load customers", extra={"error": users_res.error})
        return users_res

    async def with_stats(user) -> CustomerStats:
        res = await order_store.get_orders_by_customer(user.id)
        return customer_stats(user, res.data if res.success else [], now)

    return ServiceResult.ok(list(await asyncio.gather(*(with_stats(u) for u in users_res.data))))


async def load_staff(identity) -> ServiceResult:
    res = await identity.get_all_admin_users()
    if not res.success:
        logger.error("could not load staff", extra={"error": res.error})
        return res
    return ServiceResult.ok([staff_stats(m) for m in res.data])


async def build_overview(identity, order_store, now: Optional[datetime] = None) -> ServiceResult:
    now = now or utc_now()
    orders, customers_res, staff_res = await asyncio.gather(
        load_all_orders(order_store),
        load_customers(identity, order_store, now),
        load_staff(identity),
    )
    for res in (customers_res, staff_res):
        if not res.success:
            return res
    customers, staff = customers_res.data, staff_res.data
    return ServiceResult.ok({
        "orders": order_stats(orders, now),
        "recent_orders": recent_orders(orders),
        "total_customers": len(customers),
        "active_customers": sum(1 for c in customers if c.status == "active"),
        "total_staff": len(staff),
        "active_staff": sum(1 for s in staff if s.status == "active"),
    })
