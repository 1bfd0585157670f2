"""SQLModel-backed order store, identity provider and service catalogue.

Every public coroutine returns a ``ServiceResult``; database errors are
logged and reported as failed results instead of being raised.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select

from ..db import async_session
from ..domain import CustomerProfile, OrderStatus, ServiceResult, phone_from_raw
from ..models import AdminUser, Order, Service, User, utc_now

logger = logging.getLogger(__name__)

NOT_FOUND = "NOT_FOUND"
CONFLICT = "CONFLICT"


class SqlOrderStore:
    def __init__(self, session_factory=async_session):
        self.session_factory = session_factory

    async def get_order_by_id(self, order_id: str) -> ServiceResult:
        try:
            async with self.session_factory() as session:
                order = await session.get(Order, order_id)
        except SQLAlchemyError as e:
            logger.error("order lookup failed", extra={"order_id": order_id, "error": str(e)})
            return ServiceResult.fail("Failed to load order")
        if order is None:
            return ServiceResult.fail("Order not found", NOT_FOUND)
        return ServiceResult.ok(order)

    async def get_orders_by_customer(self, customer_id: str) -> ServiceResult:
        q = select(Order).where(Order.customer_id == customer_id).order_by(Order.created_at.desc())
        return await self._list(q)

    async def get_orders_by_status(self, status: OrderStatus, limit: int = 100) -> ServiceResult:
        q = select(Order).where(Order.status == status).order_by(Order.created_at.desc()).limit(limit)
        return await self._list(q)

    async def create_order(self, order: Order) -> ServiceResult:
        try:
            async with self.session_factory() as session:
                session.add(order)
                await session.commit()
                await session.refresh(order)
        except SQLAlchemyError as e:
            logger.error("order create failed", extra={"error": str(e)})
            return ServiceResult.fail("Failed to create order")
        return ServiceResult.ok(order)

    async def update_order(self, order_id: str, changes: dict) -> ServiceResult:
        try:
            async with self.session_factory() as session:
                order = await session.get(Order, order_id)
                if order is None:
                    return ServiceResult.fail("Order not found", NOT_FOUND)
                for key, value in changes.items():
                    setattr(order, key, value)
                order.updated_at = utc_now()
                session.add(order)
                await session.commit()
                await session.refresh(order)
        except SQLAlchemyError as e:
            logger.error("order update failed", extra={"order_id": order_id, "error": str(e)})
            return ServiceResult.fail("Failed to update order")
        return ServiceResult.ok(order)

    async def _list(self, q) -> ServiceResult:
        try:
            async with self.session_factory() as session:
                res = await session.exec(q)
                return ServiceResult.ok(list(res.all()))
        except SQLAlchemyError as e:
            logger.error("order query failed", extra={"error": str(e)})
            return ServiceResult.fail("Failed to load orders")


def profile_from_user(user: User) -> CustomerProfile:
    raw_phone = user.phone
    if raw_phone is not None and user.phone_country_code:
        raw_phone = {"number": user.phone, "countryCode": user.phone_country_code}
    return CustomerProfile(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=phone_from_raw(raw_phone),
    )


class SqlIdentityProvider:
    """Customers live in ``User``, staff in ``AdminUser``."""

    def __init__(self, session_factory=async_session):
        self.session_factory = session_factory

    async def get_user_profile(self, user_id: str) -> ServiceResult:
        try:
            async with self.session_factory() as session:
                user = await session.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("profile lookup failed", extra={"user_id": user_id, "error": str(e)})
            return ServiceResult.fail("Failed to load user")
        if user is None:
            return ServiceResult.fail("User not found", NOT_FOUND)
        return ServiceResult.ok(profile_from_user(user))

    async def register_customer(self, user: User) -> ServiceResult:
        return await self._insert_unique(User, user)

    async def register_admin(self, member: AdminUser) -> ServiceResult:
        return await self._insert_unique(AdminUser, member)

    async def get_all_users(self, limit: int = 500) -> ServiceResult:
        return await self._list(select(User).order_by(User.created_at.desc()).limit(limit))

    async def get_all_admin_users(self) -> ServiceResult:
        return await self._list(select(AdminUser).order_by(AdminUser.created_at.desc()))

    async def delete_admin_user(self, member_id: str) -> ServiceResult:
        try:
            async with self.session_factory() as session:
                member = await session.get(AdminUser, member_id)
                if member is None:
                    return ServiceResult.fail("Staff member not found", NOT_FOUND)
                await session.delete(member)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("staff delete failed", extra={"member_id": member_id, "error": str(e)})
            return ServiceResult.fail("Failed to delete staff member")
        return ServiceResult.ok()

    async def _insert_unique(self, model, row) -> ServiceResult:
        try:
            async with self.session_factory() as session:
                res = await session.exec(select(model).where(model.email == row.email))
                if res.first() is not None:
                    return ServiceResult.fail("A user with this email already exists", CONFLICT)
                session.add(row)
                await session.commit()
                await session.refresh(row)
        except IntegrityError:
            return ServiceResult.fail("A user with this email already exists", CONFLICT)
        except SQLAlchemyError as e:
            logger.error("user insert failed", extra={"table": model.__tablename__, "error": str(e)})
            return ServiceResult.fail("Registration failed")
        return ServiceResult.ok(row)

    async def _list(self, q) -> ServiceResult:
        try:
            async with self.session_factory() as session:
                res = await session.exec(q)
                return ServiceResult.ok(list(res.all()))
        except SQLAlchemyError as e:
            logger.error("user query failed", extra={"error": str(e)})
            return ServiceResult.fail("Failed to load users")


class SqlServiceCatalogue:
    def __init__(self, session_factory=async_session):
        self.session_factory = session_factory

    async def get_services(self, active_only: bool = False) -> ServiceResult:
        q = select(Service)
        if active_only:
            q = q.where(Service.is_active == True)  # noqa: E712
        q = q.order_by(Service.display_order, Service.name)
        try:
            async with self.session_factory() as session:
                res = await session.exec(q)
                return ServiceResult.ok(list(res.all()))
        except SQLAlchemyError as e:
            logger.error("service query failed", extra={"error": str(e)})
            return ServiceResult.fail("Failed to load services")

    async def create_service(self, service: Service) -> ServiceResult:
        try:
            async with self.session_factory() as session:
                session.add(service)
                await session.commit()
                await session.refresh(service)
        except SQLAlchemyError as e:
            logger.error("service create failed", extra={"error": str(e)})
            return ServiceResult.fail("Failed to create service")
        return ServiceResult.ok(service)

    async def update_service(self, service_id: str, changes: dict) -> ServiceResult:
        try:
            async with self.session_factory() as session:
                service: Optional[Service] = await session.get(Service, service_id)
                if service is None:
                    return ServiceResult.fail("Service not found", NOT_FOUND)
                for key, value in changes.items():
                    setattr(service, key, value)
                service.updated_at = utc_now()
                session.add(service)
                await session.commit()
                await session.refresh(service)
        except SQLAlchemyError as e:
            logger.error("service update failed", extra={"service_id": service_id, "error": str(e)})
            return ServiceResult.fail("Failed to update service")
        return ServiceResult.ok(service)
