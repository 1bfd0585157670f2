"""In-memory stand-ins for the order store, identity provider and payment initiator."""

from laundry.domain import CustomerProfile, OrderStatus, PaymentMethod, ServiceResult
from laundry.models import Order, utc_now


def make_order(id="O1", customer_id="C1", status=OrderStatus.READY,
               payment_method=PaymentMethod.PAY_ON_PICKUP, final_amount=500000, created_at=None):
    return Order(
        id=id,
        customer_id=customer_id,
        status=status,
        payment_method=payment_method,
        final_amount=final_amount,
        created_at=created_at or utc_now(),
    )


class FakeOrderStore:
    def __init__(self, *orders, error=None):
        self.orders = {o.id: o for o in orders}
        self.error = error
        self.lookups = []

    async def get_order_by_id(self, order_id):
        self.lookups.append(order_id)
        if self.error:
            return ServiceResult.fail(self.error)
        order = self.orders.get(order_id)
        if order is None:
            return ServiceResult(success=True, data=None)
        return ServiceResult.ok(order)

    async def get_orders_by_customer(self, customer_id):
        return ServiceResult.ok([o for o in self.orders.values() if o.customer_id == customer_id])

    async def get_orders_by_status(self, status, limit=100):
        return ServiceResult.ok([o for o in self.orders.values() if o.status == status][:limit])

    async def create_order(self, order):
        self.orders[order.id] = order
        return ServiceResult.ok(order)

    async def update_order(self, order_id, changes):
        raise AssertionError("orders must not be modified")


class FakeIdentity:
    def __init__(self, *profiles, error=None):
        self.profiles = {p.id: p for p in profiles}
        self.error = error

    async def get_user_profile(self, user_id):
        if self.error:
            return ServiceResult.fail(self.error)
        profile = self.profiles.get(user_id)
        return ServiceResult.ok(profile) if profile else ServiceResult.fail("User not found")


class FakePayments:
    """Records every request and answers with a canned result."""

    def __init__(self, result=None):
        self.result = result or ServiceResult.ok({"authorizationUrl": "https://pay.example/x", "reference": "REF123"})
        self.requests = []

    async def initialize_payment(self, request):
        self.requests.append(request)
        return self.result


class ExplodingPayments:
    async def initialize_payment(self, request):
        raise KeyError("authorization_url")


def ada(phone=None):
    return CustomerProfile(id="C1", email="a@b.com", first_name="Ada", last_name="Lovelace", phone=phone)


class BrokenDirectory:
    """Identity provider whose user listings fail, as on a database outage."""

    async def get_all_users(self, limit=500):
        return ServiceResult.fail("Failed to load users")

    async def get_all_admin_users(self):
        return ServiceResult.fail("Failed to load users")
