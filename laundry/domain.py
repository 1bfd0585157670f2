"""Domain types, collaborator ports and the ready-order payment gate.

The gate decides whether an order may go to a "pay on pickup" checkout and,
if so, asks the payment initiator for a hosted checkout link. It talks to
the order store, the identity provider and the payment initiator only
through the ports declared here, so any implementation (database, HTTP,
in-memory fake) can be handed in.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Sequence, Union

logger = logging.getLogger(__name__)


# ---- Enums ----
class OrderStatus(str, Enum):
    """Order lifecycle stages, from intake to completion or cancellation."""

    PENDING = "pending"
    PICKED_UP = "picked_up"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    ONLINE = "online"
    PAY_ON_PICKUP = "pay_on_pickup"
    TRANSFER = "transfer"


class UserRole(str, Enum):
    CUSTOMER = "customer"
    STAFF = "staff"
    ADMIN = "admin"
    OWNER = "owner"


class ServiceType(str, Enum):
    WASH_AND_FOLD = "wash_and_fold"
    DRY_CLEANING = "dry_cleaning"
    IRONING = "ironing"
    WASH_AND_IRON = "wash_and_iron"
    EXPRESS = "express"
    SPECIAL_CARE = "special_care"


# ---- Phone ----
@dataclass(frozen=True)
class PlainPhone:
    value: str


@dataclass(frozen=True)
class StructuredPhone:
    number: str
    country_code: Optional[str] = None


Phone = Union[PlainPhone, StructuredPhone]


def phone_from_raw(raw: Any) -> Optional[Phone]:
    """Turn a phone as stored upstream (bare string or ``{"number": ...}``) into a Phone."""
    if raw is None:
        return None
    if isinstance(raw, str):
        return PlainPhone(raw)
    if isinstance(raw, dict):
        number = raw.get("number")
        if number is None:
            return None
        return StructuredPhone(number=str(number), country_code=raw.get("countryCode"))
    return None


def normalize_phone(phone: Optional[Phone]) -> str:
    """Canonical string for a phone value; empty string when there is none."""
    if isinstance(phone, PlainPhone):
        return phone.value
    if isinstance(phone, StructuredPhone):
        return phone.number
    return ""


# ---- Entities / DTOs ----
@dataclass
class CustomerProfile:
    id: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[Phone] = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class ServiceResult:
    """Outcome of a call to a collaborator: ``data`` on success, ``error`` otherwise."""

    success: bool
    data: Any = None
    error: Optional[str] = None
    code: Optional[str] = None  # machine-readable reason, e.g. NOT_FOUND or CONFLICT

    @classmethod
    def ok(cls, data: Any = None) -> "ServiceResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, code: Optional[str] = None) -> "ServiceResult":
        return cls(success=False, error=error, code=code)


@dataclass
class PaymentRequest:
    """Everything the payment initiator needs to open a hosted checkout.

    Attributes:
        email: Payee email.
        amount: Amount in kobo.
        currency: ISO currency code.
        metadata: Free-form values echoed back by the gateway.
        callback_url: Where the gateway sends the customer after paying.
    """

    email: str
    amount: int
    currency: str
    metadata: dict = field(default_factory=dict)
    callback_url: str = ""

    def to_payload(self) -> dict:
        return {
            "email": self.email,
            "amount": self.amount,
            "currency": self.currency,
            "metadata": self.metadata,
            "callback_url": self.callback_url,
        }


# ---- Ports (DIP) ----
class OrderStore(Protocol):
    """Persistence for orders. Every call returns a ServiceResult."""

    async def get_order_by_id(self, order_id: str) -> ServiceResult: ...

    async def get_orders_by_customer(self, customer_id: str) -> ServiceResult: ...

    async def get_orders_by_status(self, status: OrderStatus, limit: int = 100) -> ServiceResult: ...

    async def create_order(self, order: Any) -> ServiceResult: ...

    async def update_order(self, order_id: str, changes: dict) -> ServiceResult: ...


class IdentityProvider(Protocol):
    """Resolves customers; ``data`` of a successful lookup is a CustomerProfile."""

    async def get_user_profile(self, user_id: str) -> ServiceResult: ...


class PaymentInitiator(Protocol):
    """Opens hosted checkouts; ``data`` carries ``authorizationUrl`` and ``reference``."""

    async def initialize_payment(self, request: PaymentRequest) -> ServiceResult: ...


# ---- Gate outcome ----
class GateOutcome(str, Enum):
    OK = "OK"
    MALFORMED_REQUEST = "MALFORMED_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_STATE = "INVALID_STATE"
    DEPENDENCY_NOT_FOUND = "DEPENDENCY_NOT_FOUND"
    PAYMENT_FAILURE = "PAYMENT_FAILURE"
    UNEXPECTED_FAULT = "UNEXPECTED_FAULT"


HTTP_STATUS = {
    GateOutcome.OK: 200,
    GateOutcome.MALFORMED_REQUEST: 400,
    GateOutcome.NOT_FOUND: 404,
    GateOutcome.UNAUTHORIZED: 403,
    GateOutcome.INVALID_STATE: 400,
    GateOutcome.DEPENDENCY_NOT_FOUND: 404,
    GateOutcome.PAYMENT_FAILURE: 500,
    GateOutcome.UNEXPECTED_FAULT: 500,
}


@dataclass
class ReadyOrderPaymentResult:
    outcome: GateOutcome
    error: Optional[str] = None
    authorization_url: Optional[str] = None
    reference: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome is GateOutcome.OK

    @property
    def status_code(self) -> int:
        return HTTP_STATUS[self.outcome]

    @classmethod
    def rejected(cls, outcome: GateOutcome, error: str) -> "ReadyOrderPaymentResult":
        return cls(outcome=outcome, error=error)


# ---- Order guards ----
# Applied in order; the first one that returns a result wins.
OrderGuard = Callable[[Any, str], Optional[ReadyOrderPaymentResult]]


def check_owner(order, customer_id: str) -> Optional[ReadyOrderPaymentResult]:
    if order.customer_id != customer_id:
        return ReadyOrderPaymentResult.rejected(GateOutcome.UNAUTHORIZED, "Unauthorized access to order")
    return None


def check_ready(order, customer_id: str) -> Optional[ReadyOrderPaymentResult]:
    if order.status != OrderStatus.READY:
        return ReadyOrderPaymentResult.rejected(GateOutcome.INVALID_STATE, "Order is not ready for pickup")
    return None


def check_pay_on_pickup(order, customer_id: str) -> Optional[ReadyOrderPaymentResult]:
    if order.payment_method != PaymentMethod.PAY_ON_PICKUP:
        return ReadyOrderPaymentResult.rejected(GateOutcome.INVALID_STATE, "Order is not set for pay on pickup")
    return None


ORDER_GUARDS: Sequence[OrderGuard] = (check_owner, check_ready, check_pay_on_pickup)

PAYMENT_CALLBACK_PATH = "/payment/callback"


# ---- Domain service ----
class ReadyOrderPaymentService:
    """Starts the checkout for an order that is ready and marked pay-on-pickup.

    The service never mutates an order and never retries. Two calls for the
    same ready order produce two independent payment initiations; the
    order's move out of ``ready`` happens in the payment-completion flow.
    """

    def __init__(
        self,
        orders: OrderStore,
        identity: IdentityProvider,
        payments: PaymentInitiator,
        currency: str,
        app_url: str,
    ):
        self.orders = orders
        self.identity = identity
        self.payments = payments
        self.currency = currency
        self.callback_url = f"{app_url.rstrip('/')}{PAYMENT_CALLBACK_PATH}"

    async def initiate_ready_order_payment(self, order_id: Optional[str], customer_id: Optional[str]) -> ReadyOrderPaymentResult:
        """Validate the order and open a hosted checkout for it.

        Never raises: unexpected errors are logged and reported as
        ``UNEXPECTED_FAULT`` with a generic message.
        """
        logger.info("ready order payment requested", extra={"order_id": order_id, "customer_id": customer_id})
        try:
            return await self._initiate(order_id, customer_id)
        except Exception:
            logger.exception("ready order payment failed unexpectedly", extra={"order_id": order_id})
            return ReadyOrderPaymentResult.rejected(GateOutcome.UNEXPECTED_FAULT, "Internal server error")

    async def _initiate(self, order_id, customer_id) -> ReadyOrderPaymentResult:
        if not order_id or not customer_id:
            return ReadyOrderPaymentResult.rejected(
                GateOutcome.MALFORMED_REQUEST, "Order ID and Customer ID are required"
            )

        found = await self.orders.get_order_by_id(order_id)
        if not found.success or not found.data:
            logger.info("order not found", extra={"order_id": order_id, "store_error": found.error})
            return ReadyOrderPaymentResult.rejected(GateOutcome.NOT_FOUND, found.error or "Order not found")
        order = found.data

        for guard in ORDER_GUARDS:
            rejection = guard(order, customer_id)
            if rejection is not None:
                logger.info("order rejected", extra={"order_id": order_id, "outcome": rejection.outcome.value})
                return rejection

        profile_res = await self.identity.get_user_profile(customer_id)
        if not profile_res.success or not profile_res.data:
            return ReadyOrderPaymentResult.rejected(GateOutcome.DEPENDENCY_NOT_FOUND, "Customer not found")
        customer: CustomerProfile = profile_res.data

        request = self.build_payment_request(order, customer)
        paid = await self.payments.initialize_payment(request)
        url = (paid.data or {}).get("authorizationUrl") if paid.success else None
        if not url:
            logger.warning("payment initialization failed", extra={"order_id": order_id, "payment_error": paid.error})
            return ReadyOrderPaymentResult.rejected(
                GateOutcome.PAYMENT_FAILURE, paid.error or "Failed to initialize payment"
            )

        return ReadyOrderPaymentResult(
            outcome=GateOutcome.OK,
            authorization_url=url,
            reference=paid.data.get("reference"),
        )

    def build_payment_request(self, order, customer: CustomerProfile) -> PaymentRequest:
        return PaymentRequest(
            email=customer.email,
            amount=order.final_amount,  # already kobo
            currency=self.currency,
            metadata={
                "orderId": order.id,
                "customerId": order.customer_id,
                "customerName": customer.display_name,
                "phoneNumber": normalize_phone(customer.phone),
                "paymentType": PaymentMethod.PAY_ON_PICKUP.value,
            },
            callback_url=self.callback_url,
        )
