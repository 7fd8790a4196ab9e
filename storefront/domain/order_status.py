# storefront/domain/order_status.py
import enum

from storefront.domain.exceptions import InvalidTransitionError


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


# PENDING -> PROCESSING -> SHIPPED -> DELIVERED -> REFUNDED
#    |           |
# CANCELLED   CANCELLED
TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}


def is_terminal(status: OrderStatus) -> bool:
    return not TRANSITIONS[status]


def ensure_transition(current: OrderStatus, new: OrderStatus) -> None:
    if new not in TRANSITIONS[current]:
        raise InvalidTransitionError(current, new)
