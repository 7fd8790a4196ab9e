# storefront/services/order_service.py
import math
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_line import OrderLineModel
from storefront.domain.cart import CENTS
from storefront.domain.exceptions import (
    EmptyCartError,
    InsufficientStockError,
    InvalidTransitionError,
    NotFoundError,
)
from storefront.domain.order_status import OrderStatus, ensure_transition, is_terminal
from storefront.repos.cart_repo import CartRepo
from storefront.repos.customer_repo import CustomerRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.unit_of_work import OrderUnitOfWork
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Separacja od CartService, koszyk w cache nie jest tu zrodlem prawdy.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.customers = CustomerRepo(db)

    def create_order(self, customer_id: int, items: list[dict]) -> dict:
        """
        Use Case: Tworzenie zamowienia.

        1. Sprawdza, czy klient istnieje
        2. Pobiera wszystkie produkty jednym zapytaniem
        3. Sprawdza stan magazynu na swiezo pobranych danych
        4. Liczy total z cen z bazy (nie z koszyka)
        5. W jednej transakcji: zamowienie, pozycje, stan magazynu, statystyki klienta
        """
        quantities = _coalesce(items)
        if not quantities:
            raise ValueError("Order must contain at least one item")

        if not self.customers.get_customer(customer_id):
            raise NotFoundError("Customer", customer_id)

        product_ids = list(quantities)
        products = {p.id: p for p in self.products.get_products(product_ids)}

        missing = [pid for pid in product_ids if pid not in products]
        if missing:
            raise NotFoundError("Products", missing)

        for pid, quantity in quantities.items():
            product = products[pid]
            if product.stock_quantity < quantity:
                raise InsufficientStockError(pid, quantity, product.stock_quantity, product.name)

        prices = {pid: Decimal(str(products[pid].price)) for pid in product_ids}
        total = sum((prices[pid] * qty for pid, qty in quantities.items()), Decimal("0.00")).quantize(CENTS)

        with OrderUnitOfWork(self.db) as uow:
            order = uow.add_order(customer_id, total)
            lines = [
                uow.add_line(order, pid, qty, prices[pid])
                for pid, qty in quantities.items()
            ]
            for pid, qty in quantities.items():
                uow.decrement_stock(pid, qty, products[pid].name)
            uow.record_purchase(customer_id, total)
            uow.commit()

        logger.info(f"Order {order.id} created for customer {customer_id}, total {total}")

        return _order_to_dict(order, lines)

    def create_order_from_cart(self, customer_id: int, cart_repo: CartRepo) -> dict:
        """
        Use Case: Checkout koszyka usera.
        Z koszyka bierzemy tylko product_id i ilosc, ceny sa liczone od nowa.
        Koszyk jest usuwany dopiero po commicie zamowienia.
        """
        cart = cart_repo.get(user_id=customer_id)
        if cart.is_empty():
            raise EmptyCartError("Cannot checkout an empty cart")

        result = self.create_order(
            customer_id,
            [{"product_id": line.product_id, "quantity": line.quantity} for line in cart.lines],
        )

        cart_repo.delete(user_id=customer_id)
        return result

    def update_order_status(self, order_id: int, new_status: OrderStatus) -> dict:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order", order_id)

        new_status = OrderStatus(new_status)
        current = order.status
        try:
            ensure_transition(current, new_status)
        except InvalidTransitionError:
            logger.warning(f"Rejected status change of order {order_id}: {current.value} -> {new_status.value}")
            raise

        self.repo.update_order_status(order, new_status)
        self.db.commit()

        logger.info(f"Order {order_id} status {current.value} -> {new_status.value}")
        if is_terminal(new_status):
            logger.info(f"Order {order_id} closed as {new_status.value}")

        return _order_to_dict(order, order.lines)

    def get_order(self, order_id: int, customer_id: int) -> dict:
        """
        Use Case: Pobranie zamowienia klienta (Query).
        Zamowienie innego klienta traktujemy jak nieistniejace.
        """
        order = self.repo.get_order(order_id)

        if not order or order.customer_id != customer_id:
            raise NotFoundError("Order", order_id)

        return _order_to_dict(order, order.lines)

    def list_orders(
        self,
        customer_id: int,
        status: OrderStatus | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> dict:
        orders, total = self.repo.list_orders(
            customer_id=customer_id,
            status=status,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return {
            "orders": [_order_to_dict(o, o.lines) for o in orders],
            "pagination": _pagination(total, page, limit),
        }

    def list_all_orders(self, status: OrderStatus | None = None, page: int = 1, limit: int = 20) -> dict:
        orders, total = self.repo.list_orders(
            status=status,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return {
            "orders": [_order_to_dict(o, o.lines) for o in orders],
            "pagination": _pagination(total, page, limit),
        }

    def order_stats(self) -> dict:
        start_of_day = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        return {
            "total_orders": self.repo.count_orders(),
            "pending_orders": self.repo.count_orders(status=OrderStatus.PENDING),
            "total_revenue": self.repo.total_revenue(),
            "orders_today": self.repo.count_orders(since=start_of_day),
        }


def _coalesce(items: list[dict]) -> dict[int, int]:
    # ten sam produkt kilka razy = jedna pozycja z suma ilosci
    quantities: dict[int, int] = {}
    for item in items:
        pid = int(item["product_id"])
        quantity = int(item["quantity"])
        if quantity <= 0:
            raise ValueError("Quantity must be at least 1")
        quantities[pid] = quantities.get(pid, 0) + quantity
    return quantities


def _pagination(total: int, page: int, limit: int) -> dict:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
    }


def _order_to_dict(order: OrderModel, lines: list[OrderLineModel]) -> dict:
    return {
        "order": {
            "id": order.id,
            "customer_id": order.customer_id,
            "order_date": order.order_date,
            "status": order.status,
            "total": order.total,
        },
        "lines": [
            {
                "id": line.id,
                "order_id": line.order_id,
                "product_id": line.product_id,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
            }
            for line in lines
        ],
    }
