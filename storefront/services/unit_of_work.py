# storefront/services/unit_of_work.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_line import OrderLineModel
from storefront.domain.exceptions import InsufficientStockError, NotFoundError
from storefront.domain.order_status import OrderStatus
from storefront.repos.customer_repo import CustomerRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderUnitOfWork:
    """
    Jedna atomowa jednostka tworzenia zamowienia:
    -zamowienie + pozycje
    -zdjecie ze stanu magazynu
    -statystyki klienta

    Wszystko albo nic. Wyjscie z bloku `with` bez commit() albo z wyjatkiem
    robi rollback, wiec nie ma czesciowego zamowienia ani czesciowego
    zdjecia ze stanu.
    """

    def __init__(self, db: Session):
        self.db = db
        self.orders = OrderRepo(db)
        self.products = ProductRepo(db)
        self.customers = CustomerRepo(db)
        self.committed = False

    def __enter__(self) -> "OrderUnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None or not self.committed:
            self.rollback()

    def add_order(self, customer_id: int, total: Decimal) -> OrderModel:
        return self.orders.create_order(
            OrderModel(
                customer_id=customer_id,
                status=OrderStatus.PENDING,
                total=total,
                order_date=datetime.now(timezone.utc),
            )
        )

    def add_line(self, order: OrderModel, product_id: int, quantity: int, unit_price: Decimal) -> OrderLineModel:
        return self.orders.create_order_line(
            OrderLineModel(
                order_id=order.id,
                product_id=product_id,
                quantity=quantity,
                unit_price=unit_price,
            )
        )

    def decrement_stock(self, product_id: int, quantity: int, product_name: str | None = None) -> None:
        rowcount = self.products.decrement_stock(product_id, quantity)

        # 0 rows affected = ktos inny kupil w miedzyczasie
        if rowcount == 0:
            available = self.products.get_stock(product_id)
            logger.warning(
                f"Conditional stock decrement failed for product {product_id}: "
                f"requested {quantity}, available {available}"
            )
            raise InsufficientStockError(product_id, quantity, available, product_name)

    def record_purchase(self, customer_id: int, total: Decimal) -> None:
        rowcount = self.customers.update_customer_stats(
            customer_id,
            spent=total,
            purchased_at=datetime.now(timezone.utc),
        )
        if rowcount == 0:
            raise NotFoundError("Customer", customer_id)

    def commit(self) -> None:
        self.db.commit()
        self.committed = True

    def rollback(self) -> None:
        self.db.rollback()
