# storefront/repos/order_repo.py
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_line import OrderLineModel
from storefront.domain.order_status import OrderStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        # flush zamiast commit, commit robi unit of work
        self.db.add(order)
        self.db.flush()
        return order

    def create_order_line(self, line: OrderLineModel) -> OrderLineModel:
        self.db.add(line)
        self.db.flush()
        return line

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.lines))
            .where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def update_order_status(self, order: OrderModel, status: OrderStatus) -> OrderModel:
        order.status = status
        self.db.flush()
        return order

    def list_orders(
        self,
        customer_id: int | None = None,
        status: OrderStatus | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[OrderModel], int]:
        query = select(OrderModel).options(selectinload(OrderModel.lines))
        count_query = select(func.count(OrderModel.id))
        if customer_id is not None:
            query = query.where(OrderModel.customer_id == customer_id)
            count_query = count_query.where(OrderModel.customer_id == customer_id)
        if status is not None:
            query = query.where(OrderModel.status == status)
            count_query = count_query.where(OrderModel.status == status)

        orders = self.db.execute(
            query
            .order_by(OrderModel.order_date.desc(), OrderModel.id.desc())
            .offset(offset)
            .limit(limit)
        ).scalars().all()

        total = self.db.execute(count_query).scalar_one()

        return list(orders), total

    def count_orders(self, status: OrderStatus | None = None, since: datetime | None = None) -> int:
        query = select(func.count(OrderModel.id))
        if status is not None:
            query = query.where(OrderModel.status == status)
        if since is not None:
            query = query.where(OrderModel.order_date >= since)
        return self.db.execute(query).scalar_one()

    def total_revenue(self) -> Decimal:
        revenue = self.db.execute(select(func.sum(OrderModel.total))).scalar_one_or_none()
        return Decimal(str(revenue)) if revenue is not None else Decimal("0.00")
