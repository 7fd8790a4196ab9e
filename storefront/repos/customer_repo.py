# storefront/repos/customer_repo.py
from datetime import datetime
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.orm import Session

from storefront.data.models.customer import CustomerModel


class CustomerRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_customer(self, customer_id: int) -> CustomerModel | None:
        return self.db.get(CustomerModel, customer_id)

    def update_customer_stats(self, customer_id: int, spent: Decimal, purchased_at: datetime) -> int:
        result = self.db.execute(
            update(CustomerModel)
            .where(CustomerModel.id == customer_id)
            .values(
                total_orders=CustomerModel.total_orders + 1,
                total_spent=CustomerModel.total_spent + spent,
                last_purchase_date=purchased_at,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
