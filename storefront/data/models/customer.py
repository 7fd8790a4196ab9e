from sqlalchemy import Column, Integer, String, DateTime, Numeric

from storefront.data.database import Base


class CustomerModel(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)

    # agregaty utrzymywane tylko przez transakcje tworzenia zamowienia
    total_orders = Column(Integer, nullable=False, default=0)
    total_spent = Column(Numeric(12, 2), nullable=False, default=0)
    last_purchase_date = Column(DateTime(timezone=True), nullable=True)
