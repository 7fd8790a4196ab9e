# storefront/repos/product_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        # zawsze swiezy odczyt, stan magazynu mogl sie zmienic poza ta sesja
        return self.db.get(ProductModel, product_id, populate_existing=True)

    def get_products(self, product_ids: list[int]) -> list[ProductModel]:
        if not product_ids:
            return []
        return list(
            self.db.execute(
                select(ProductModel)
                .where(ProductModel.id.in_(product_ids))
                .execution_options(populate_existing=True)
            ).scalars().all()
        )

    def get_stock(self, product_id: int) -> int:
        stock = self.db.execute(
            select(ProductModel.stock_quantity).where(ProductModel.id == product_id)
        ).scalar_one_or_none()
        return stock or 0

    def decrement_stock(self, product_id: int, amount: int) -> int:
        # warunkowy update, nie pozwala zejsc ponizej zera
        # UPDATE products SET stock_quantity = stock_quantity - 2 WHERE id = 1 AND stock_quantity >= 2
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.stock_quantity >= amount,
            )
            .values(stock_quantity=ProductModel.stock_quantity - amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
