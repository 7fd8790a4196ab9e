#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata
from storefront.data.models.product import ProductModel
from storefront.data.models.customer import CustomerModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_line import OrderLineModel

__all__ = ["ProductModel", "CustomerModel", "OrderModel", "OrderLineModel"]
