# storefront/services/cart_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.domain.cart import Cart, CartIdentity, CartLine
from storefront.domain.exceptions import IdentityError, InsufficientStockError, NotFoundError
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use case'y dla koszyka w cache.
    commands (add, update, remove, clear, merge) zapisuja koszyk
    query (get) tylko odczyt

    Cena i stan magazynu zawsze z bazy, cache nigdy nie jest zrodlem prawdy.
    """

    def __init__(self, db: Session, cart_repo: CartRepo):
        self.products = ProductRepo(db)
        self.repo = cart_repo

    #query - odczyt
    def get_cart(self, identity: CartIdentity) -> Cart:
        return self.repo.get(identity.user_id, identity.session_id)

    #commands
    def add_item(self, product_id: int, quantity: int, identity: CartIdentity) -> Cart:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        cart = self.get_cart(identity)

        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product", product_id)

        if product.stock_quantity < quantity:
            raise InsufficientStockError(product_id, quantity, product.stock_quantity, product.name)

        lines = cart.copy_lines()
        existing = next((line for line in lines if line.product_id == product_id), None)

        if existing:
            # sprawdzamy laczna ilosc (koszyk + nowa), nie tylko roznice
            new_quantity = existing.quantity + quantity
            if product.stock_quantity < new_quantity:
                raise InsufficientStockError(product_id, new_quantity, product.stock_quantity, product.name)

            logger.info(
                f"Product {product_id} already in cart, quantity "
                f"{existing.quantity} -> {new_quantity}"
            )
            existing.quantity = new_quantity
        else:
            lines.append(
                CartLine(
                    product_id=product.id,
                    quantity=quantity,
                    unit_price=Decimal(str(product.price)),
                    display_name=product.name,
                    image_ref=product.image_url,
                )
            )

        return self._persist(lines, identity)

    def update_item(self, product_id: int, quantity: int, identity: CartIdentity) -> Cart:
        if quantity < 0:
            raise ValueError("Quantity must be at least 0")

        cart = self.get_cart(identity)
        lines = cart.copy_lines()
        existing = next((line for line in lines if line.product_id == product_id), None)

        if not existing:
            raise NotFoundError("Cart line for product", product_id)

        if quantity == 0:
            # update na 0 usuwa pozycje
            lines.remove(existing)
        else:
            product = self.products.get_product(product_id)
            if not product:
                raise NotFoundError("Product", product_id)

            if product.stock_quantity < quantity:
                raise InsufficientStockError(product_id, quantity, product.stock_quantity, product.name)

            existing.quantity = quantity

        return self._persist(lines, identity)

    def remove_item(self, product_id: int, identity: CartIdentity) -> Cart:
        cart = self.get_cart(identity)
        lines = [line for line in cart.copy_lines() if line.product_id != product_id]

        if len(lines) == len(cart.lines):
            raise NotFoundError("Cart line for product", product_id)

        return self._persist(lines, identity)

    def clear(self, identity: CartIdentity) -> None:
        # usuwamy klucz, nie zapisujemy pustego koszyka
        self.repo.delete(identity.user_id, identity.session_id)

    def merge(self, user_id: int, session_id: str) -> Cart:
        """
        Laczenie anonimowego koszyka z koszykiem usera po zalogowaniu.

        Bez walidacji stanu magazynu, stan jest sprawdzany dopiero przy
        checkoucie. Pusty koszyk sesji = nic nie zapisujemy.
        """
        if user_id is None or not session_id:
            raise IdentityError()

        session_cart = self.repo.get(session_id=session_id)
        user_cart = self.repo.get(user_id=user_id)

        if session_cart.is_empty():
            return user_cart

        lines = user_cart.copy_lines()
        for session_line in session_cart.lines:
            existing = next((line for line in lines if line.product_id == session_line.product_id), None)
            if existing:
                existing.quantity += session_line.quantity
            else:
                lines.append(session_line)

        merged = Cart.from_lines(lines)
        self.repo.save(merged, user_id=user_id)
        self.repo.delete(session_id=session_id)

        logger.info(
            f"Merged session cart ({len(session_cart.lines)} lines) into user {user_id} cart, "
            f"now {merged.line_count} items"
        )
        return merged

    def _persist(self, lines: list[CartLine], identity: CartIdentity) -> Cart:
        cart = Cart.from_lines(lines)
        self.repo.save(cart, identity.user_id, identity.session_id)
        return cart
