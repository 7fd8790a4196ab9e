"""
Wyjatki domenowe rdzenia koszyk/zamowienie.

Wszystkie sa rzucane synchronicznie tam, gdzie warunek zostal wykryty,
i przechodza bez zmian do warstwy HTTP, ktora tlumaczy je na kody statusu.
"""


class DomainError(Exception):
    """Bazowy wyjatek domeny."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class NotFoundError(DomainError):
    """Produkt, zamowienie, klient albo pozycja koszyka nie istnieje."""

    def __init__(self, entity: str, entity_id):
        if isinstance(entity_id, (list, tuple, set)):
            ids = ", ".join(str(i) for i in entity_id)
            message = f"{entity} not found: {ids}"
        else:
            message = f"{entity} #{entity_id} not found"
        super().__init__(message=message, code="NOT_FOUND")
        self.entity = entity
        self.entity_id = entity_id


class InsufficientStockError(DomainError):
    """Zadana ilosc przekracza aktualny stan magazynu."""

    def __init__(self, product_id: int, requested: int, available: int, product_name: str | None = None):
        label = f'"{product_name}"' if product_name else f"#{product_id}"
        super().__init__(
            message=f"Insufficient stock for product {label}. Available: {available}, Requested: {requested}",
            code="INSUFFICIENT_STOCK",
        )
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available


class InvalidTransitionError(DomainError):
    """Niedozwolona zmiana statusu zamowienia."""

    def __init__(self, current, requested):
        super().__init__(
            message=f"Cannot transition from {current.value} to {requested.value}",
            code="INVALID_TRANSITION",
        )
        self.current = current
        self.requested = requested


class IdentityError(DomainError):
    """Operacja na koszyku bez user_id i bez session_id."""

    def __init__(self):
        super().__init__(message="userId or sessionId required", code="IDENTITY_REQUIRED")


class EmptyCartError(ValueError):
    pass
