# storefront/domain/cart.py
"""
Typy koszyka trzymanego w cache.

Koszyk nie ma wlasnego id, jego tozsamosc wynika z klucza w cache
(cart:user:<id> albo cart:session:<id>). Pozycje przechowuja migawke
ceny i nazwy z momentu dodania, nigdy nie sa zrodlem prawdy dla checkoutu.
"""
import json
from dataclasses import dataclass, field, replace
from decimal import Decimal

from storefront.domain.exceptions import IdentityError

CENTS = Decimal("0.01")


@dataclass
class CartLine:
    product_id: int
    quantity: int
    unit_price: Decimal
    display_name: str
    image_ref: str | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
            "display_name": self.display_name,
            "image_ref": self.image_ref,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        return cls(
            product_id=int(data["product_id"]),
            quantity=int(data["quantity"]),
            unit_price=Decimal(str(data["unit_price"])),
            display_name=data.get("display_name", ""),
            image_ref=data.get("image_ref"),
        )


@dataclass
class Cart:
    lines: list[CartLine] = field(default_factory=list)
    total: Decimal = Decimal("0.00")
    line_count: int = 0

    @classmethod
    def empty(cls) -> "Cart":
        return cls()

    @classmethod
    def from_lines(cls, lines: list[CartLine]) -> "Cart":
        """
        Jedyne miejsce liczenia total i line_count.
        Zawsze od zera z listy pozycji, nigdy przyrostowo.
        """
        total = sum((line.subtotal for line in lines), Decimal("0.00"))
        line_count = sum(line.quantity for line in lines)
        return cls(lines=list(lines), total=total.quantize(CENTS), line_count=line_count)

    def is_empty(self) -> bool:
        return not self.lines

    def copy_lines(self) -> list[CartLine]:
        return [replace(line) for line in self.lines]

    def to_json(self) -> str:
        return json.dumps(
            {
                "lines": [line.to_dict() for line in self.lines],
                "total": str(self.total),
                "line_count": self.line_count,
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> "Cart":
        # zapisane total/line_count ignorujemy, liczymy od nowa z pozycji
        data = json.loads(raw)
        return cls.from_lines([CartLine.from_dict(item) for item in data.get("lines", [])])


@dataclass(frozen=True)
class Hit:
    cart: Cart


@dataclass(frozen=True)
class Miss:
    pass


CacheResult = Hit | Miss


@dataclass(frozen=True)
class CartIdentity:
    """User albo sesja, dostarczane przez warstwe HTTP."""

    user_id: int | None = None
    session_id: str | None = None

    @property
    def key(self) -> str:
        return cart_key(self.user_id, self.session_id)


def cart_key(user_id: int | None = None, session_id: str | None = None) -> str:
    # user ma pierwszenstwo, sesja tylko dla anonimowych
    if user_id is not None:
        return f"cart:user:{user_id}"
    if session_id:
        return f"cart:session:{session_id}"
    raise IdentityError()
