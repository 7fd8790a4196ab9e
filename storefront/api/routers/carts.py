#storefront/api/routers/carts.py
import secrets

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from storefront.data.cache import get_redis
from storefront.data.database import get_db
from storefront.domain.cart import CartIdentity
from storefront.domain.exceptions import IdentityError
from storefront.domain.schemas import CartOut, ItemIn, QuantityIn
from storefront.repos.cart_repo import CartRepo
from storefront.services.cart_service import CartService
from storefront.utils.settings import SESSION_COOKIE_NAME

router = APIRouter(prefix="/cart", tags=["cart"])


def get_cart_repo() -> CartRepo:
    return CartRepo(get_redis())


def get_service(db: Session, cart_repo: CartRepo):
    return CartService(db=db, cart_repo=cart_repo)


def get_identity(
    request: Request,
    response: Response,
    user_id: int | None = Query(None, gt=0),
) -> CartIdentity:
    """
    Zalogowany user albo anonimowa sesja z cookie.
    Brak cookie = nowa sesja.
    """
    if user_id is not None:
        return CartIdentity(user_id=user_id)

    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if not session_id:
        session_id = secrets.token_hex(32)
        response.set_cookie(SESSION_COOKIE_NAME, session_id, httponly=True, samesite="lax")

    return CartIdentity(session_id=session_id)


@router.get("", response_model=CartOut)
def get_cart(
    identity: CartIdentity = Depends(get_identity),
    db: Session = Depends(get_db),
    cart_repo: CartRepo = Depends(get_cart_repo),
):
    svc = get_service(db, cart_repo)
    return svc.get_cart(identity)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    identity: CartIdentity = Depends(get_identity),
    db: Session = Depends(get_db),
    cart_repo: CartRepo = Depends(get_cart_repo),
):
    svc = get_service(db, cart_repo)
    return svc.add_item(payload.product_id, payload.quantity, identity)


@router.patch("/items/{product_id}", response_model=CartOut)
def update_item(
    product_id: int,
    payload: QuantityIn,
    identity: CartIdentity = Depends(get_identity),
    db: Session = Depends(get_db),
    cart_repo: CartRepo = Depends(get_cart_repo),
):
    svc = get_service(db, cart_repo)
    return svc.update_item(product_id, payload.quantity, identity)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    identity: CartIdentity = Depends(get_identity),
    db: Session = Depends(get_db),
    cart_repo: CartRepo = Depends(get_cart_repo),
):
    svc = get_service(db, cart_repo)
    return svc.remove_item(product_id, identity)


@router.delete("", status_code=204)
def clear_cart(
    response: Response,
    identity: CartIdentity = Depends(get_identity),
    db: Session = Depends(get_db),
    cart_repo: CartRepo = Depends(get_cart_repo),
):
    svc = get_service(db, cart_repo)
    svc.clear(identity)
    response.status_code = 204


@router.post("/merge", response_model=CartOut)
def merge_cart(
    request: Request,
    response: Response,
    user_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
    cart_repo: CartRepo = Depends(get_cart_repo),
):
    """
    Wolane po zalogowaniu, przenosi koszyk sesji do koszyka usera.
    """
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if not session_id:
        raise IdentityError()

    svc = get_service(db, cart_repo)
    merged = svc.merge(user_id, session_id)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return merged
