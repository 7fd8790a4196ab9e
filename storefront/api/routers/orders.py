# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.routers.carts import get_cart_repo
from storefront.data.database import get_db
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import (
    OrderCreate,
    OrderListOut,
    OrderStatsOut,
    OrderStatusIn,
    PlacedOrderOut,
)
from storefront.repos.cart_repo import CartRepo
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=PlacedOrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamowienie z listy pozycji, ceny zawsze z bazy.
    """
    svc = get_service(db)
    return svc.create_order(user_id, [item.model_dump() for item in payload.items])


@router.post("/checkout", response_model=PlacedOrderOut, status_code=201)
def checkout(
    user_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
    cart_repo: CartRepo = Depends(get_cart_repo),
):
    """
    Tworzy zamowienie z koszyka usera i czysci koszyk.
    """
    svc = get_service(db)
    return svc.create_order_from_cart(user_id, cart_repo)


@router.get("", response_model=OrderListOut)
def list_orders(
    user_id: int = Query(..., gt=0),
    status: OrderStatus | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return svc.list_orders(user_id, status=status, page=page, limit=limit)


@router.get("/admin/all", response_model=OrderListOut)
def list_all_orders(
    status: OrderStatus | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return svc.list_all_orders(status=status, page=page, limit=limit)


@router.get("/admin/stats", response_model=OrderStatsOut)
def order_stats(db: Session = Depends(get_db)):
    svc = get_service(db)
    return svc.order_stats()


@router.get("/{order_id}", response_model=PlacedOrderOut)
def get_order(
    order_id: int,
    user_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return svc.get_order(order_id, user_id)


@router.patch("/{order_id}/status", response_model=PlacedOrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return svc.update_order_status(order_id, payload.status)
