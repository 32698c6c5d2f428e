"""FastAPI routers for auth, menu/orders and franchises.

Every router is mounted under ``/api`` by the application.
"""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from pizzeria.api.dependencies import get_caller
from pizzeria.api.schemas import (
    CreateFranchiseRequest,
    CreateStoreRequest,
    LoginRequest,
    MenuItemRequest,
    PlaceOrderRequest,
    RegisterRequest,
    UpdateUserRequest,
)
from pizzeria.auth.guard import Caller, can_act_for_user, require_admin, require_franchise_admin
from pizzeria.auth.session import IssueToken, LogIn, RevokeToken
from pizzeria.errors import Forbidden, InvalidInput, NotFound
from pizzeria.franchise.management import CreateFranchise, DeleteFranchise
from pizzeria.franchise.stores import CreateStore, DeleteStore
from pizzeria.franchise.views import franchise_record, list_franchises, user_franchises
from pizzeria.menu.management import AddMenuItem
from pizzeria.menu.menu_item import MenuItem
from pizzeria.order.workflow import OrderWorkflow
from pizzeria.telemetry import get_metrics
from pizzeria.user.account import UpdateUser
from pizzeria.user.registration import RegisterUser
from pizzeria.user.user import User
from pizzeria.utils.commands import process
from pizzeria.utils.logging import get_logger

logger = get_logger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["auth"])
order_router = APIRouter(prefix="/order", tags=["order"])
franchise_router = APIRouter(prefix="/franchise", tags=["franchise"])


def _user_summary(user_id) -> dict:
    return current_domain.repository_for(User).get(user_id).to_summary()


def _menu() -> list[dict]:
    return [item.to_record() for item in current_domain.repository_for(MenuItem).catalog()]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
@auth_router.post("")
async def register(body: RegisterRequest):
    """Register a new user"""
    if not (body.name and body.email and body.password):
        raise InvalidInput("name, email, and password are required")

    user_id = process(RegisterUser(name=body.name, email=body.email, password=body.password))
    token = process(IssueToken(user_id=user_id))
    get_metrics().track_auth_attempt(True)
    logger.info("user_registered", user_id=user_id)
    return {"user": _user_summary(user_id), "token": token}


@auth_router.put("")
async def login(body: LoginRequest):
    """Login existing user"""
    try:
        token = process(LogIn(email=body.email, password=body.password))
    except NotFound:
        get_metrics().track_auth_attempt(False)
        raise

    get_metrics().track_auth_attempt(True)
    user = current_domain.repository_for(User).find_by_email(body.email)
    return {"user": user.to_summary(), "token": token}


@auth_router.delete("")
async def logout(caller: Caller = Depends(get_caller)):
    """Logout a user"""
    process(RevokeToken(token=caller.token))
    get_metrics().track_logout()
    return {"message": "logout successful"}


@auth_router.put("/{user_id}")
async def update_user(user_id: str, body: UpdateUserRequest, caller: Caller = Depends(get_caller)):
    """Update user"""
    if not can_act_for_user(caller, user_id):
        raise Forbidden("unauthorized")

    process(UpdateUser(user_id=user_id, name=body.name, email=body.email, password=body.password))
    return _user_summary(user_id)


# ---------------------------------------------------------------------------
# Menu and orders
# ---------------------------------------------------------------------------
@order_router.get("/menu")
async def get_menu():
    """Get the pizza menu"""
    return _menu()


@order_router.put("/menu")
async def add_menu_item(body: MenuItemRequest, caller: Caller = Depends(get_caller)):
    """Add an item to the menu"""
    require_admin(caller, "unable to add menu item")
    process(
        AddMenuItem(title=body.title, description=body.description, image=body.image, price=body.price),
        failure_message="unable to add menu item",
    )
    return _menu()


@order_router.get("")
async def list_orders(page: int = Query(default=1), caller: Caller = Depends(get_caller)):
    """Get the orders for the authenticated user"""
    return OrderWorkflow().list_orders(caller, page)


@order_router.post("")
async def place_order(body: PlaceOrderRequest, caller: Caller = Depends(get_caller)):
    """Create a order for the authenticated user"""
    return await OrderWorkflow().place_order(
        caller,
        body.franchise_id,
        body.store_id,
        [line.to_line() for line in body.items],
    )


# ---------------------------------------------------------------------------
# Franchises and stores
# ---------------------------------------------------------------------------
@franchise_router.get("")
async def get_franchises(name: str | None = Query(default=None), caller: Caller = Depends(get_caller)):
    """List all the franchises"""
    return list_franchises(caller, name)


@franchise_router.get("/{user_id}")
async def get_user_franchises(user_id: str, caller: Caller = Depends(get_caller)):
    """List a user's franchises"""
    return user_franchises(caller, user_id)


@franchise_router.post("")
async def create_franchise(body: CreateFranchiseRequest, caller: Caller = Depends(get_caller)):
    """Create a new franchise"""
    require_admin(caller, "unable to create a franchise")

    franchise_id = process(
        CreateFranchise(name=body.name, admin_emails=json.dumps([admin.email for admin in body.admins]))
    )
    return franchise_record(franchise_id)


@franchise_router.delete("/{franchise_id}")
async def delete_franchise(franchise_id: str, caller: Caller = Depends(get_caller)):
    """Delete a franchise"""
    require_admin(caller, "unable to delete a franchise")
    process(DeleteFranchise(franchise_id=franchise_id), failure_message="unable to delete franchise")
    return {"message": "franchise deleted"}


@franchise_router.post("/{franchise_id}/store")
async def create_store(franchise_id: str, body: CreateStoreRequest, caller: Caller = Depends(get_caller)):
    """Create a new franchise store"""
    require_franchise_admin(caller, franchise_id, "unable to create a store")
    return process(CreateStore(franchise_id=franchise_id, name=body.name))


@franchise_router.delete("/{franchise_id}/store/{store_id}")
async def delete_store(franchise_id: str, store_id: str, caller: Caller = Depends(get_caller)):
    """Delete a store"""
    require_franchise_admin(caller, franchise_id, "unable to delete a store")
    process(DeleteStore(franchise_id=franchise_id, store_id=store_id))
    return {"message": "store deleted"}
