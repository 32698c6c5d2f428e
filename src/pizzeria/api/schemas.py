"""Pydantic request schemas for the pizzeria API.

These are the external JSON contracts. Field names follow the client's
camelCase; Python code uses the snake_case attribute names.
"""

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
class RegisterRequest(CamelModel):
    # Optional so the route can answer with its own message
    name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(CamelModel):
    email: str
    password: str


class UpdateUserRequest(CamelModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None


# ---------------------------------------------------------------------------
# Menu and orders
# ---------------------------------------------------------------------------
class MenuItemRequest(CamelModel):
    title: str
    description: str = ""
    image: str = ""
    price: float = Field(ge=0)


class OrderLineRequest(CamelModel):
    menu_id: str = Field(alias="menuId")
    description: str | None = None
    price: float | None = Field(default=None, ge=0)

    def to_line(self) -> dict:
        return {"menuId": self.menu_id, "description": self.description, "price": self.price}


class PlaceOrderRequest(CamelModel):
    franchise_id: str = Field(alias="franchiseId")
    store_id: str = Field(alias="storeId")
    items: list[OrderLineRequest]

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "franchiseId": "franchise-id",
                    "storeId": "store-id",
                    "items": [{"menuId": "menu-id", "description": "Veggie", "price": 0.05}],
                }
            ]
        },
    )


# ---------------------------------------------------------------------------
# Franchises
# ---------------------------------------------------------------------------
class FranchiseAdminRequest(CamelModel):
    email: str


class CreateFranchiseRequest(CamelModel):
    name: str
    admins: list[FranchiseAdminRequest] = Field(default_factory=list)


class CreateStoreRequest(CamelModel):
    name: str
