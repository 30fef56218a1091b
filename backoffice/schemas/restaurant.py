from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["admin", "manager", "chef", "staff", "inventory"]


class RestaurantCreate(BaseModel):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None


class RestaurantOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    primary_color: str
    secondary_color: str
    font_family: str
    created_at: str
    updated_at: str


class MembershipOut(BaseModel):
    restaurant: RestaurantOut
    role: Role


class MemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    restaurant_id: int
    role: Role
    is_active: bool
    created_at: str


class MemberRoleUpdate(BaseModel):
    role: Role
