from pydantic import BaseModel, Field, TypeAdapter
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar, Union
from typing_extensions import Annotated

# Shared properties
T = TypeVar("T")


class Lookup(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str


# ---------------- Role payloads ----------------
# One common user record; the role-specific fields live in exactly one of
# these payloads, selected by account_type.

class TenantProfile(BaseModel):
    account_type: Literal["tenant"] = "tenant"
    apartment_number: Optional[str] = None
    building_id: Optional[str] = None


class StaffProfile(BaseModel):
    account_type: Literal["staff"] = "staff"
    staff_id: Optional[str] = None
    specializations: List[str] = []


class ManagerProfile(BaseModel):
    account_type: Literal["manager"] = "manager"
    building_ids: List[str] = []


class AdminProfile(BaseModel):
    account_type: Literal["admin"] = "admin"
    access_level: str = "full"


RoleProfile = Annotated[
    Union[TenantProfile, StaffProfile, ManagerProfile, AdminProfile],
    Field(discriminator="account_type"),
]

role_profile_adapter = TypeAdapter(RoleProfile)


def parse_role_profile(account_type: str, payload: Optional[Dict[str, Any]] = None):
    return role_profile_adapter.validate_python(
        {**(payload or {}), "account_type": account_type}
    )


class UserAccount(BaseModel):
    id: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str = "active"
    profile: RoleProfile

    @property
    def account_type(self) -> str:
        return self.profile.account_type

    @property
    def contact(self) -> Optional[str]:
        return self.email or self.phone


class UserAccountCreate(BaseModel):
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    profile: RoleProfile
