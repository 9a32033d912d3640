from enum import Enum


class UserAccountType(str, Enum):
    TENANT = "tenant"
    STAFF = "staff"
    MANAGER = "manager"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
