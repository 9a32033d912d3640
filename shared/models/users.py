from sqlalchemy import JSON, TIMESTAMP, Boolean, Column, String, func
from shared.core.database import Base
from shared.core.schemas import UserAccount, parse_role_profile
from shared.utils.id_generator import generate_user_id


class Users(Base):
    __tablename__ = "users"

    id = Column(String(20), primary_key=True, default=generate_user_id)
    full_name = Column(String(200), nullable=False)

    email = Column(String(200), nullable=True)
    phone = Column(String(20), nullable=True)
    account_type = Column(String(16), nullable=False, index=True)
    # role specific fields, see shared.core.schemas.RoleProfile
    role_profile = Column(JSON, nullable=True)
    status = Column(String(16), nullable=False, default="active")
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())
    is_deleted = Column(Boolean, default=False)

    @property
    def profile(self):
        return parse_role_profile(self.account_type, self.role_profile)

    @property
    def contact(self):
        return self.email or self.phone

    def to_account(self) -> UserAccount:
        return UserAccount(
            id=self.id,
            full_name=self.full_name,
            email=self.email,
            phone=self.phone,
            status=self.status or "active",
            profile=self.profile,
        )
