from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from libs.auth.roles import UserRole


class AuthUser(BaseModel):
    """
    Represents the caller identified by a verified bearer token.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    role: str = UserRole.CLIENT.value

    @property
    def user_role(self) -> Optional[UserRole]:
        """The closed-set role, or None for non-user principals (services)."""
        try:
            return UserRole(self.role)
        except ValueError:
            return None

    def has_role(self, *roles: UserRole) -> bool:
        return self.user_role in roles
