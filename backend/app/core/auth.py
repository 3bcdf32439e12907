"""
Authentication and authorization for the API
Validates bearer JWTs (issued elsewhere) and provides capability checks
"""
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel

from app.core.config import settings


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

ADMIN = "admin"
CUSTOMER = "customer"

# Role hierarchy: admin > customer
ROLE_LEVELS = {
    ADMIN: 2,
    CUSTOMER: 1,
}


class TokenUser(BaseModel):
    """User data extracted from JWT token"""
    id: str
    email: str
    name: Optional[str] = None
    role: str = CUSTOMER
    customer_id: Optional[UUID] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN

    def can_act_for(self, customer_id: UUID) -> bool:
        """Admins act for anyone; customers only for themselves"""
        return self.is_admin or (self.customer_id is not None and self.customer_id == customer_id)


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a bearer JWT.

    Expected payload:
    {
        "sub": "user_id",
        "email": "ana@example.com",
        "name": "Ana",
        "role": "customer",
        "customer_id": "4b1d...",
        "exp": 1234567890
    }
    """
    try:
        return jwt.decode(
            token,
            settings.AUTH_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False}
        )
    except JWTError as e:
        error_msg = str(e).lower()
        if "expired" in error_msg:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"}
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"}
        )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    """
    Dependency that extracts and validates the current user from JWT.

    Usage:
        @router.get("/protected")
        async def protected_route(user: TokenUser = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    payload = decode_access_token(credentials.credentials)

    user_id = payload.get("id") or payload.get("sub")
    email = payload.get("email")

    if not user_id or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload: missing user id or email",
            headers={"WWW-Authenticate": "Bearer"}
        )

    try:
        return TokenUser(
            id=str(user_id),
            email=email,
            name=payload.get("name"),
            role=payload.get("role", CUSTOMER),
            customer_id=payload.get("customer_id")
        )
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"}
        )


def require_role(required_role: str):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.delete("/orders/{order_id}")
        async def delete_order(
            order_id: UUID,
            user: TokenUser = Depends(require_role("admin"))
        ):
            # Only admins can delete orders
            pass
    """
    async def role_checker(
        user: TokenUser = Depends(get_current_user)
    ) -> TokenUser:
        user_level = ROLE_LEVELS.get(user.role, 0)
        required_level = ROLE_LEVELS.get(required_role, 0)

        if user_level < required_level:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {required_role}, your role: {user.role}"
            )

        return user

    return role_checker


def ensure_can_act_for(user: TokenUser, customer_id: UUID) -> None:
    """Ownership check: raise 403 unless user is admin or is this customer"""
    if not user.can_act_for(customer_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied for this customer"
        )
