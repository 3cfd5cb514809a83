"""Security utilities for password hashing and JWT-based auth."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from restohub.core.config import settings
from restohub.db.session import get_db
from restohub.models.customer import Customer
from restohub.models.staff import MANAGER_ROLE, Staff

pwd_context: CryptContext = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
bearer_scheme: HTTPBearer = HTTPBearer(auto_error=False)

STAFF_TOKEN = "staff"
CUSTOMER_TOKEN = "customer"


@dataclass(frozen=True)
class StaffPrincipal:
    staff_id: int
    role: str


@dataclass(frozen=True)
class CustomerPrincipal:
    customer_id: int


Principal = StaffPrincipal | CustomerPrincipal


class AuthError(Exception):
    """Classified bearer-token failure."""

    STATUS_BY_KIND: dict[str, int] = {
        "missing": status.HTTP_401_UNAUTHORIZED,
        "expired": status.HTTP_401_UNAUTHORIZED,
        "malformed": status.HTTP_403_FORBIDDEN,
        "invalid-signature": status.HTTP_403_FORBIDDEN,
        "wrong-audience": status.HTTP_403_FORBIDDEN,
    }
    MESSAGE_BY_KIND: dict[str, str] = {
        "missing": "No token provided",
        "expired": "Token expired",
        "malformed": "Malformed token",
        "invalid-signature": "Invalid token",
        "wrong-audience": "Access denied for this token type",
    }

    def __init__(self, kind: str) -> None:
        super().__init__(kind)
        self.kind = kind

    def to_http(self) -> HTTPException:
        return HTTPException(
            status_code=self.STATUS_BY_KIND[self.kind],
            detail=self.MESSAGE_BY_KIND[self.kind],
        )


def get_password_hash(password: str) -> str:
    """Hash a plaintext password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def is_password_hash(value: str | None) -> bool:
    """Return whether a stored password value is a recognised hash."""
    if not value:
        return False
    return pwd_context.identify(value) is not None


def create_access_token(data: dict[str, Any]) -> str:
    """Create a signed JWT access token from payload data."""
    to_encode: dict[str, Any] = data.copy()
    expire: datetime = datetime.now(timezone.utc) + timedelta(
        minutes=settings.jwt_expire_minutes
    )
    to_encode.update({"exp": expire})
    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def create_staff_token(staff: Staff) -> str:
    return create_access_token(
        data={"sub": str(staff.id), "type": STAFF_TOKEN, "role": staff.role, "email": staff.email, "name": staff.name}
    )


def create_customer_token(customer: Customer) -> str:
    return create_access_token(data={"sub": str(customer.id), "type": CUSTOMER_TOKEN, "email": customer.email})


def decode_principal(token: str | None) -> Principal:
    """Decode a bearer token into a typed principal.

    Raises:
        AuthError: classified as ``missing``, ``malformed``, ``expired``,
            ``invalid-signature`` or ``wrong-audience``.
    """
    if not token:
        raise AuthError("missing")

    try:
        jwt.get_unverified_claims(token)
    except JWTError as exc:
        raise AuthError("malformed") from exc

    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as exc:
        raise AuthError("expired") from exc
    except JWTError as exc:
        raise AuthError("invalid-signature") from exc

    try:
        subject_id = int(payload.get("sub"))
    except (TypeError, ValueError) as exc:
        raise AuthError("malformed") from exc

    token_type = payload.get("type")
    if token_type == STAFF_TOKEN:
        return StaffPrincipal(staff_id=subject_id, role=str(payload.get("role") or ""))
    if token_type == CUSTOMER_TOKEN:
        return CustomerPrincipal(customer_id=subject_id)
    raise AuthError("wrong-audience")


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Resolve the caller from the Authorization header, staff or customer."""
    try:
        return decode_principal(credentials.credentials if credentials else None)
    except AuthError as exc:
        raise exc.to_http() from exc


def get_current_staff(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> Staff:
    """Require a staff token and return the matching staff row."""
    if not isinstance(principal, StaffPrincipal):
        raise AuthError("wrong-audience").to_http()
    staff: Staff | None = db.get(Staff, principal.staff_id)
    if staff is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Staff user not found",
        )
    return staff


def require_manager(staff: Staff = Depends(get_current_staff)) -> Staff:
    if staff.role != MANAGER_ROLE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Manager role required")
    return staff


def get_current_customer(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> Customer:
    """Require a customer token and return the matching customer row."""
    if not isinstance(principal, CustomerPrincipal):
        raise AuthError("wrong-audience").to_http()
    customer: Customer | None = db.get(Customer, principal.customer_id)
    if customer is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Customer not found",
        )
    return customer
