"""Customer account operations."""

from __future__ import annotations

import logging
import re
import secrets
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from restohub.core.security import get_password_hash, is_password_hash, verify_password
from restohub.models.customer import GUEST_NAME_PREFIX, Customer

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"[0-9]{10}")
EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
REQUIRED_ADDRESS_FIELDS: tuple[str, ...] = ("ward", "district", "street", "houseNumber")


class CustomerValidationError(ValueError):
    """Raised for rejected registration or profile input."""


def validate_phone(phone: str | None) -> None:
    if not phone:
        raise CustomerValidationError("Phone must not be empty.")
    if not PHONE_PATTERN.fullmatch(phone):
        raise CustomerValidationError("Phone must be a number with exactly 10 digits.")


def validate_email(email: str | None) -> None:
    if not email:
        raise CustomerValidationError("Email cannot be empty.")
    if not EMAIL_PATTERN.match(email):
        raise CustomerValidationError("Invalid email format.")


def get_customer_by_email(db: Session, email: str) -> Customer | None:
    return db.scalar(select(Customer).where(Customer.email == email).limit(1))


def get_customer_by_phone(db: Session, phone: str) -> Customer | None:
    return db.scalar(select(Customer).where(Customer.phone == phone).order_by(Customer.id.asc()).limit(1))


def duplicate_message(db: Session, email: str | None, phone: str | None, exclude_id: int | None = None) -> str | None:
    """Describe which identifier is already taken; email wins when both are."""
    if email:
        query = select(Customer.id).where(Customer.email == email)
        if exclude_id is not None:
            query = query.where(Customer.id != exclude_id)
        if db.scalar(query.limit(1)) is not None:
            return "Email already registered"
    if phone:
        query = select(Customer.id).where(Customer.phone == phone)
        if exclude_id is not None:
            query = query.where(Customer.id != exclude_id)
        if db.scalar(query.limit(1)) is not None:
            return "Phone already registered"
    return None


def build_address(
    *,
    ward: str | None,
    district: str | None,
    street: str | None,
    house_number: str | None,
    building_name: str | None = None,
    block: str | None = None,
    floor: str | None = None,
    room_number: str | None = None,
) -> dict[str, Any]:
    return {
        "ward": ward,
        "district": district,
        "street": street,
        "houseNumber": house_number,
        "buildingName": building_name,
        "block": block,
        "floor": floor,
        "roomNumber": room_number,
    }


def register_customer(
    db: Session,
    *,
    name: str,
    phone: str,
    email: str,
    password: str,
    address: dict[str, Any],
) -> Customer:
    customer = Customer(
        name=name,
        phone=phone,
        email=email,
        password_hash=get_password_hash(password),
        loyalty_points=0,
        address=address,
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)
    logger.info("[AUTH] Customer registered customer_id=%s", customer.id)
    return customer


def authenticate_customer(db: Session, email: str, password: str) -> Customer | None:
    """Check credentials, upgrading a legacy plaintext password to a hash on success."""
    customer = get_customer_by_email(db, email)
    if customer is None:
        return None

    if is_password_hash(customer.password_hash):
        return customer if verify_password(password, customer.password_hash) else None

    if not secrets.compare_digest(password.encode("utf-8"), (customer.password_hash or "").encode("utf-8")):
        return None
    customer.password_hash = get_password_hash(password)
    db.commit()
    db.refresh(customer)
    logger.info("[AUTH] Upgraded plaintext password for customer_id=%s", customer.id)
    return customer


def update_address(db: Session, customer: Customer, address: dict[str, Any]) -> Customer:
    missing = [field for field in REQUIRED_ADDRESS_FIELDS if not address.get(field)]
    if missing:
        raise CustomerValidationError("Required address fields are missing")
    customer.address = dict(address)
    db.commit()
    db.refresh(customer)
    return customer


def update_information(
    db: Session,
    customer: Customer,
    *,
    name: str | None,
    email: str | None,
    phone: str | None,
) -> Customer:
    if not name and not email and not phone:
        raise CustomerValidationError("Required fields are missing")
    if phone:
        validate_phone(phone)
    if email:
        validate_email(email)
    duplicate = duplicate_message(db, email, phone, exclude_id=customer.id)
    if duplicate is not None:
        raise CustomerValidationError(duplicate)

    if name:
        customer.name = name
    if email:
        customer.email = email
    if phone:
        customer.phone = phone
    db.commit()
    db.refresh(customer)
    return customer


def get_or_create_guest(db: Session, phone: str, delivery_address: str | None) -> Customer:
    """Return the guest customer for ``phone``, creating it on first order.

    Flushes but does not commit, so the order can share the transaction.
    """
    guest = db.scalar(
        select(Customer)
        .where(Customer.phone == phone, Customer.name.like(f"{GUEST_NAME_PREFIX}%"))
        .order_by(Customer.id.asc())
        .limit(1)
    )
    if guest is not None:
        return guest

    guest = Customer(
        name=f"{GUEST_NAME_PREFIX}{phone}",
        phone=phone,
        email=f"guest_{phone}@temp.com",
        password_hash=get_password_hash(secrets.token_urlsafe(32)),
        loyalty_points=0,
        address={"text": delivery_address} if delivery_address else None,
    )
    db.add(guest)
    db.flush()
    logger.info("[ORDERS] Guest customer created customer_id=%s", guest.id)
    return guest


def split_name(full_name: str) -> tuple[str, str]:
    parts = full_name.split(" ")
    return parts[0], " ".join(parts[1:])
