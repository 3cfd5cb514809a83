"""Customer account endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from restohub.core.security import create_customer_token, get_current_customer
from restohub.db.session import get_db
from restohub.models import Customer
from restohub.schemas.customer import (
    AddressUpdateRequest,
    CustomerRegisterRequest,
    CustomerResponse,
    CustomerSignInRequest,
    CustomerTokenResponse,
    ForgotPasswordRequest,
    InformationUpdateRequest,
    MessageResponse,
)
from restohub.services.customer_service import (
    CustomerValidationError,
    authenticate_customer,
    build_address,
    duplicate_message,
    get_customer_by_email,
    register_customer,
    split_name,
    update_address,
    update_information,
    validate_email,
    validate_phone,
)

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


def _serialize_customer(customer: Customer) -> CustomerResponse:
    first_name, last_name = split_name(customer.name)
    return CustomerResponse(
        id=customer.id,
        name=customer.name,
        first_name=first_name,
        last_name=last_name,
        phone=customer.phone,
        email=customer.email,
        loyalty_points=customer.loyalty_points or 0,
        address=customer.address,
        created_at=customer.created_at,
    )


@router.post("/register", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def register(payload: CustomerRegisterRequest, db: Session = Depends(get_db)) -> CustomerResponse:
    try:
        validate_phone(payload.phone)
        validate_email(payload.email)
    except CustomerValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    required = (payload.name, payload.password, payload.ward, payload.district, payload.street, payload.house_number)
    if not all(required):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Required fields are missing")

    duplicate = duplicate_message(db, payload.email, payload.phone)
    if duplicate is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=duplicate)

    customer = register_customer(
        db,
        name=payload.name,
        phone=payload.phone,
        email=payload.email,
        password=payload.password,
        address=build_address(
            ward=payload.ward,
            district=payload.district,
            street=payload.street,
            house_number=payload.house_number,
            building_name=payload.building_name,
            block=payload.block,
            floor=payload.floor,
            room_number=payload.room_number,
        ),
    )
    return _serialize_customer(customer)


@router.post("/signin", response_model=CustomerTokenResponse)
def signin(payload: CustomerSignInRequest, db: Session = Depends(get_db)) -> CustomerTokenResponse:
    customer: Customer | None = authenticate_customer(db, payload.email, payload.password)
    if customer is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    return CustomerTokenResponse(
        access_token=create_customer_token(customer),
        customer=_serialize_customer(customer),
    )


@router.get("/profile", response_model=CustomerResponse)
def profile(customer: Customer = Depends(get_current_customer)) -> CustomerResponse:
    return _serialize_customer(customer)


@router.put("/update-address", response_model=CustomerResponse)
def change_address(
    payload: AddressUpdateRequest,
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
) -> CustomerResponse:
    address = build_address(
        ward=payload.ward,
        district=payload.district,
        street=payload.street,
        house_number=payload.house_number,
        building_name=payload.building_name,
        block=payload.block,
        floor=payload.floor,
        room_number=payload.room_number,
    )
    try:
        customer = update_address(db, customer, address)
    except CustomerValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _serialize_customer(customer)


@router.put("/update-information", response_model=CustomerResponse)
def change_information(
    payload: InformationUpdateRequest,
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
) -> CustomerResponse:
    try:
        customer = update_information(db, customer, name=payload.name, email=payload.email, phone=payload.phone)
    except CustomerValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _serialize_customer(customer)


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(payload: ForgotPasswordRequest, db: Session = Depends(get_db)) -> MessageResponse:
    """Same answer whether or not the address is registered."""
    if get_customer_by_email(db, payload.email) is not None:
        logger.info("[AUTH] Password reset requested for a registered customer")
    return MessageResponse(message="If the email is registered, password reset instructions have been sent.")
