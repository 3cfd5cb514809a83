"""Schema exports."""

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
from restohub.schemas.inventory import (
    IngredientCreate,
    IngredientResponse,
    IngredientUpdate,
    RestockCreate,
    RestockResponse,
    SupplierCreate,
    SupplierResponse,
    WasteCreate,
    WasteResponse,
)
from restohub.schemas.order import CustomerOrderCreate, GuestOrderCreate, OrderIdPayload, OrderResponse
from restohub.schemas.payment import PaymentCreate, PaymentCreateResponse
from restohub.schemas.recipe import MenuCategoryResponse, RecipeResponse, RecipeUpdate
from restohub.schemas.schedule import ScheduleCreate, ScheduleDayResponse
from restohub.schemas.staff import SalaryResponse, StaffCreate, StaffResponse, StaffUpdate

__all__ = [
    "AddressUpdateRequest",
    "CustomerRegisterRequest",
    "CustomerResponse",
    "CustomerSignInRequest",
    "CustomerTokenResponse",
    "ForgotPasswordRequest",
    "InformationUpdateRequest",
    "MessageResponse",
    "IngredientCreate",
    "IngredientResponse",
    "IngredientUpdate",
    "RestockCreate",
    "RestockResponse",
    "SupplierCreate",
    "SupplierResponse",
    "WasteCreate",
    "WasteResponse",
    "CustomerOrderCreate",
    "GuestOrderCreate",
    "OrderIdPayload",
    "OrderResponse",
    "PaymentCreate",
    "PaymentCreateResponse",
    "MenuCategoryResponse",
    "RecipeResponse",
    "RecipeUpdate",
    "ScheduleCreate",
    "ScheduleDayResponse",
    "SalaryResponse",
    "StaffCreate",
    "StaffResponse",
    "StaffUpdate",
]
