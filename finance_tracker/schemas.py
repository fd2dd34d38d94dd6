# finance_tracker/schemas.py
# Data validation schemas (Pydantic) run before any business logic

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, ValidationInfo, field_validator, model_validator
from typing import Any, Dict, List, Optional
import datetime as dt
from decimal import Decimal
from enum import Enum

from .errors import ValidationFailed

MAX_PER_PAGE = 100
DEFAULT_PER_PAGE = 15
DEFAULT_SUMMARY_MONTHS = 6
MAX_SUMMARY_MONTHS = 1200

# Columns a client may order by; anything else is rejected
SORTABLE_COLUMNS = ("id", "type", "category", "amount", "date", "created_at", "updated_at")

# --- Enums ---
class TransactionTypeEnum(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"

# --- Transaction Schemas ---
class TransactionCreate(BaseModel):
    """Payload for creating a transaction."""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, use_enum_values=True)

    type: TransactionTypeEnum
    category: str = Field(min_length=1, max_length=100)
    amount: Decimal = Field(ge=Decimal("0.01"), max_digits=12, decimal_places=2)
    date: Optional[dt.date] = None
    description: Optional[str] = Field(default=None, max_length=500)

class TransactionUpdate(BaseModel):
    """Partial update: every field optional, same constraints as creation."""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, use_enum_values=True)

    type: Optional[TransactionTypeEnum] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    amount: Optional[Decimal] = Field(default=None, ge=Decimal("0.01"), max_digits=12, decimal_places=2)
    date: Optional[dt.date] = None
    description: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def reject_nulls_for_required_columns(self):
        for field in ("type", "category", "amount", "date"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} may not be null")
        return self

    def changes(self) -> Dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)

class TransactionFilter(BaseModel):
    """Query parameters accepted by the listing endpoint."""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, use_enum_values=True)

    type: Optional[TransactionTypeEnum] = None
    category: Optional[str] = Field(default=None, max_length=100)
    date_from: Optional[dt.date] = None
    date_to: Optional[dt.date] = None
    per_page: int = Field(default=DEFAULT_PER_PAGE, ge=1)
    page: int = Field(default=1, ge=1)
    sort: Optional[str] = None

    @field_validator("date_to")
    @classmethod
    def date_to_after_date_from(cls, value: Optional[dt.date], info: ValidationInfo):
        date_from = info.data.get("date_from")
        if value is not None and date_from is not None and value < date_from:
            raise ValueError("date_to must be a date after or equal to date_from")
        return value

    @field_validator("per_page")
    @classmethod
    def clamp_per_page(cls, value: int) -> int:
        return min(value, MAX_PER_PAGE)

    @field_validator("sort")
    @classmethod
    def sort_column_allowed(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if value.lstrip("-") not in SORTABLE_COLUMNS:
            raise ValueError(
                f"sort must be one of: {', '.join(SORTABLE_COLUMNS)} (prefix with '-' for descending)"
            )
        return value

    @property
    def sort_column(self) -> Optional[str]:
        return self.sort.lstrip("-") if self.sort else None

    @property
    def sort_descending(self) -> bool:
        return bool(self.sort and self.sort.startswith("-"))

class MonthlySummaryParams(BaseModel):
    months: int = Field(default=DEFAULT_SUMMARY_MONTHS, ge=1, le=MAX_SUMMARY_MONTHS)

# --- Authentication Schemas ---
class RegisterRequest(BaseModel):
    """Schema for registering a new user."""
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=1)

class LoginRequest(BaseModel):
    """Schema for logging in."""
    email: EmailStr
    password: str = Field(min_length=1)

# --- Helpers ---
def validation_errors(exc: ValidationError) -> List[Dict[str, str]]:
    """Flatten a pydantic error into ``[{field, message}]`` entries."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "__root__"
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": field, "message": message})
    return errors

def parse(schema, data: Dict[str, Any]):
    """Validate ``data`` against ``schema`` or raise ``ValidationFailed``."""
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ValidationFailed(validation_errors(e))
