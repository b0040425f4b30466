# catalog/models.py
import re
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional, List, Union

Number = Union[int, float]

MAX_PRICE = 10_000_000
MIN_NAME_LENGTH = 2
MAX_RATING = 5

_INT_STRING = re.compile(r"^[+-]?\d+$")


class Product(BaseModel):
    id: str
    name: str
    category: str = "general"
    description: str = ""
    price: Number
    stock: int = 0
    rating: Number = 0
    image: Optional[str] = None


class ProductFilters(BaseModel):
    category: Optional[str] = None
    minPrice: Optional[str] = None
    maxPrice: Optional[str] = None
    inStock: Optional[str] = None
    sort: Optional[str] = None
    limit: Optional[str] = None


class ProductEnvelope(BaseModel):
    success: bool = True
    data: Product
    warning: Optional[str] = None


class ProductList(BaseModel):
    success: bool = True
    count: int
    total: int
    filters: ProductFilters
    data: List[Product]


class CategoryList(BaseModel):
    success: bool = True
    count: int
    data: List[str]


class ErrorOut(BaseModel):
    error: str
    errors: Optional[List[str]] = None


class ProductIn(BaseModel):
    """
    Candidate product fields from a request body or the data file.
    Every field is optional here; required fields are checked per mode in
    catalog.validation, which also turns errors into messages.
    """
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0, le=MAX_PRICE, allow_inf_nan=False)
    stock: Optional[int] = Field(None, ge=0)
    rating: Optional[float] = Field(None, ge=0, le=MAX_RATING, allow_inf_nan=False)
    image: Optional[str] = None

    @field_validator("name", "category", "description")
    @classmethod
    def _trim(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v

    @field_validator("name")
    @classmethod
    def _name_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) < MIN_NAME_LENGTH:
            raise ValueError(f"name must be at least {MIN_NAME_LENGTH} characters")
        return v

    @field_validator("category")
    @classmethod
    def _category_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v:
            raise ValueError("category must be a non-empty string")
        return v

    @field_validator("stock", mode="before")
    @classmethod
    def _no_bool_stock(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("stock must be a number, not a boolean")
        return v

    @field_validator("price", "rating", mode="wrap")
    @classmethod
    def _keep_ints(cls, v: Any, handler):
        # integers (and integer strings) stay int; everything else is a float
        if isinstance(v, bool):
            raise ValueError("booleans are not numbers")
        result = handler(v)
        if result is None:
            return result
        if isinstance(v, int) or (isinstance(v, str) and _INT_STRING.match(v.strip())):
            return int(result)
        return result

    @field_validator("image", mode="before")
    @classmethod
    def _image_to_str(cls, v: Any) -> Any:
        return str(v) if v is not None else v
