from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    message: Optional[str] = Field(None, description="User message text")


class ExtractedFilters(BaseModel):
    """Shape requested from the model. Values are untrusted until sanitized."""
    model_config = ConfigDict(extra="allow")

    body_type: Optional[Any] = None
    fuel_type: Optional[Any] = None
    transmission: Optional[Any] = None
    make: Optional[Any] = None
    model: Optional[Any] = None
    year: Optional[Any] = None
    maxPrice: Optional[Any] = None
    minPrice: Optional[Any] = None
    city: Optional[Any] = None
    minSeats: Optional[Any] = None
    minMPG: Optional[Any] = None


class ExtractedIntent(BaseModel):
    intent: str = "general"
    filters: Dict[str, Any] = Field(default_factory=dict)


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    bot_name: str = Field(..., alias="botName")
    intent: str
    filters: Dict[str, Any] = Field(default_factory=dict)
    matched_cars: int = Field(0, alias="matchedCars")
    reply: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class FilterOptionsResponse(BaseModel):
    success: bool = True
    message: str
    data: List[Any]
