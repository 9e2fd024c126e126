"""
Report Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Literal, Union
from datetime import date

DateMode = Literal["created", "paid", "both"]


class OrdersQuery(BaseModel):
    """Parameters of one report batch"""
    date_from: date
    date_to: date
    page_size: int = Field(50, ge=1, le=50)
    max_pages: int = Field(20, ge=1, le=200)
    include_shipment: bool = True
    date_mode: Optional[DateMode] = None  # None -> settings.DATE_PIVOT_MODE


class OrdersResponse(BaseModel):
    date_from: date = Field(..., serialization_alias="from")
    date_to: date = Field(..., serialization_alias="to")
    count: int
    headers: List[str]
    rows: List[List[Union[str, int, float, None]]]
