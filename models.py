"""
Data models for the Location Resolver
"""
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

class Step(str, Enum):
    """Where a resolver session currently is"""
    COUNTRY = "country"
    PROVINCE = "province"
    CITY = "city"
    SELECTED = "selected"

class Country(BaseModel):
    """A country as returned by the geography API"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name like 'South Africa'")
    iso_alpha2: Optional[str] = Field(default=None, description="ISO 3166 alpha-2 code")
    iso_alpha3: Optional[str] = Field(default=None, description="ISO 3166 alpha-3 code")

class FallbackRecord(BaseModel):
    """Bundled provinces for one country"""
    model_config = ConfigDict(frozen=True)

    country: str = Field(..., description="Country name")
    provinces: List[str] = Field(default=[], description="Province or state names")

class SelectionState(BaseModel):
    """Everything the user has chosen so far in one session"""
    model_config = ConfigDict(frozen=True)

    step: Step = Field(default=Step.COUNTRY, description="Current step")
    selected_country: Optional[Country] = Field(default=None, description="Chosen country")
    selected_province: Optional[str] = Field(default=None, description="Chosen province")
    selected_city: Optional[str] = Field(default=None, description="Chosen city, set once selected")
    search_query: str = Field(default="", description="Free-text filter for the current step")
    last_error: Optional[str] = Field(default=None, description="User-facing error for the current step")

class LocationResult(BaseModel):
    """What a finished session hands back to its caller"""
    city: str = Field(..., description="Chosen city")
    country: str = Field(..., description="Parent country name")
    province: str = Field(..., description="Parent province name")

class SessionRequest(BaseModel):
    """What the UI sends to open a session"""
    origin_city: Optional[str] = Field(default=None, description="City excluded from city results")
    initial_country: Optional[str] = Field(default=None, description="Country hint to fast-forward to")
    initial_province: Optional[str] = Field(default=None, description="Province hint to fast-forward to")

class SearchRequest(BaseModel):
    query: str = Field(default="", description="Search text for the current step")

class SelectRequest(BaseModel):
    choice: str = Field(..., description="Label of the option being chosen")

class SessionView(BaseModel):
    """What we send back to the UI after every interaction"""
    session_id: str = Field(..., description="Session identifier")
    step: Step = Field(..., description="Current step")
    selected_country: Optional[str] = Field(default=None, description="Chosen country name")
    selected_province: Optional[str] = Field(default=None, description="Chosen province")
    search_query: str = Field(default="", description="Active search text")
    last_error: Optional[str] = Field(default=None, description="User-facing error")
    loading: bool = Field(default=False, description="Whether the current step is still loading")
    options: List[str] = Field(default=[], description="Filtered options for the current step")
    result: Optional[LocationResult] = Field(default=None, description="Final selection, once made")
