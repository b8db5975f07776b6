"""Company settings schemas"""
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class CompanySettingsBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Company name")
    address: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=100)
    gst_number: Optional[str] = Field(None, max_length=50)
    bank_details: Optional[str] = None

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        """A name made of blanks counts as empty"""
        return v.strip() if isinstance(v, str) else v


class CompanySettingsSave(CompanySettingsBase):
    """Posted by the settings form"""
    pass


class CompanySettingsResponse(CompanySettingsBase):
    id: int

    class Config:
        from_attributes = True
