from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ChildCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    class_name: Optional[str] = Field(default=None, alias="class")
    roll_number: Optional[str] = None
    admission_id: Optional[str] = None
    dob: Optional[str] = None
    gender: Optional[str] = None
    blood_group: Optional[str] = None
    address: Optional[str] = None
    father_name: Optional[str] = None
    mother_name: Optional[str] = None


class Child(ChildCreate):
    dsid: str
    status: str = "active"
    last_attendance: Optional[str] = None
    fee_status: str = "pending"


class Identity(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    mobile: str
    name: str
    children: List[Child] = []
