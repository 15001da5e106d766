# personprovider/models.py
import math
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt

PERSON_FIELDS = ("name", "address", "email", "mobile_number")

def format_person_id(value) -> str:
    """
    Normalize a server-assigned person id to its string form, with no
    fractional digits: 42 and 42.0 both become "42".
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"person_id must be numeric, got {type(value).__name__}: {value!r}")
    if not math.isfinite(value):
        raise TypeError(f"person_id must be finite, got {value!r}")
    if isinstance(value, int):
        return str(value)
    return f"{value:.0f}"

class PersonRecord(BaseModel):
    """A person as returned by the Person REST API"""
    model_config = ConfigDict(extra="allow", allow_inf_nan=False)

    person_id: Union[StrictInt, StrictFloat]
    name: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    mobile_number: Optional[str] = None

    @property
    def identity(self) -> str:
        return format_person_id(self.person_id)
