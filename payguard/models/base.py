import re
from datetime import date
from typing import Annotated, Any, Dict, Optional, Type, TypeVar
from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

def _require_calendar_date(value: Any) -> Any:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ValueError("must be a calendar date in YYYY-MM-DD format")
    return value

# Calendar date serialized as YYYY-MM-DD, no time component
CalendarDate = Annotated[date, BeforeValidator(_require_calendar_date)]

T = TypeVar("T", bound="RecordModel")

class RecordModel(BaseModel):
    """
    Base model for state store records and event payloads.
    Attributes are snake_case in Python and camelCase on the wire.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @classmethod
    def from_record(cls: Type[T], data: Optional[Dict[str, Any]]) -> Optional[T]:
        """Convert a stored record or event payload to the model."""
        if not data:
            return None
        return cls.model_validate(data)

    def to_record(self, exclude_none: bool = True) -> Dict[str, Any]:
        """Convert the model to a JSON-safe record with wire field names."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=exclude_none)
