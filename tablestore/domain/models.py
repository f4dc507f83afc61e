"""
Domain models for tablestore.

Defines the per-table bookkeeping entry kept in the reserved `system`
collection. Stored documents use camelCase keys; Python code uses the
snake_case attribute names.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr


class SystemRecord(BaseModel):
    """
    Bookkeeping for one table: last issued serial id and timestamps.
    """

    id: str = Field(..., description="Random token identifying this entry.")
    table: str = Field(..., description="Name of the tracked table.")
    table_last_id: Optional[Union[StrictInt, StrictFloat, StrictStr]] = Field(
        0, alias="tableLastId", description="Last serial id issued for the table."
    )
    table_created_date: str = Field(..., alias="tableCreatedDate")
    table_updated_date: Optional[str] = Field(None, alias="tableUpdatedDate")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "ignore",
    }

    def to_storage(self) -> Dict[str, Any]:
        """Serialize with the stored (camelCase) key names."""
        return self.model_dump(by_alias=True)


__all__ = ["SystemRecord"]
