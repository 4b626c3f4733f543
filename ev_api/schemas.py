from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ev_core.filters import default_equality_filters


class CriteriaModel(BaseModel):
    search_text: str = ""
    equality_filters: Dict[str, Optional[str]] = Field(default_factory=default_equality_filters)


class OptionsResponse(BaseModel):
    makes: List[str]
    types: List[str]
    columns: List[str]
