from pydantic import BaseModel, ConfigDict
from typing import Optional

class CandidaturaRead(BaseModel):
    """A stored application row; unknown columns pass through untouched."""

    model_config = ConfigDict(extra="allow")

    id: int
    timestamp: Optional[str] = None
