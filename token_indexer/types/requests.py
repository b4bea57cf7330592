from typing import List
from pydantic import BaseModel, Field


class BatchBalancesRequest(BaseModel):
    addresses: List[str] = Field(
        min_length=1,
        max_length=25,
        description="Addresses to resolve; results come back in the same order",
    )
