from pydantic import BaseModel, Field


class InterestCreate(BaseModel):
    opportunity_id: int = Field(..., gt=0, description="Opportunity to register for")
