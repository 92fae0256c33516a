from pydantic import BaseModel, Field


class Actor(BaseModel):
    """Identity of the caller, attached to every mutation and audit entry"""

    id: str = Field(..., min_length=1)
    display_name: str = ""

    model_config = {"frozen": True}
