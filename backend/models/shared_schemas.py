from pydantic import BaseModel

class StatusDisplayOut(BaseModel):
    status: str
    label: str
    color: str
