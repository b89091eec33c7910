from pydantic import BaseModel


class BuyerContact(BaseModel):
    id: int
    name: str
    email: str | None = None
    phone: str | None = None

    class Config:
        from_attributes = True
