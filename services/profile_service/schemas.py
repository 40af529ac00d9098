from pydantic import BaseModel


class ProfileUpdate(BaseModel):
    full_name: str = ""
    phone: str = ""
    address: str = ""


class ProfileResponse(BaseModel):
    user_id: str
    full_name: str
    phone: str
    address: str
    membership_tier: str
    avatar_url: str | None

    class Config:
        from_attributes = True
