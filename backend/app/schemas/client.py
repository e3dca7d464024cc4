# backend/app/schemas/client.py

from pydantic import AliasChoices, BaseModel, EmailStr, Field
from typing import Optional


class ClientCreate(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[str] = None
    password: str = Field(min_length=1)
    # Accepted at sign-up but only ever stored as a token
    credit_card: Optional[str] = None


class ClientLogin(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ClientResponse(BaseModel):
    id: int = Field(validation_alias=AliasChoices("client_id", "id"))
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    is_admin: bool = False

    model_config = {
        "from_attributes": True
    }


class AuthResponse(BaseModel):
    token: str
    user: ClientResponse


# TokenData for the claims carried by the JWT
class TokenData(BaseModel):
    id: int
    is_admin: bool = False
