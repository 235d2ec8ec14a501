from pydantic import BaseModel


class LoginSchema(BaseModel):
    email: str
    password: str
    language: str = "en"


class Token(BaseModel):
    access_token: str
    token_type: str


class SessionOut(BaseModel):
    owner_id: str
    language: str

    class Config:
        from_attributes = True
