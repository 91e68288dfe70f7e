"""
Pydantic models for accounts and user profiles.

Request fields are optional at the schema level: missing values are
reported by ``UserService`` as 400 errors with a readable message
rather than as validation errors.  Wire names are camelCase; Python
attributes use aliases so either form is accepted on input.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    email: Optional[str] = Field(None, examples=["jane@example.com"])
    password: Optional[str] = Field(None, examples=["s3cret!"], description="At least 6 characters")
    name: Optional[str] = Field(None, examples=["Jane Doe"])
    role: Optional[str] = Field(None, examples=["user"], description="``user`` (default) or ``admin``")


class SignInRequest(BaseModel):
    email: Optional[str] = Field(None, examples=["jane@example.com"])
    password: Optional[str] = Field(None, examples=["s3cret!"])


class UserProfile(BaseModel):
    """Public part of a stored profile."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str = "user"
    created_at: Optional[str] = Field(None, alias="createdAt")

    model_config = {
        "populate_by_name": True,
    }


class UserEnvelope(BaseModel):
    user: UserProfile


class SessionEnvelope(BaseModel):
    access_token: str = Field(..., alias="accessToken")
    user: UserProfile

    model_config = {
        "populate_by_name": True,
    }


class UserListEnvelope(BaseModel):
    users: List[UserProfile]
