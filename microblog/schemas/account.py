"""
Microblog Backend: Account Request/Response Schemas
===================================================

What:  Pydantic models for the /register and /login payloads.
How:   FastAPI validates request bodies against these models and serializes
       Account ORM objects through AccountResponse (from_attributes).

Fields are left optional on the request side so that blank or missing
values reach AccountService, which owns the registration rules.
"""

from typing import Optional

from pydantic import BaseModel, Field

from microblog.models.account import Account


class AccountCredentials(BaseModel):
    """
    What:  Body of POST /register and POST /login.
    Example:
        {"username": "alice", "password": "pass1"}
    """
    username: Optional[str] = Field(default=None, description="Unique account name")
    password: Optional[str] = Field(default=None, description="Account password (min 4 chars)")

    def to_entity(self) -> Account:
        return Account(username=self.username, password=self.password)


class AccountResponse(BaseModel):
    """
    What:  Account as returned by /register and /login.
    Note:  The password is echoed back, matching the existing client contract.
    """
    account_id: int = Field(description="Store-assigned account identifier")
    username: str = Field(description="Unique account name")
    password: str = Field(description="Account password")

    model_config = {"from_attributes": True}
