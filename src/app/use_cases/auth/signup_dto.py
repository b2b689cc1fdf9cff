"""
Signup Use Case DTOs (Data Transfer Objects)

Command/Response pattern for clean architecture separation:
- SignupCommand: Input to use case (business intent)
- SignupResponse: Output from use case (structured result)
"""

from pydantic import BaseModel

from .dtos import SessionIssued


class SignupCommand(BaseModel):
    """
    Signup command - represents signup intent

    base_url is the scheme and host the request arrived on; it is used to
    build the link shown in the verification email.
    """

    email: str
    password: str
    base_url: str


class SignupResponse(BaseModel):
    """
    Signup response - the pending account and its first session

    The account is usable immediately but stays unverified until the emailed
    code is confirmed.
    """

    status: str
    session: SessionIssued
