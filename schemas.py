"""
Database Schemas for the JamJob backend

Each Pydantic model describes a document in MongoDB. Users live in the
"users" collection and jobs in the "jobs" collection.

Emails are the user key and the job's postedBy reference, so they are
validated but stored exactly as the client sent them.
"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.networks import validate_email


def _valid_email(value: str) -> str:
    validate_email(value)
    return value


Email = Annotated[str, AfterValidator(_valid_email)]


class User(BaseModel):
    """
    Users collection schema
    Created on first OAuth login or on password signup. Passwords are stored
    as salted hashes, never in plaintext.
    """
    email: Email = Field(..., description="Email address (unique)")
    googleId: Optional[str] = Field(None, description="Google account subject")
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[str] = Field(None, description="Date of birth as sent by the client")
    password: Optional[str] = Field(None, description="Password hash, password accounts only")
    emailVerified: bool = False
    totalJobsPosted: int = Field(0, ge=0, description="Jobs posted by this account")


class Job(BaseModel):
    """
    Jobs collection schema
    Only the poster and creation time are fixed; every other field is
    whatever the client posted.
    """
    model_config = ConfigDict(extra="allow")

    postedBy: Email = Field(..., description="Email of the posting user")
    createAt: Optional[datetime] = Field(None, description="Server time the job was posted")
