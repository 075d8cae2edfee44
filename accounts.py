"""
Account workflow: user records for Google sign-in and password signup.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from passlib.context import CryptContext
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from database import USERS, create_document, serialize_document
from errors import Conflict, Internal
from schemas import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """User document safe to send to clients."""
    user = serialize_document(user)
    user.pop("password", None)
    return user


def create_or_get_oauth_user(
    db: Database,
    email: str,
    googleId: Optional[str] = None,
    firstName: Optional[str] = None,
    lastName: Optional[str] = None,
    gender: Optional[str] = None,
    dob: Optional[str] = None,
) -> Tuple[Dict[str, Any], bool]:
    """
    Return (user, created) for a Google login.

    An existing record is returned untouched; nothing from the login is merged
    into it. A losing concurrent insert is reported as already existing.
    """
    try:
        user = db[USERS].find_one({"email": email})
        if user:
            return user, False
        user = User(
            email=email,
            googleId=googleId,
            firstName=firstName,
            lastName=lastName,
            gender=gender,
            dob=dob,
            emailVerified=True,
            totalJobsPosted=0,
        )
        create_document(db, USERS, user)
        return db[USERS].find_one({"email": email}), True
    except DuplicateKeyError:
        return db[USERS].find_one({"email": email}), False
    except PyMongoError:
        logger.exception("Error saving user %s", email)
        raise Internal("Internal server error")


def sign_up_with_password(db: Database, email: str, password: str) -> Dict[str, Any]:
    """Create a password account. Raises Conflict if the email is taken."""
    try:
        if db[USERS].find_one({"email": email}):
            raise Conflict("User already exists")
        user = User(
            email=email,
            password=hash_password(password),
            emailVerified=False,
            totalJobsPosted=0,
        )
        create_document(db, USERS, user)
        return db[USERS].find_one({"email": email})
    except DuplicateKeyError:
        raise Conflict("User already exists")
    except PyMongoError:
        logger.exception("Error creating user %s", email)
        raise Internal("Internal server error")
