"""Credential verification and the sign-in adapter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from flask import current_app
from flask_login import UserMixin, login_user
from werkzeug.security import check_password_hash

from invoice_dashboard import db
from invoice_dashboard.forms import LoginForm, as_formdata
from invoice_dashboard.models import User

logger = logging.getLogger(__name__)

CREDENTIALS_PROVIDER = "credentials"


@dataclass(frozen=True)
class UserRecord(UserMixin):
    id: str
    name: str
    email: str


class CredentialVerifier(Protocol):
    def verify(self, email: str, password: str) -> Optional[UserRecord]: ...

    def load(self, user_id: str) -> Optional[UserRecord]: ...


class FixedCredentialVerifier:
    """Accepts one hard-coded account."""

    EMAIL = "test@test.com"
    PASSWORD = "123456"
    USER = UserRecord(id="1", name="Test User", email="test@test.com")

    def verify(self, email, password):
        if email == self.EMAIL and password == self.PASSWORD:
            return self.USER
        return None

    def load(self, user_id):
        return self.USER if user_id == self.USER.id else None


class DatabaseCredentialVerifier:
    """Checks credentials against the ``users`` table."""

    def verify(self, email, password):
        user = User.query.filter_by(email=email).first()
        if user is None or not check_password_hash(user.password, password):
            return None
        return UserRecord(id=user.id, name=user.name, email=user.email)

    def load(self, user_id):
        user = db.session.get(User, user_id)
        if user is None:
            return None
        return UserRecord(id=user.id, name=user.name, email=user.email)


VERIFIERS = {
    "fixed": FixedCredentialVerifier,
    "database": DatabaseCredentialVerifier,
}


def build_verifier(name: str) -> CredentialVerifier:
    try:
        return VERIFIERS[name]()
    except KeyError:
        raise ValueError(f"Unknown credentials backend: {name!r}") from None


class AuthError(Exception):
    """Sign-in failure classified by ``type``."""

    type = "AuthError"

    def __init__(self, message: str = "", type: Optional[str] = None):
        super().__init__(message)
        if type is not None:
            self.type = type


class CredentialsSignin(AuthError):
    type = "CredentialsSignin"


def sign_in(provider: str, formdata, verifier: Optional[CredentialVerifier] = None):
    """Verify ``formdata`` with ``provider`` and start a session.

    Raises :class:`CredentialsSignin` when the credentials are rejected and
    :class:`AuthError` of type ``Configuration`` for an unknown provider.
    """
    if provider != CREDENTIALS_PROVIDER:
        raise AuthError(f"Unknown provider {provider!r}", type="Configuration")
    if verifier is None:
        verifier = current_app.extensions["credential_verifier"]

    form = LoginForm(formdata=as_formdata(formdata))
    user = None
    if form.validate():
        user = verifier.verify(form.email.data, form.password.data)
    if user is None:
        logger.info("Rejected sign-in for %r", form.email.data)
        raise CredentialsSignin("Invalid credentials.")

    login_user(user)
    logger.info("Signed in user %s", user.id)
    return user


def authenticate(prev_state, formdata, sign_in=sign_in) -> Optional[str]:
    """Return a user-facing error message, or ``None`` once signed in.

    Failures that are not :class:`AuthError` propagate unchanged.
    """
    try:
        sign_in(CREDENTIALS_PROVIDER, formdata)
    except AuthError as error:
        if error.type == CredentialsSignin.type:
            return "Invalid credentials."
        return "Something went wrong."
    return None
