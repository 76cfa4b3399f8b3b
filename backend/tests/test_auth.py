from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from emailstudio.auth import get_current_user
from emailstudio.config import get_settings


def issue_token(claims, expires_in=timedelta(hours=1)):
    settings = get_settings()
    payload = dict(claims, exp=datetime.now(timezone.utc) + expires_in)
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_valid_token_resolves_user(db, user):
    token = issue_token({"sub": str(user.id)})

    assert get_current_user(bearer(token), db).id == user.id


def test_expired_token_is_rejected(db, user):
    token = issue_token({"sub": str(user.id)}, expires_in=timedelta(minutes=-1))

    with pytest.raises(HTTPException) as exc_info:
        get_current_user(bearer(token), db)

    assert exc_info.value.status_code == 401


def test_garbage_token_is_rejected(db):
    with pytest.raises(HTTPException) as exc_info:
        get_current_user(bearer("not-a-jwt"), db)

    assert exc_info.value.status_code == 401


def test_token_without_subject_is_rejected(db):
    with pytest.raises(HTTPException) as exc_info:
        get_current_user(bearer(issue_token({"role": "user"})), db)

    assert exc_info.value.status_code == 401


@pytest.mark.parametrize("subject", [12345, ["not", "a", "uuid"], {"id": "x"}])
def test_non_string_subject_is_rejected(db, subject):
    with pytest.raises(HTTPException) as exc_info:
        get_current_user(bearer(issue_token({"sub": subject})), db)

    assert exc_info.value.status_code == 401


def test_unknown_user_is_rejected(db):
    token = issue_token({"sub": str(uuid4())})

    with pytest.raises(HTTPException) as exc_info:
        get_current_user(bearer(token), db)

    assert exc_info.value.status_code == 401


def test_inactive_user_is_forbidden(db, user):
    user.is_active = False
    db.commit()
    token = issue_token({"sub": str(user.id)})

    with pytest.raises(HTTPException) as exc_info:
        get_current_user(bearer(token), db)

    assert exc_info.value.status_code == 403
