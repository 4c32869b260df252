import time
from datetime import timedelta
from uuid import uuid4

from jose import jwt

from src.api.utils.jwt import TokenService
from src.domain.entities import UserRole


def test_issue_and_verify_round_trip(tokens, make_user):
    user = make_user(role=UserRole.moderator)
    session_id = uuid4()

    pair = tokens.issue(user, session_id)
    access = tokens.verify_access(pair.access_token)
    refresh = tokens.verify_refresh(pair.refresh_token)

    assert (access.user_id, access.email, access.role) == (user.id, user.email, "moderator")
    assert (refresh.user_id, refresh.email, refresh.role) == (user.id, user.email, "moderator")
    assert access.session_id == refresh.session_id == session_id
    assert refresh.token_id == pair.refresh_token_id
    assert access.expires_at < refresh.expires_at


def test_tokens_are_not_interchangeable(tokens, make_user):
    pair = tokens.issue(make_user(), uuid4())

    assert tokens.verify_access(pair.refresh_token) is None
    assert tokens.verify_refresh(pair.access_token) is None


def test_other_secret_never_validates(tokens, make_user):
    other = TokenService(
        access_secret="another-access-secret",
        refresh_secret="another-refresh-secret",
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=7),
    )
    pair = other.issue(make_user(), uuid4())

    assert tokens.verify_access(pair.access_token) is None
    assert tokens.verify_refresh(pair.refresh_token) is None


def test_expired_access_token(make_user):
    short = TokenService(
        access_secret="a",
        refresh_secret="b",
        access_ttl=timedelta(seconds=-10),
        refresh_ttl=timedelta(days=7),
    )
    pair = short.issue(make_user(), uuid4())

    assert short.verify_access(pair.access_token) is None
    assert short.verify_refresh(pair.refresh_token) is not None


def test_refresh_token_rejected_after_ttl(make_user):
    short = TokenService(
        access_secret="a",
        refresh_secret="b",
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(seconds=1),
    )
    pair = short.issue(make_user(), uuid4())
    assert short.verify_refresh(pair.refresh_token) is not None

    time.sleep(2.1)

    assert short.verify_refresh(pair.refresh_token) is None


def test_token_type_claim_is_enforced(tokens, make_user):
    pair = tokens.issue(make_user(), uuid4())
    claims = jwt.get_unverified_claims(pair.access_token)
    claims["typ"] = "refresh"
    forged = jwt.encode(claims, tokens.access_secret, algorithm="HS256")

    assert tokens.verify_access(forged) is None


def test_malformed_claims(tokens):
    token = jwt.encode({"typ": "access", "sub": "not-a-uuid"}, tokens.access_secret)

    assert tokens.verify_access(token) is None


def test_garbage(tokens):
    assert tokens.verify_access("not.a.jwt") is None
