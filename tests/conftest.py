import pytest
from fastapi.testclient import TestClient

from campbook.api.deps import (
    get_booking_repository,
    get_campground_repository,
    get_identity,
    get_user_repository,
)
from campbook.main import app
from tests.fakes import (
    FakeIdentityProvider,
    InMemoryBookingRepository,
    InMemoryCampgroundRepository,
    InMemoryUserRepository,
    new_id,
)

API = "/api/v1"


@pytest.fixture
def users_repo():
    return InMemoryUserRepository()


@pytest.fixture
def campgrounds_repo():
    return InMemoryCampgroundRepository()


@pytest.fixture
def bookings_repo(campgrounds_repo):
    return InMemoryBookingRepository(campgrounds_repo)


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def client(users_repo, campgrounds_repo, bookings_repo, identity):
    app.dependency_overrides[get_user_repository] = lambda: users_repo
    app.dependency_overrides[get_campground_repository] = lambda: campgrounds_repo
    app.dependency_overrides[get_booking_repository] = lambda: bookings_repo
    app.dependency_overrides[get_identity] = lambda: identity
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(users_repo, identity):
    """Creates a local user with a valid token; returns (user, auth headers)."""
    counter = {"n": 0}

    def _make(role="user", name=None):
        counter["n"] += 1
        n = counter["n"]
        uid = f"fb-{role}-{n}"
        email = f"{role}{n}@example.com"
        user = dict(
            id=new_id(),
            firebase_uid=uid,
            name=name or f"{role.title()} {n}",
            email=email,
            phone_number="+14155550100",
            role=role,
        )
        users_repo.users[user["id"]] = user
        token = identity.issue_token(uid, email, user["name"])
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def campground(client, admin):
    """A campground created through the API."""
    _, headers = admin
    response = client.post(
        f"{API}/campgrounds",
        json={"name": "Pine Ridge", "address": "1 Forest Rd", "tel": "+15550001111"},
        headers=headers,
    )
    assert response.status_code == 200
    return response.json()["data"]
