"""In-memory stand-ins for the repositories and the identity provider."""

from typing import Dict, List, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from campbook.services.identity_provider import (
    IdentityProfile,
    IdentityProviderError,
    SignInResult,
)


def new_id() -> str:
    return str(ObjectId())


class InMemoryUserRepository:
    def __init__(self):
        self.users: Dict[str, dict] = {}

    async def find_by_id(self, user_id):
        user = self.users.get(user_id)
        return dict(user) if user else None

    async def find_by_firebase_uid(self, firebase_uid):
        for user in self.users.values():
            if user.get("firebase_uid") == firebase_uid:
                return dict(user)
        return None

    async def find_by_email(self, email):
        for user in self.users.values():
            if user.get("email") == email:
                return dict(user)
        return None

    async def create(self, data):
        for user in self.users.values():
            if user.get("firebase_uid") == data.get("firebase_uid"):
                raise DuplicateKeyError("firebase_uid_unique")
            if data.get("email") and user.get("email") == data.get("email"):
                raise DuplicateKeyError("email_unique")
        user = dict(data, id=new_id())
        self.users[user["id"]] = user
        return dict(user)


class InMemoryCampgroundRepository:
    def __init__(self):
        self.campgrounds: Dict[str, dict] = {}

    def _check_unique_name(self, name, exclude_id=None):
        for cid, campground in self.campgrounds.items():
            if cid != exclude_id and campground["name"] == name:
                raise DuplicateKeyError("name_unique")

    async def find_all(self):
        return sorted((dict(c) for c in self.campgrounds.values()), key=lambda c: c["name"])

    async def find_by_id(self, campground_id):
        campground = self.campgrounds.get(campground_id)
        return dict(campground) if campground else None

    async def find_by_ids(self, campground_ids):
        return {cid: dict(self.campgrounds[cid]) for cid in campground_ids if cid in self.campgrounds}

    async def create(self, data):
        self._check_unique_name(data["name"])
        campground = dict(data, id=new_id())
        self.campgrounds[campground["id"]] = campground
        return dict(campground)

    async def update(self, campground_id, changes):
        if campground_id not in self.campgrounds:
            return None
        if "name" in changes:
            self._check_unique_name(changes["name"], exclude_id=campground_id)
        self.campgrounds[campground_id].update(changes)
        return dict(self.campgrounds[campground_id])

    async def delete(self, campground_id):
        return self.campgrounds.pop(campground_id, None)


class InMemoryBookingRepository:
    def __init__(self, campgrounds: InMemoryCampgroundRepository):
        self.bookings: Dict[str, dict] = {}
        self._campgrounds = campgrounds

    async def find(self, user_id=None, campground_id=None):
        return [
            dict(b) for b in self.bookings.values()
            if (user_id is None or b["user"] == user_id)
            and (campground_id is None or b["campground"] == campground_id)
        ]

    async def find_by_id(self, booking_id):
        booking = self.bookings.get(booking_id)
        return dict(booking) if booking else None

    async def count_by_user(self, user_id):
        return sum(1 for b in self.bookings.values() if b["user"] == user_id)

    async def count_all(self):
        return len(self.bookings)

    async def count_by_campground(self):
        counts: Dict[str, int] = {}
        for booking in self.bookings.values():
            counts[booking["campground"]] = counts.get(booking["campground"], 0) + 1
        groups = []
        for campground_id, count in counts.items():
            campground = self._campgrounds.campgrounds.get(campground_id)
            groups.append({
                "campground_id": campground_id,
                "campground_name": campground["name"] if campground else None,
                "booking_count": count,
            })
        return groups

    async def create(self, data):
        booking = dict(data, id=new_id())
        self.bookings[booking["id"]] = booking
        return dict(booking)

    async def update(self, booking_id, changes):
        if booking_id not in self.bookings:
            return None
        self.bookings[booking_id].update(changes)
        return dict(self.bookings[booking_id])

    async def delete(self, booking_id):
        return self.bookings.pop(booking_id, None)


class FakeIdentityProvider:
    """Stands in for the identity provider: accounts and tokens live in dicts."""

    def __init__(self):
        self.accounts: Dict[str, dict] = {}
        self.tokens: Dict[str, IdentityProfile] = {}
        self.reset_requests: List[str] = []

    def issue_token(self, uid: str, email: Optional[str] = None, display_name: Optional[str] = None) -> str:
        token = f"token-{uid}"
        self.tokens[token] = IdentityProfile(uid=uid, email=email, display_name=display_name)
        return token

    async def create_account(self, email, password, display_name, phone_number=None):
        if email in self.accounts:
            raise IdentityProviderError("EMAIL_EXISTS")
        uid = f"uid-{len(self.accounts) + 1}"
        self.accounts[email] = {"uid": uid, "password": password, "name": display_name}
        return IdentityProfile(uid=uid, email=email, display_name=display_name, phone_number=phone_number)

    async def verify_token(self, token):
        if token not in self.tokens:
            raise IdentityProviderError("INVALID_ID_TOKEN")
        return self.tokens[token]

    async def sign_in(self, email, password):
        account = self.accounts.get(email)
        if not account or account["password"] != password:
            raise IdentityProviderError("INVALID_LOGIN_CREDENTIALS")
        token = self.issue_token(account["uid"], email, account["name"])
        return SignInResult(uid=account["uid"], id_token=token, email=email)

    async def send_password_reset(self, email):
        if email not in self.accounts:
            raise IdentityProviderError("EMAIL_NOT_FOUND")
        self.reset_requests.append(email)


