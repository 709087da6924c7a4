"""In-memory repositories used by the API and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from inkwell.schemas.user import Provider, Role, UserIdentity


@dataclass(slots=True)
class UserRecord:
    id: str
    display_name: str | None
    email: str | None
    avatar_url: str | None
    role: Role
    created_at: datetime
    last_login_at: datetime


@dataclass(slots=True)
class AccountRecord:
    provider: Provider
    provider_account_id: str
    user_id: str
    linked_at: datetime


@dataclass(slots=True)
class BlogPostRecord:
    id: str
    title: str
    body: str
    is_private: bool
    author_id: str
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class InMemoryStore:
    """Simple, deterministic persistence layer for local runs and tests."""

    users: dict[str, UserRecord] = field(default_factory=dict)
    accounts: dict[tuple[Provider, str], AccountRecord] = field(default_factory=dict)
    posts: dict[str, BlogPostRecord] = field(default_factory=dict)
    user_write_count: int = 0
    post_write_count: int = 0

    def get_user(self, user_id: str) -> UserRecord | None:
        return self.users.get(user_id)

    def find_user_by_email(self, email: str) -> UserRecord | None:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    def list_users(self) -> list[UserRecord]:
        users = list(self.users.values())
        users.sort(key=lambda record: record.created_at)
        return users

    def providers_for_user(self, user_id: str) -> list[Provider]:
        providers = {account.provider for account in self.accounts.values() if account.user_id == user_id}
        return sorted(providers, key=lambda provider: provider.value)

    def get_account(self, provider: Provider, provider_account_id: str) -> AccountRecord | None:
        return self.accounts.get((provider, provider_account_id))

    def upsert_user_for_login(self, provider: Provider, identity: UserIdentity) -> tuple[UserRecord, bool]:
        """Create or refresh the user behind a provider login.

        An unknown provider account with an email that already belongs to a
        user is linked to that user. Returns the record and whether the
        account was newly linked.
        """
        now = datetime.now(UTC)
        account = self.get_account(provider, identity.id)
        user = self.users.get(account.user_id) if account is not None else None
        linked = False

        if user is None and identity.email:
            user = self.find_user_by_email(identity.email)

        if user is None:
            user = UserRecord(
                id=str(uuid4()),
                display_name=identity.display_name,
                email=identity.email,
                avatar_url=identity.avatar_url,
                role=identity.role,
                created_at=now,
                last_login_at=now,
            )
            self.users[user.id] = user
        else:
            user.display_name = identity.display_name or user.display_name
            user.email = identity.email or user.email
            user.avatar_url = identity.avatar_url or user.avatar_url
            user.role = identity.role
            user.last_login_at = now

        if account is None:
            self.accounts[(provider, identity.id)] = AccountRecord(
                provider=provider,
                provider_account_id=identity.id,
                user_id=user.id,
                linked_at=now,
            )
            linked = True

        self.user_write_count += 1
        return user, linked

    def create_post(self, *, author_id: str, title: str, body: str, is_private: bool) -> BlogPostRecord:
        now = datetime.now(UTC)
        post = BlogPostRecord(
            id=str(uuid4()),
            title=title,
            body=body,
            is_private=is_private,
            author_id=author_id,
            created_at=now,
            updated_at=now,
        )
        self.posts[post.id] = post
        self.post_write_count += 1
        return post

    def get_post(self, post_id: str) -> BlogPostRecord | None:
        return self.posts.get(post_id)

    def list_posts(self) -> list[BlogPostRecord]:
        posts = list(self.posts.values())
        posts.sort(key=lambda record: record.created_at, reverse=True)
        return posts

    def update_post(self, post: BlogPostRecord, *, title: str, body: str, is_private: bool) -> BlogPostRecord:
        post.title = title
        post.body = body
        post.is_private = is_private
        post.updated_at = datetime.now(UTC)
        self.post_write_count += 1
        return post

    def delete_post(self, post_id: str) -> bool:
        removed = self.posts.pop(post_id, None)
        if removed is None:
            return False
        self.post_write_count += 1
        return True
