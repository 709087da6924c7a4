"""Blog post service layer."""

from collections.abc import Sequence
import logging

from inkwell.core.logging_safety import safe_log_identifier
from inkwell.domain.forms import BODY_MAX_LENGTH, BODY_MIN_LENGTH
from inkwell.domain.sanitizer import SanitizationPolicyName, sanitize_html
from inkwell.errors import ApiError, not_found
from inkwell.repositories.memory import BlogPostRecord, InMemoryStore
from inkwell.schemas.auth import AuthPrincipal
from inkwell.schemas.blog import BlogPost, CreateBlogRequest, UpdateBlogRequest

logger = logging.getLogger(__name__)


def _invalid_body(message: str) -> ApiError:
    return ApiError(
        status_code=400,
        code="VALIDATION_ERROR",
        message=message,
        details={"fields": {"blogPost": message}},
    )


class BlogService:
    def __init__(
        self,
        store: InMemoryStore,
        *,
        default_policy: SanitizationPolicyName,
        embed_hosts: Sequence[str] = (),
    ) -> None:
        self._store = store
        self._default_policy = default_policy
        self._embed_hosts = tuple(embed_hosts)

    def create_post(self, *, principal: AuthPrincipal, payload: CreateBlogRequest) -> BlogPost:
        policy = payload.content_policy or self._default_policy
        body = self._sanitize(payload.blog_post, policy)
        record = self._store.create_post(
            author_id=principal.user_id,
            title=payload.blog_title,
            body=body,
            is_private=payload.is_private,
        )
        logger.info(
            "blog.created blog_id=%s author_id=%s policy=%s private=%s",
            record.id,
            safe_log_identifier(principal.user_id, prefix="uid"),
            policy.value,
            record.is_private,
        )
        return self._to_post(record)

    def update_post(self, *, principal: AuthPrincipal, payload: UpdateBlogRequest) -> BlogPost:
        record = self._writable_post(principal, payload.blog_id)
        policy = payload.content_policy or self._default_policy
        body = self._sanitize(payload.blog_post, policy)
        self._store.update_post(
            record,
            title=payload.blog_title,
            body=body,
            is_private=payload.is_private,
        )
        logger.info(
            "blog.updated blog_id=%s actor_id=%s policy=%s private=%s",
            record.id,
            safe_log_identifier(principal.user_id, prefix="uid"),
            policy.value,
            record.is_private,
        )
        return self._to_post(record)

    def delete_post(self, *, principal: AuthPrincipal, blog_id: str, correlation_id: str) -> None:
        record = self._writable_post(principal, blog_id)
        self._store.delete_post(record.id)
        logger.info(
            "blog.deleted correlation_id=%s blog_id=%s actor_id=%s",
            safe_log_identifier(correlation_id, prefix="cid"),
            record.id,
            safe_log_identifier(principal.user_id, prefix="uid"),
        )

    def get_post(self, *, principal: AuthPrincipal | None, blog_id: str) -> BlogPost:
        record = self._store.get_post(blog_id)
        if record is None or not self._can_read(principal, record):
            raise not_found()
        return self._to_post(record)

    def list_posts(self, *, principal: AuthPrincipal | None) -> list[BlogPost]:
        return [self._to_post(record) for record in self._store.list_posts() if self._can_read(principal, record)]

    def _writable_post(self, principal: AuthPrincipal, blog_id: str) -> BlogPostRecord:
        record = self._store.get_post(blog_id)
        # Missing and foreign posts share the same 404 so ids do not leak.
        if record is None or not (principal.is_admin or record.author_id == principal.user_id):
            logger.warning(
                "blog.write_rejected blog_id=%s actor_id=%s code=RESOURCE_NOT_FOUND",
                safe_log_identifier(blog_id, prefix="bid"),
                safe_log_identifier(principal.user_id, prefix="uid"),
            )
            raise not_found()
        return record

    def _sanitize(self, body: str, policy: SanitizationPolicyName) -> str:
        cleaned = sanitize_html(body, policy, embed_hosts=self._embed_hosts).strip()
        # Stripped markup can shrink a body below the limits the schema checked.
        if not cleaned:
            raise _invalid_body("Blog post is empty after sanitization")
        if len(cleaned) < BODY_MIN_LENGTH:
            raise _invalid_body(f"Blog post must be at least {BODY_MIN_LENGTH} characters")
        if len(cleaned) > BODY_MAX_LENGTH:
            raise _invalid_body(f"Blog post must be at most {BODY_MAX_LENGTH} characters")
        return cleaned

    @staticmethod
    def _can_read(principal: AuthPrincipal | None, record: BlogPostRecord) -> bool:
        if not record.is_private:
            return True
        if principal is None:
            return False
        return principal.is_admin or principal.user_id == record.author_id

    @staticmethod
    def _to_post(record: BlogPostRecord) -> BlogPost:
        return BlogPost(
            id=record.id,
            blog_title=record.title,
            blog_post=record.body,
            is_private=record.is_private,
            author_id=record.author_id,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
