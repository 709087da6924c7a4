"""Blog form submission client.

Drives one form against the blog API: validate locally, send a single
request, and turn the outcome into a notification. Only one request may be
outstanding; the submit trigger is disabled while it is pending. There is no
retry and no cancellation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any

import httpx

from inkwell.core.logging_safety import safe_log_identifier
from inkwell.domain.forms import (
    FORM_POLICIES,
    BlogFormKind,
    FormValidationResult,
    default_form_values,
    validate_blog_form,
)
from inkwell.domain.submission_fsm import SubmissionState, ensure_transition, trigger_enabled

logger = logging.getLogger(__name__)

BLOGS_PATH = "/api/blogs"


class NotificationVariant(str, Enum):
    SUCCESS = "success"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    description: str
    variant: NotificationVariant


SAVED_NOTIFICATION = Notification(
    title="Success!",
    description="You have successfully saved your blog 🚀",
    variant=NotificationVariant.SUCCESS,
)
FAILURE_NOTIFICATION = Notification(
    title="Oops!",
    description="Something went wrong!",
    variant=NotificationVariant.DESTRUCTIVE,
)


@dataclass(slots=True)
class SubmissionResult:
    state: SubmissionState
    field_errors: dict[str, str]
    notification: Notification | None = None
    post: dict[str, Any] | None = None
    redirect_to: str | None = None


class BlogSubmitter:
    """Submits one blog form through an ``httpx.Client``.

    ``blog_id`` switches the form to editing: the submit becomes a PUT that
    carries the id, otherwise a POST creates a new post.
    """

    def __init__(
        self,
        http: httpx.Client,
        *,
        kind: BlogFormKind = BlogFormKind.EDITOR,
        blog_id: str | None = None,
        redirect_to: str = "/blogs",
    ) -> None:
        self._http = http
        self._kind = kind
        self._blog_id = blog_id
        self._redirect_to = redirect_to
        self._state = SubmissionState.IDLE

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def trigger_enabled(self) -> bool:
        return trigger_enabled(self._state)

    def _transition(self, new_state: SubmissionState) -> None:
        ensure_transition(self._state, new_state)
        self._state = new_state

    def validate(self, data: dict[str, Any]) -> FormValidationResult:
        return validate_blog_form(self._kind, data)

    def submit(self, data: dict[str, Any]) -> SubmissionResult:
        validation = self.validate(data)
        if not validation.is_valid:
            # Inline errors only; nothing is sent and the state is unchanged.
            return SubmissionResult(state=self._state, field_errors=validation.errors)

        self._transition(SubmissionState.PENDING)
        payload = dict(validation.values or {})
        payload["contentPolicy"] = FORM_POLICIES[self._kind].value

        try:
            if self._blog_id is None:
                response = self._http.post(BLOGS_PATH, json=payload)
            else:
                response = self._http.put(BLOGS_PATH, json={"blogId": self._blog_id, **payload})
        except httpx.HTTPError as exc:
            logger.warning(
                "submission.failed form=%s blog_id=%s reason=%s",
                self._kind.value,
                safe_log_identifier(self._blog_id, prefix="bid"),
                type(exc).__name__,
            )
            return self._finish(SubmissionState.ERROR, FAILURE_NOTIFICATION)

        if not response.is_success:
            logger.warning(
                "submission.failed form=%s blog_id=%s status=%s",
                self._kind.value,
                safe_log_identifier(self._blog_id, prefix="bid"),
                response.status_code,
            )
            return self._finish(SubmissionState.ERROR, FAILURE_NOTIFICATION)

        try:
            post = response.json()
        except ValueError:
            post = None
        if not isinstance(post, dict):
            logger.warning(
                "submission.failed form=%s blog_id=%s status=%s reason=unreadable_body",
                self._kind.value,
                safe_log_identifier(self._blog_id, prefix="bid"),
                response.status_code,
            )
            return self._finish(SubmissionState.ERROR, FAILURE_NOTIFICATION)

        logger.info("submission.saved form=%s blog_id=%s", self._kind.value, post.get("id"))
        return self._finish(SubmissionState.SUCCESS, SAVED_NOTIFICATION, post=post)

    def _finish(
        self,
        state: SubmissionState,
        notification: Notification,
        post: dict[str, Any] | None = None,
    ) -> SubmissionResult:
        self._transition(state)
        return SubmissionResult(
            state=state,
            field_errors={},
            notification=notification,
            post=post,
            redirect_to=self._redirect_to,
        )

    def load_initial_values(self) -> tuple[dict[str, Any], Notification | None]:
        """Form defaults, prefilled from the stored post when editing."""
        if self._blog_id is None:
            return default_form_values(self._kind), None

        try:
            response = self._http.get(f"{BLOGS_PATH}/{self._blog_id}")
            response.raise_for_status()
            existing = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "submission.load_failed blog_id=%s reason=%s",
                safe_log_identifier(self._blog_id, prefix="bid"),
                type(exc).__name__,
            )
            return default_form_values(self._kind), FAILURE_NOTIFICATION

        if not isinstance(existing, dict):
            return default_form_values(self._kind), FAILURE_NOTIFICATION
        return default_form_values(self._kind, existing), None
