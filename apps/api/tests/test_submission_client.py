"""Blog form submission client tests."""

from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient
import httpx

from inkwell.client.submission import (
    FAILURE_NOTIFICATION,
    SAVED_NOTIFICATION,
    BlogSubmitter,
    NotificationVariant,
)
from inkwell.core.config import get_settings
from inkwell.domain.forms import BlogFormKind
from inkwell.domain.submission_fsm import SubmissionInProgressError, SubmissionState
from inkwell.main import create_app

VALID_FORM = {
    "blogTitle": "First post",
    "blogPost": "<p>Hello there, this is my first post.</p>",
    "isPrivate": False,
}


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "INKWELL_AUTH_PROVIDER",
        "INKWELL_CALLBACK_SECRET",
        "INKWELL_SESSION_SECRET",
        "INKWELL_DISCORD_CLIENT_ID",
        "INKWELL_DISCORD_CLIENT_SECRET",
        "INKWELL_GITHUB_CLIENT_ID",
        "INKWELL_GITHUB_CLIENT_SECRET",
        "INKWELL_GOOGLE_CLIENT_ID",
        "INKWELL_GOOGLE_CLIENT_SECRET",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["INKWELL_AUTH_PROVIDER"] = "mock"
        os.environ["INKWELL_CALLBACK_SECRET"] = "test-callback-secret"
        os.environ["INKWELL_SESSION_SECRET"] = "test-session-secret-with-enough-bytes"
        for provider in ("DISCORD", "GITHUB", "GOOGLE"):
            os.environ[f"INKWELL_{provider}_CLIENT_ID"] = f"{provider.lower()}-client"
            os.environ[f"INKWELL_{provider}_CLIENT_SECRET"] = f"{provider.lower()}-secret"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class SubmitterAgainstApiTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.app = create_app()
        self.client = TestClient(self.app)
        self.client.headers["Authorization"] = "Bearer test:author-1"

    def test_successful_create_notifies_and_redirects(self) -> None:
        submitter = BlogSubmitter(self.client)
        self.assertEqual(submitter.state, SubmissionState.IDLE)

        result = submitter.submit(VALID_FORM)

        self.assertEqual(result.state, SubmissionState.SUCCESS)
        self.assertEqual(submitter.state, SubmissionState.SUCCESS)
        self.assertIs(result.notification, SAVED_NOTIFICATION)
        self.assertEqual(result.redirect_to, "/blogs")
        self.assertEqual(result.post["blogTitle"], "First post")
        self.assertEqual(result.post["authorId"], "author-1")
        self.assertEqual(self.app.state.store.post_write_count, 1)

    def test_invalid_form_sends_nothing(self) -> None:
        submitter = BlogSubmitter(self.client)

        result = submitter.submit({**VALID_FORM, "blogTitle": "abc"})

        self.assertEqual(result.state, SubmissionState.IDLE)
        self.assertEqual(result.field_errors, {"blogTitle": "Title must be at least 4 characters"})
        self.assertIsNone(result.notification)
        self.assertEqual(self.app.state.store.post_write_count, 0)

    def test_editor_title_limit_applies_before_sending(self) -> None:
        editor = BlogSubmitter(self.client, kind=BlogFormKind.EDITOR)
        quick = BlogSubmitter(self.client, kind=BlogFormKind.QUICK_POST)
        form = {**VALID_FORM, "blogTitle": "t" * 40}

        self.assertEqual(editor.submit(form).state, SubmissionState.IDLE)
        self.assertEqual(quick.submit(form).state, SubmissionState.SUCCESS)

    def test_editor_form_keeps_embeds_and_quick_post_strips_them(self) -> None:
        body = '<p>watch this video</p><iframe src="https://www.youtube.com/embed/abc"></iframe>'

        editor_result = BlogSubmitter(self.client).submit({**VALID_FORM, "blogPost": body})
        quick_result = BlogSubmitter(self.client, kind=BlogFormKind.QUICK_POST).submit(
            {**VALID_FORM, "blogPost": body}
        )

        self.assertIn("<iframe", editor_result.post["blogPost"])
        self.assertNotIn("<iframe", quick_result.post["blogPost"])

    def test_script_never_reaches_the_stored_post(self) -> None:
        result = BlogSubmitter(self.client).submit(
            {**VALID_FORM, "blogPost": "<p>hello readers!</p><script>alert(1)</script>"}
        )
        self.assertEqual(result.state, SubmissionState.SUCCESS)
        stored = self.app.state.store.get_post(result.post["id"])
        self.assertNotIn("<script", stored.body)

    def test_rejected_request_reports_generic_failure_then_allows_retry(self) -> None:
        self.client.headers.pop("Authorization")
        submitter = BlogSubmitter(self.client)

        failed = submitter.submit(VALID_FORM)
        self.assertEqual(failed.state, SubmissionState.ERROR)
        self.assertIs(failed.notification, FAILURE_NOTIFICATION)
        self.assertEqual(failed.notification.variant, NotificationVariant.DESTRUCTIVE)
        self.assertTrue(submitter.trigger_enabled)

        self.client.headers["Authorization"] = "Bearer test:author-1"
        retried = submitter.submit(VALID_FORM)
        self.assertEqual(retried.state, SubmissionState.SUCCESS)

    def test_editing_prefills_and_updates_in_place(self) -> None:
        created = BlogSubmitter(self.client).submit(VALID_FORM).post
        editing = BlogSubmitter(self.client, blog_id=created["id"])

        values, notification = editing.load_initial_values()
        self.assertIsNone(notification)
        self.assertEqual(values["blogTitle"], "First post")
        self.assertEqual(values["blogPost"], created["blogPost"])

        result = editing.submit({**values, "blogTitle": "Edited post"})
        self.assertEqual(result.state, SubmissionState.SUCCESS)
        self.assertEqual(result.post["id"], created["id"])
        self.assertEqual(result.post["blogTitle"], "Edited post")
        self.assertEqual(len(self.app.state.store.posts), 1)

    def test_loading_missing_post_falls_back_to_defaults(self) -> None:
        values, notification = BlogSubmitter(self.client, blog_id="missing").load_initial_values()
        self.assertEqual(values["blogTitle"], "Write a Blog Title!")
        self.assertIs(notification, FAILURE_NOTIFICATION)

    def test_new_form_starts_from_defaults(self) -> None:
        values, notification = BlogSubmitter(self.client, kind=BlogFormKind.QUICK_POST).load_initial_values()
        self.assertEqual(values["blogTitle"], "Add a title!")
        self.assertIsNone(notification)


class SubmitterTransportTests(unittest.TestCase):
    def _client(self, handler) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler), base_url="http://testserver")

    def test_network_failure_reports_generic_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        submitter = BlogSubmitter(self._client(handler))
        result = submitter.submit(VALID_FORM)

        self.assertEqual(result.state, SubmissionState.ERROR)
        self.assertIs(result.notification, FAILURE_NOTIFICATION)

    def test_server_error_reports_generic_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"code": "INTERNAL_ERROR", "message": "Something went wrong"})

        result = BlogSubmitter(self._client(handler)).submit(VALID_FORM)
        self.assertEqual(result.state, SubmissionState.ERROR)
        self.assertIs(result.notification, FAILURE_NOTIFICATION)

    def test_unreadable_success_body_ends_in_error_and_allows_retry(self) -> None:
        bodies = [
            httpx.Response(201, text="created"),
            httpx.Response(201, json=["not", "an", "object"]),
            httpx.Response(201, json={"id": "p1", "blogTitle": "First post"}),
        ]

        def handler(request: httpx.Request) -> httpx.Response:
            return bodies.pop(0)

        submitter = BlogSubmitter(self._client(handler))
        for _ in range(2):
            result = submitter.submit(VALID_FORM)
            self.assertEqual(result.state, SubmissionState.ERROR)
            self.assertIs(result.notification, FAILURE_NOTIFICATION)
            self.assertTrue(submitter.trigger_enabled)

        self.assertEqual(submitter.submit(VALID_FORM).state, SubmissionState.SUCCESS)

    def test_unreadable_stored_post_falls_back_to_defaults(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>not json</html>")

        values, notification = BlogSubmitter(self._client(handler), blog_id="p1").load_initial_values()
        self.assertEqual(values["blogTitle"], "Write a Blog Title!")
        self.assertIs(notification, FAILURE_NOTIFICATION)

    def test_request_shape_for_create_and_update(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "p1", "blogTitle": "First post"})

        client = self._client(handler)
        BlogSubmitter(client).submit(VALID_FORM)
        BlogSubmitter(client, kind=BlogFormKind.QUICK_POST, blog_id="p1").submit(VALID_FORM)

        self.assertEqual([request.method for request in seen], ["POST", "PUT"])
        self.assertEqual({request.url.path for request in seen}, {"/api/blogs"})
        self.assertIn(b'"contentPolicy":"embed"', seen[0].content.replace(b" ", b""))
        self.assertIn(b'"blogId":"p1"', seen[1].content.replace(b" ", b""))
        self.assertIn(b'"contentPolicy":"default"', seen[1].content.replace(b" ", b""))

    def test_only_one_request_is_outstanding(self) -> None:
        attempts: list[Exception] = []
        trigger_states: list[bool] = []
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.method)
            trigger_states.append(submitter.trigger_enabled)
            try:
                submitter.submit(VALID_FORM)
            except SubmissionInProgressError as exc:
                attempts.append(exc)
            return httpx.Response(201, json={"id": "p1", "blogTitle": "First post"})

        submitter = BlogSubmitter(self._client(handler))
        result = submitter.submit(VALID_FORM)

        self.assertEqual(result.state, SubmissionState.SUCCESS)
        self.assertEqual(calls, ["POST"])
        self.assertEqual(trigger_states, [False])
        self.assertEqual(len(attempts), 1)


if __name__ == "__main__":
    unittest.main()
