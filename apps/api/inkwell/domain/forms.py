"""Blog submission form rules.

Two entry points submit posts and they do not share title limits:

- ``editor``: the create/edit builder with the privacy toggle. Titles are
  capped at 32 characters and bodies at 20000.
- ``quick_post``: the standalone builder. Titles are capped at 100 characters
  and bodies at 20000.

Both are kept as-is; the API accepts the wider of the two title bounds.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError

from inkwell.domain.sanitizer import SanitizationPolicyName

TITLE_MIN_LENGTH = 4
BODY_MIN_LENGTH = 20
BODY_MAX_LENGTH = 20000


class BlogFormKind(str, Enum):
    EDITOR = "editor"
    QUICK_POST = "quick_post"


_TITLE_MAX_LENGTH: dict[BlogFormKind, int] = {
    BlogFormKind.EDITOR: 32,
    BlogFormKind.QUICK_POST: 100,
}

# Each entry point sanitizes with its own policy.
FORM_POLICIES: dict[BlogFormKind, SanitizationPolicyName] = {
    BlogFormKind.EDITOR: SanitizationPolicyName.EMBED,
    BlogFormKind.QUICK_POST: SanitizationPolicyName.DEFAULT,
}

_DEFAULT_VALUES: dict[BlogFormKind, dict[str, Any]] = {
    BlogFormKind.EDITOR: {
        "blogTitle": "Write a Blog Title!",
        "blogPost": "Hello World 🌎",
        "isPrivate": False,
    },
    BlogFormKind.QUICK_POST: {
        "blogTitle": "Add a title!",
        "blogPost": "Hello World! 🌎️",
        "isPrivate": False,
    },
}


def title_max_length(kind: BlogFormKind) -> int:
    return _TITLE_MAX_LENGTH[kind]


def widest_title_max_length() -> int:
    return max(_TITLE_MAX_LENGTH.values())


class EditorBlogForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    blog_title: Annotated[
        str, StringConstraints(min_length=TITLE_MIN_LENGTH, max_length=_TITLE_MAX_LENGTH[BlogFormKind.EDITOR])
    ] = Field(alias="blogTitle")
    blog_post: Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=BODY_MIN_LENGTH, max_length=BODY_MAX_LENGTH),
    ] = Field(alias="blogPost")
    is_private: bool = Field(default=False, alias="isPrivate")


class QuickPostBlogForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    blog_title: Annotated[
        str, StringConstraints(min_length=TITLE_MIN_LENGTH, max_length=_TITLE_MAX_LENGTH[BlogFormKind.QUICK_POST])
    ] = Field(alias="blogTitle")
    blog_post: Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=BODY_MIN_LENGTH, max_length=BODY_MAX_LENGTH),
    ] = Field(alias="blogPost")
    is_private: bool = Field(default=False, alias="isPrivate")


_FORM_MODELS: dict[BlogFormKind, type[BaseModel]] = {
    BlogFormKind.EDITOR: EditorBlogForm,
    BlogFormKind.QUICK_POST: QuickPostBlogForm,
}


@dataclass(slots=True)
class FormValidationResult:
    values: dict[str, Any] | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def field_error_message(field_name: str, error_type: str, ctx: dict[str, Any] | None = None) -> str:
    """Inline message shown under a single form field."""
    ctx = ctx or {}
    if field_name == "blogTitle":
        if error_type == "string_too_short":
            return f"Title must be at least {ctx.get('min_length', TITLE_MIN_LENGTH)} characters"
        if error_type == "string_too_long":
            return f"Title must be less than {ctx.get('max_length')} characters"
        if error_type == "missing":
            return "Title is required"
    if field_name == "blogPost":
        if error_type == "string_too_short":
            return f"Blog post must be at least {ctx.get('min_length', BODY_MIN_LENGTH)} characters"
        if error_type == "string_too_long":
            return f"Blog post must be at most {ctx.get('max_length', BODY_MAX_LENGTH)} characters"
        if error_type == "missing":
            return "Blog post is required"
    return "Invalid value"


def errors_by_field(raw_errors: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    """Collapse pydantic error entries to the first message per field."""
    errors: dict[str, str] = {}
    for error in raw_errors:
        loc = [part for part in error.get("loc", ()) if part != "body"]
        field_name = str(loc[0]) if loc else "__root__"
        errors.setdefault(field_name, field_error_message(field_name, error["type"], error.get("ctx")))
    return errors


def validate_blog_form(kind: BlogFormKind, data: dict[str, Any]) -> FormValidationResult:
    """Check a submission against the limits of its entry point."""
    model = _FORM_MODELS[kind]
    try:
        form = model.model_validate(data)
    except ValidationError as exc:
        return FormValidationResult(errors=errors_by_field(exc.errors()))
    return FormValidationResult(values=form.model_dump(by_alias=True))


def default_form_values(kind: BlogFormKind, existing: dict[str, Any] | None = None) -> dict[str, Any]:
    """Initial field values, prefilled from an existing post when editing."""
    values = dict(_DEFAULT_VALUES[kind])
    if existing:
        for key in values:
            if existing.get(key) not in (None, ""):
                values[key] = existing[key]
    return values
