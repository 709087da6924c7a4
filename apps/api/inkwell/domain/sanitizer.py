"""Rich-text HTML sanitization.

Post bodies arrive as editor-produced HTML and are cleaned with bleach before
they are stored. Two named policies exist and the caller always picks one:

``default``
    The safe-HTML profile the editor emits: headings, paragraphs, marks,
    lists, links, images, code blocks and tables.

``embed``
    The default profile plus ``<iframe>`` embeds with their embedding
    attributes, and ``style`` allowed on every element. ``<script>`` and
    ``<svg>`` are forbidden outright.

Disallowed tags are stripped rather than escaped, comments are dropped, and
inline CSS is reduced to :data:`ALLOWED_STYLE_PROPERTIES`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlparse

from bleach.sanitizer import Cleaner
from bleach.css_sanitizer import CSSSanitizer


class SanitizationPolicyName(str, Enum):
    DEFAULT = "default"
    EMBED = "embed"


BASE_TAGS: frozenset[str] = frozenset(
    {
        "a",
        "b",
        "blockquote",
        "br",
        "code",
        "del",
        "div",
        "em",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "hr",
        "i",
        "img",
        "li",
        "mark",
        "ol",
        "p",
        "pre",
        "s",
        "span",
        "strike",
        "strong",
        "sub",
        "sup",
        "table",
        "tbody",
        "td",
        "th",
        "thead",
        "tr",
        "u",
        "ul",
    }
)

BASE_ATTRIBUTES: dict[str, list[str]] = {
    "*": ["class"],
    "a": ["href", "title", "target", "rel"],
    "img": ["src", "alt", "title", "width", "height"],
    "ol": ["start"],
    "td": ["colspan", "rowspan"],
    "th": ["colspan", "rowspan"],
    "span": ["style"],
    "mark": ["style", "data-color"],
}

EMBED_ATTRIBUTES: frozenset[str] = frozenset(
    {"allow", "allowfullscreen", "frameborder", "scrolling", "style"}
)
IFRAME_ATTRIBUTES: frozenset[str] = EMBED_ATTRIBUTES | {"src", "width", "height", "title", "class"}

ALLOWED_STYLE_PROPERTIES: frozenset[str] = frozenset(
    {
        "background-color",
        "color",
        "font-style",
        "font-weight",
        "height",
        "max-width",
        "text-align",
        "text-decoration",
        "width",
    }
)

ALLOWED_PROTOCOLS: frozenset[str] = frozenset({"http", "https", "mailto"})


@dataclass(frozen=True)
class SanitizationPolicy:
    """Static tag/attribute policy; never mutated after construction."""

    name: SanitizationPolicyName
    allowed_tags: frozenset[str]
    allowed_attributes: dict[str, list[str]] = field(hash=False)
    forbidden_tags: frozenset[str] = frozenset()
    added_tags: frozenset[str] = frozenset()
    added_attributes: frozenset[str] = frozenset()
    allowed_style_properties: frozenset[str] = ALLOWED_STYLE_PROPERTIES
    protocols: frozenset[str] = ALLOWED_PROTOCOLS

    @property
    def effective_tags(self) -> frozenset[str]:
        # Forbidden tags win over anything allowed or added.
        return (self.allowed_tags | self.added_tags) - self.forbidden_tags


DEFAULT_POLICY = SanitizationPolicy(
    name=SanitizationPolicyName.DEFAULT,
    allowed_tags=BASE_TAGS,
    allowed_attributes=BASE_ATTRIBUTES,
)

EMBED_POLICY = SanitizationPolicy(
    name=SanitizationPolicyName.EMBED,
    allowed_tags=BASE_TAGS,
    allowed_attributes=BASE_ATTRIBUTES,
    forbidden_tags=frozenset({"script", "svg"}),
    added_tags=frozenset({"iframe"}),
    added_attributes=EMBED_ATTRIBUTES,
)

_POLICIES: dict[SanitizationPolicyName, SanitizationPolicy] = {
    SanitizationPolicyName.DEFAULT: DEFAULT_POLICY,
    SanitizationPolicyName.EMBED: EMBED_POLICY,
}


def get_policy(name: SanitizationPolicyName | str) -> SanitizationPolicy:
    return _POLICIES[SanitizationPolicyName(name)]


def _host_allowed(src: str, embed_hosts: Iterable[str]) -> bool:
    hosts = [host.lower().lstrip(".") for host in embed_hosts]
    if not hosts:
        return True

    hostname = (urlparse(src).hostname or "").lower()
    if not hostname:
        return False
    return any(hostname == host or hostname.endswith(f".{host}") for host in hosts)


def _attribute_filter(
    policy: SanitizationPolicy, embed_hosts: Iterable[str]
) -> Callable[[str, str, str], bool]:
    global_attrs = set(policy.allowed_attributes.get("*", [])) | set(policy.added_attributes)

    def allow(tag: str, name: str, value: str) -> bool:
        if tag == "iframe":
            if name not in IFRAME_ATTRIBUTES:
                return False
            if name == "src":
                return _host_allowed(value, embed_hosts)
            return True

        if name in policy.allowed_attributes.get(tag, ()):
            return True
        return name in global_attrs

    return allow


def sanitize_html(
    html: str,
    policy: SanitizationPolicy | SanitizationPolicyName | str = SanitizationPolicyName.DEFAULT,
    *,
    embed_hosts: Iterable[str] = (),
) -> str:
    """Return ``html`` reduced to what ``policy`` allows.

    ``embed_hosts`` restricts iframe ``src`` hosts (and their subdomains);
    empty means any host passing the protocol check is accepted.
    """
    if not html:
        return ""

    if not isinstance(policy, SanitizationPolicy):
        policy = get_policy(policy)

    cleaner = Cleaner(
        tags=policy.effective_tags,
        attributes=_attribute_filter(policy, tuple(embed_hosts)),
        protocols=policy.protocols,
        strip=True,
        strip_comments=True,
        css_sanitizer=CSSSanitizer(allowed_css_properties=policy.allowed_style_properties),
    )
    return cleaner.clean(html)


__all__ = [
    "ALLOWED_STYLE_PROPERTIES",
    "DEFAULT_POLICY",
    "EMBED_POLICY",
    "SanitizationPolicy",
    "SanitizationPolicyName",
    "get_policy",
    "sanitize_html",
]
