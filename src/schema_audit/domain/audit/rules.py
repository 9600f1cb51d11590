# audit/rules.py

import re
from collections.abc import Iterable
from typing import NamedTuple


class Rule(NamedTuple):
    """
    A single classification rule.

    Attributes:
        pattern: Compiled regular expression tested against a name.
        label: Classification assigned when the pattern matches.
    """

    pattern: re.Pattern[str]
    label: str


class NamedPattern(NamedTuple):
    """
    A well-known group of fields that belongs in a reusable sub-structure.

    Attributes:
        fields: Field names making up the pattern.
        label: Name of the sub-structure the fields suggest.
    """

    fields: tuple[str, ...]
    label: str


def _rule(pattern: str, label: str, flags: int = re.IGNORECASE) -> Rule:
    return Rule(re.compile(pattern, flags), label)


# Model names too generic to say what the content is
VAGUE_MODEL_RULES: tuple[Rule, ...] = (
    _rule(
        r"^(content|data|item|entry|record|object|thing|element|block|section)s?$",
        "Generic content type name",
    ),
)

# Rough purpose of a model inferred from its name, first match wins
MODEL_PURPOSE_RULES: tuple[Rule, ...] = (
    _rule(r"^pages?$", "Website pages"),
    _rule(r"^(article|post|blog)s?$", "Blog/article content"),
    _rule(r"^products?$", "Product catalog"),
    _rule(r"^(category|categories|topic|tag)s?$", "Content classification"),
    _rule(r"^(author|person|people|team)s?$", "People/authors"),
    _rule(r"^(site|brand|shop)s?$", "Site/brand config"),
    _rule(r"^forms?$", "Form definitions"),
    _rule(r"^(event|session)s?$", "Events"),
    _rule(r"^(seo|meta)$", "SEO configuration"),
    _rule(r"^(navigation|menu)s?$", "Navigation structure"),
)

# Model names where layout and styling fields are a coupling problem
CONTENT_MODEL_RULES: tuple[Rule, ...] = tuple(
    _rule(name, "Content model")
    for name in (
        "article",
        "post",
        "page",
        "blog",
        "news",
        "story",
        "product",
        "category",
        "event",
        "author",
        "person",
        "faq",
        "testimonial",
        "review",
        "comment",
    )
)

# Field names describing presentation rather than content
PRESENTATION_FIELD_RULES: tuple[Rule, ...] = tuple(
    _rule(pattern, "Layout/styling field on content model")
    for pattern in (
        r"^background(Color|Image|Gradient)?$",
        r"^(text|font|border|outline)Color$",
        r"^(bg|fg)Color$",
        r"^color$",
        r"^(padding|margin)(Top|Bottom|Left|Right)?$",
        r"^(text)?align(ment)?$",
        r"^justify(Content)?$",
        r"^(flex|grid)(Direction|Wrap|Gap)?$",
        r"^(width|height|maxWidth|minHeight)$",
        r"^border(Radius|Width|Style)?$",
        r"^opacity$",
        r"^zIndex$",
        r"^position$",
        r"^display(Mode)?$",
        r"^theme$",
        r"^colorScheme$",
        r"^variant$",
        r"^style$",
    )
)

# Display toggles and layout switches, matched case-sensitively on the prefix
CONFIG_FIELD_RULES: tuple[Rule, ...] = (
    _rule(r"^show[A-Z]", "Display/config toggle on content model", 0),
    _rule(r"^hide[A-Z]", "Display/config toggle on content model", 0),
    _rule(r"^display[A-Z]", "Display/config toggle on content model", 0),
    _rule(r"^is(Visible|Hidden|Enabled|Disabled)$", "Display/config toggle on content model"),
    _rule(r"^(columns?|rows?|grid)$", "Display/config toggle on content model"),
    _rule(r"^layout(Type|Mode)?$", "Display/config toggle on content model"),
    _rule(r"^order$", "Display/config toggle on content model"),
    _rule(r"^sort(Order)?$", "Display/config toggle on content model"),
    _rule(r"^(animate|animation)", "Display/config toggle on content model"),
    _rule(r"^transition", "Display/config toggle on content model"),
)

# Enumeration fields whose name or values look like styling options
STYLING_ENUM_NAME_RULE = _rule(r"theme|color|style|variant|size|align", "Styling enum")
STYLING_ENUM_VALUE_RULE = _rule(
    r"dark|light|primary|secondary|small|medium|large|left|center|right",
    "Styling enum",
)

# Fields that should usually be required, with the reason
REQUIRED_FIELD_RULES: tuple[Rule, ...] = (
    _rule(r"^(title|name|headline)$", "Primary identifier"),
    _rule(r"^slug$", "URL routing"),
    _rule(r"^type$", "Content classification"),
)

# Numbered, layout-position field names such as section17Title
SECTION_SPECIFIC_RULE = _rule(
    r"^(section|block|area|zone|row|column)\d+",
    "Section-specific field",
)

# camelCase field names
CAMEL_CASE_RULE = _rule(r"^[a-z][a-zA-Z0-9]*$", "camelCase", 0)

# Plain string fields holding media URLs instead of asset references
INLINE_MEDIA_RULE = _rule(
    r"^(image|video|media|file|asset|thumbnail|cover|banner|logo|icon)"
    r"(Url|URL|Uri|URI|Path)?$",
    "Inline media URL",
)

# Components that keep presentation settings out of content models
LAYOUT_COMPONENT_RULE = _rule(r"layout|config|style|theme|display", "Layout component")

# Enumerations used to partition content by tenant
TENANCY_ENUM_RULE = _rule(
    r"^(shop|brand|store|site|tenant|organization|client|channel|market|region)s?$",
    "Tenancy enumeration",
)

# Trailing version markers: HomePage2, Home_Page_v3, Article V2
VERSION_SUFFIX_RULE = _rule(r"^(.+?)[_\s]?v?\d+$", "Versioned name")

# Well-known field groups, checked before ad-hoc combinations
NAMED_FIELD_PATTERNS: tuple[NamedPattern, ...] = (
    NamedPattern(("title", "description", "image"), "Content Card"),
    NamedPattern(("metaTitle", "metaDescription", "ogImage"), "SEO"),
    NamedPattern(("title", "slug"), "Sluggable Content"),
    NamedPattern(("name", "email", "phone"), "Contact Info"),
    NamedPattern(("street", "city", "country", "postalCode"), "Address"),
    NamedPattern(("label", "url", "icon"), "Link/CTA"),
    NamedPattern(("heading", "subheading", "body"), "Text Block"),
)

# Platform-internal names excluded from every analysis
SYSTEM_MODEL_NAMES: frozenset[str] = frozenset(
    {"Asset", "User", "ScheduledOperation", "ScheduledRelease"},
)

SYSTEM_COMPONENT_NAMES: frozenset[str] = frozenset(
    {
        "AssetUpload",
        "AssetUploadError",
        "BatchPayload",
        "Color",
        "ColorInput",
        "DocumentVersion",
        "Location",
        "LocationInput",
        "PageInfo",
        "RGBA",
        "RGBAInput",
        "RichText",
        "RichTextAST",
        "Version",
    },
)

SYSTEM_ENUM_NAMES: frozenset[str] = frozenset(
    {
        "DocumentFileTypes",
        "ImageFit",
        "Locale",
        "Stage",
        "ScheduledOperationStatus",
        "ScheduledReleaseStatus",
        "SystemDateTimeFieldVariation",
        "EntityTypeName",
        "UserKind",
        "RGBAHue",
        "RGBATransparency",
    },
)

# Platform-managed fields present on every model, ignored by comparisons
SYSTEM_FIELD_NAMES: frozenset[str] = frozenset(
    {
        "id",
        "createdAt",
        "updatedAt",
        "publishedAt",
        "createdBy",
        "updatedBy",
        "publishedBy",
        "stage",
        "documentInStages",
        "history",
        "scheduledIn",
        "localizations",
        "locale",
    },
)

_GENERATED_SUFFIXES: tuple[str, ...] = (
    "WhereInput",
    "OrderByInput",
    "CreateInput",
    "UpdateInput",
    "ConnectInput",
    "UpsertInput",
    "ManyInlineInput",
    "Connection",
    "Edge",
    "Aggregate",
)


def first_match(rules: Iterable[Rule], text: str) -> str | None:
    """
    Return the label of the first rule whose pattern matches ``text``.

    Args:
        rules: Ordered rules to test.
        text: Name to classify.

    Returns:
        str | None: Matching label, or None when no rule applies.
    """
    for rule in rules:
        if rule.pattern.search(text):
            return rule.label
    return None


def matches_any(rules: Iterable[Rule], text: str) -> bool:
    """
    Check whether any rule matches ``text``.

    Returns:
        bool: True when at least one pattern matches.
    """
    return first_match(rules, text) is not None


def is_system_model(name: str) -> bool:
    """
    Check whether a standalone entity is platform-internal.

    Auto-generated rich-text and embedded-asset holders are treated as
    internal alongside the fixed platform models.

    Returns:
        bool: True when the model should be excluded from analysis.
    """
    if name in SYSTEM_MODEL_NAMES:
        return True
    return _has_generated_prefix(name, "RichText") or _has_generated_prefix(
        name,
        "EmbeddedAsset",
    )


def is_system_component(name: str) -> bool:
    """
    Check whether a sub-structure is platform-internal.

    Returns:
        bool: True when the sub-structure should be excluded from analysis.
    """
    if name in SYSTEM_COMPONENT_NAMES:
        return True
    if _has_generated_prefix(name, "RichText"):
        return True
    if name.startswith("Asset") and any(
        marker in name for marker in ("Upload", "Transform", "Output")
    ):
        return True
    if "FromAnotherProject_" in name:
        return True
    return any(name.endswith(suffix) for suffix in _GENERATED_SUFFIXES)


def is_system_enum(name: str) -> bool:
    """
    Check whether an enumeration is platform-internal.

    Returns:
        bool: True when the enumeration should be excluded from analysis.
    """
    if name.startswith("_") or name in SYSTEM_ENUM_NAMES:
        return True
    if any(name.endswith(f"_{system}") for system in SYSTEM_ENUM_NAMES):
        return True
    if "FromAnotherProject_" in name:
        return True
    return name.endswith(("Variation", "OrderByInput"))


def _has_generated_prefix(name: str, suffix: str) -> bool:
    return name.endswith(suffix) and len(name) > len(suffix)
