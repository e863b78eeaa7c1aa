"""Declarative extraction profiles: field name -> ordered lookup strategies.

Selectors run most specific first (a semantic data attribute), then class
name patterns, then a bare tag as the last resort. Shop markup changes
without notice, so the lists are data and can be overridden from YAML
without touching the extractor.

YAML override format::

    product:
      price:
        kind: number
        selectors: ['[data-testid="price"]', '.price']
    seller:
      followers:
        kind: count
        selectors: ['.followers']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    TEXT = "text"            # non-empty trimmed text
    NUMBER = "number"        # float via normalizer
    COUNT = "count"          # int via normalizer, K/M aware
    ATTRIBUTE = "attribute"  # attribute value, e.g. img src


@dataclass(frozen=True)
class FieldSpec:
    """Ordered strategies for one field."""

    name: str
    selectors: tuple[str, ...]
    kind: FieldKind = FieldKind.TEXT
    attribute: str | None = None
    max_value: float | None = None

    def __post_init__(self) -> None:
        if self.kind is FieldKind.ATTRIBUTE and not self.attribute:
            raise ValueError(f"Field '{self.name}' of kind attribute needs an attribute name")


@dataclass
class ExtractionProfile:
    """Field-to-strategy mapping for one entity kind."""

    name: str
    fields: dict[str, FieldSpec] = field(default_factory=dict)

    def __getitem__(self, field_name: str) -> FieldSpec:
        return self.fields[field_name]

    def __contains__(self, field_name: str) -> bool:
        return field_name in self.fields

    def with_overrides(self, overrides: dict[str, FieldSpec]) -> ExtractionProfile:
        merged = dict(self.fields)
        merged.update(overrides)
        return ExtractionProfile(name=self.name, fields=merged)


def _spec(name: str, kind: FieldKind, *selectors: str, **kwargs) -> FieldSpec:
    return FieldSpec(name=name, selectors=tuple(selectors), kind=kind, **kwargs)


PRODUCT_PROFILE = ExtractionProfile(
    name="product",
    fields={
        "name": _spec(
            "name", FieldKind.TEXT,
            '[data-e2e="product-title"]',
            ".product-title",
            'h1[class*="title"]',
            '[class*="ProductTitle"]',
            "h1",
        ),
        "price": _spec(
            "price", FieldKind.NUMBER,
            '[data-e2e="product-price"]',
            ".product-price",
            '[class*="Price"]',
            '[class*="price"]',
        ),
        "original_price": _spec(
            "original_price", FieldKind.NUMBER,
            '[data-e2e="original-price"]',
            '[class*="original-price"]',
            '[class*="OriginalPrice"]',
            "del",
            "s",
        ),
        "sales": _spec(
            "sales", FieldKind.COUNT,
            '[data-e2e="sold-count"]',
            '[class*="sold"]',
            '[class*="sales"]',
        ),
        "rating": _spec(
            "rating", FieldKind.NUMBER,
            '[data-e2e="product-rating"]',
            '[class*="rating"]',
            '[class*="Rating"]',
            max_value=5.0,
        ),
        "reviews": _spec(
            "reviews", FieldKind.COUNT,
            '[data-e2e="review-count"]',
            '[class*="review"]',
            '[class*="Review"]',
        ),
        "seller": _spec(
            "seller", FieldKind.TEXT,
            '[data-e2e="seller-name"]',
            '[class*="seller"]',
            '[class*="shop-name"]',
        ),
        "category": _spec(
            "category", FieldKind.TEXT,
            '[data-e2e="product-category"]',
            '[class*="breadcrumb"] li:last-child',
        ),
        "image_url": _spec(
            "image_url", FieldKind.ATTRIBUTE,
            '[data-e2e="product-image"] img',
            ".product-image img",
            '[class*="ProductImage"] img',
            'img[class*="product"]',
            attribute="src",
        ),
    },
)

SELLER_PROFILE = ExtractionProfile(
    name="seller",
    fields={
        "name": _spec(
            "name", FieldKind.TEXT,
            '[data-e2e="shop-name"]',
            '[class*="shop-name"]',
            '[class*="ShopName"]',
            "h1",
        ),
        "followers": _spec(
            "followers", FieldKind.COUNT,
            '[data-e2e="follower-count"]',
            '[class*="follower"]',
            '[class*="Follower"]',
        ),
        "products": _spec(
            "products", FieldKind.COUNT,
            '[data-e2e="product-count"]',
            '[class*="product-count"]',
        ),
        "rating": _spec(
            "rating", FieldKind.NUMBER,
            '[data-e2e="shop-rating"]',
            '[class*="rating"]',
            max_value=5.0,
        ),
    },
)

DEFAULT_PROFILES: dict[str, ExtractionProfile] = {
    PRODUCT_PROFILE.name: PRODUCT_PROFILE,
    SELLER_PROFILE.name: SELLER_PROFILE,
}


def parse_field_spec(name: str, raw: dict) -> FieldSpec:
    """Build a FieldSpec from a YAML mapping."""
    selectors = raw.get("selectors") or []
    if isinstance(selectors, str):
        selectors = [selectors]
    if not selectors:
        raise ValueError(f"Field '{name}' has no selectors")
    max_value = raw.get("max_value")
    return FieldSpec(
        name=name,
        selectors=tuple(str(s) for s in selectors),
        kind=FieldKind(raw.get("kind", FieldKind.TEXT.value)),
        attribute=raw.get("attribute"),
        max_value=float(max_value) if max_value is not None else None,
    )


def load_profiles(
    path: str | Path | None = None,
    base: dict[str, ExtractionProfile] | None = None,
) -> dict[str, ExtractionProfile]:
    """Return profiles with field overrides from a YAML file applied.

    Fields not mentioned in the file keep their built-in strategies. A
    missing path returns the base profiles unchanged.
    """
    profiles = dict(base or DEFAULT_PROFILES)
    if path is None:
        return profiles

    path = Path(path)
    if not path.exists():
        logger.warning("Extraction profile file not found: %s", path)
        return profiles

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    for profile_name, raw_fields in data.items():
        overrides = {
            field_name: parse_field_spec(field_name, raw or {})
            for field_name, raw in (raw_fields or {}).items()
        }
        current = profiles.get(profile_name, ExtractionProfile(name=profile_name))
        profiles[profile_name] = current.with_overrides(overrides)
        logger.info(
            "Loaded %d field override(s) for profile '%s'", len(overrides), profile_name
        )

    return profiles

