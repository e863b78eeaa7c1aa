"""Field extraction with ordered fallback strategies.

For every field the extractor walks the profile's selector list in order and
stops at the first usable value:

- text fields: first non-empty trimmed text
- number/count fields: first text the normalizer can parse (and that stays
  within ``max_value`` when one is set)
- attribute fields: first non-empty attribute value

A field whose strategies all miss resolves to None and the record keeps its
default. Only the name is mandatory; without it there is no record.
"""

from __future__ import annotations

import logging

from .classifier import PageKind, classify_page
from .models import ProductData, SellerData
from .normalizer import parse_count, parse_number
from .page import Page
from .profiles import DEFAULT_PROFILES, ExtractionProfile, FieldKind, FieldSpec

logger = logging.getLogger(__name__)


class FieldExtractor:
    """Resolves single fields against one page.

    Usage:
        fields = FieldExtractor(page)
        name = fields.extract(PRODUCT_PROFILE["name"])
    """

    def __init__(self, page: Page) -> None:
        self.page = page

    def extract(self, spec: FieldSpec) -> str | float | int | None:
        """Value from the first strategy that yields one, else None."""
        for index, selector in enumerate(spec.selectors):
            try:
                element = self.page.find_first(selector)
            except Exception:
                logger.debug(
                    "Strategy %r for field '%s' failed", selector, spec.name, exc_info=True
                )
                continue
            if element is None:
                continue

            value = self._convert(spec, element)
            if value is None:
                continue

            logger.debug(
                "Field '%s' matched strategy %d (%s): %r", spec.name, index, selector, value
            )
            return value

        logger.debug("Field '%s': no strategy matched", spec.name)
        return None

    @staticmethod
    def _convert(spec: FieldSpec, element) -> str | float | int | None:
        if spec.kind is FieldKind.ATTRIBUTE:
            value = (element.attribute(spec.attribute) or "").strip()
            return value or None

        text = (element.text() or "").strip()
        if not text:
            return None
        if spec.kind is FieldKind.TEXT:
            return text

        number = parse_count(text) if spec.kind is FieldKind.COUNT else parse_number(text)
        if number is None:
            return None
        if spec.max_value is not None and number > spec.max_value:
            return None
        return number


class PageExtractor:
    """Assembles product and seller records from a page.

    Usage:
        extractor = PageExtractor()
        record = extractor.extract(page, page.url)
        if record is None:
            ...  # extraction unavailable on this page
    """

    def __init__(self, profiles: dict[str, ExtractionProfile] | None = None) -> None:
        self.profiles = profiles or DEFAULT_PROFILES

    def extract(self, page: Page, url: str | None = None) -> ProductData | SellerData | None:
        """Classify the page by URL and apply the matching profile."""
        url = url if url is not None else getattr(page, "url", "")
        kind = classify_page(url)
        if kind is PageKind.PRODUCT:
            return self.extract_product(page, url)
        if kind is PageKind.SELLER:
            return self.extract_seller(page, url)
        logger.debug("No extraction profile for %s", url)
        return None

    def extract_product(self, page: Page, url: str = "") -> ProductData | None:
        values = self._extract_all(page, self.profiles["product"])
        name = values.pop("name", None)
        if not name:
            logger.info("Product extraction unavailable (no name) for %s", url or "page")
            return None

        product = ProductData(name=name, url=url)
        for field_name, value in values.items():
            if value is not None and hasattr(product, field_name):
                setattr(product, field_name, value)
        return product

    def extract_seller(self, page: Page, url: str = "") -> SellerData | None:
        values = self._extract_all(page, self.profiles["seller"])
        name = values.pop("name", None)
        if not name:
            logger.info("Seller extraction unavailable (no name) for %s", url or "page")
            return None

        seller = SellerData(name=name, shop_url=url)
        for field_name, value in values.items():
            if value is not None and hasattr(seller, field_name):
                setattr(seller, field_name, value)
        return seller

    @staticmethod
    def _extract_all(page: Page, profile: ExtractionProfile) -> dict:
        fields = FieldExtractor(page)
        values = {}
        # Name first: nothing else is worth querying without it.
        if "name" in profile:
            values["name"] = fields.extract(profile["name"])
            if not values["name"]:
                return values
        for field_name, spec in profile.fields.items():
            if field_name == "name":
                continue
            values[field_name] = fields.extract(spec)
        return values
