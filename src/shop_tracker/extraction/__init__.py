"""Extraction Engine - product and seller fields from unstable shop markup."""

from .classifier import PageKind, classify_page
from .extractor import FieldExtractor, PageExtractor
from .models import ProductData, SellerData
from .normalizer import parse_count, parse_number
from .page import HtmlPage, Page, fetch_page
from .profiles import (
    DEFAULT_PROFILES,
    PRODUCT_PROFILE,
    SELLER_PROFILE,
    ExtractionProfile,
    FieldKind,
    FieldSpec,
    load_profiles,
)

__all__ = [
    "DEFAULT_PROFILES",
    "ExtractionProfile",
    "FieldExtractor",
    "FieldKind",
    "FieldSpec",
    "HtmlPage",
    "PRODUCT_PROFILE",
    "Page",
    "PageExtractor",
    "PageKind",
    "ProductData",
    "SELLER_PROFILE",
    "SellerData",
    "classify_page",
    "fetch_page",
    "load_profiles",
    "parse_count",
    "parse_number",
]
