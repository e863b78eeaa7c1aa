"""
Shop Tracker: commerce page extraction and tracking engine

Modules:
- extraction: numeric normalizer, field extractor, page classifier
- tracking: persistent document store, history recorder, quota gate, stats
- alerts: price alert evaluator, notification boundary, recurring scheduler
- service: upstream actions (track product/seller, set alert, consume quota)
- common: configuration, logging, shared data models, HTTP client
"""

__version__ = "0.1.0"
