"""CLI entry point for Shop Tracker.

Usage:
    # Extract a product/seller page (fetched, or from a saved HTML file):
    python -m shop_tracker.main extract https://shop.example.com/product/123
    python -m shop_tracker.main extract https://shop.example.com/product/123 \
        --html data/raw_html/product.html --track

    # Run one alert sweep, or keep sweeping on the configured interval:
    python -m shop_tracker.main alerts
    python -m shop_tracker.main alerts --loop

    # Inspect state:
    python -m shop_tracker.main usage [--consume]
    python -m shop_tracker.main products --sort sales
    python -m shop_tracker.main stats
    python -m shop_tracker.main clear
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .alerts.evaluator import AlertEvaluator
from .alerts.scheduler import AlertScheduler
from .common.config import Config
from .common.http_client import HTTPClient
from .common.logging import setup_logging
from .extraction.models import ProductData
from .extraction.page import HtmlPage, fetch_page
from .service import TrackerService
from .tracking.stats import SORT_KEYS, dashboard_stats, sort_products

logger = logging.getLogger("shop_tracker.main")


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2, default=str))


def _run_extract(service: TrackerService, config: Config, args: argparse.Namespace) -> int:
    if args.html:
        html = Path(args.html).read_text(encoding="utf-8")
        page = HtmlPage(html, url=args.url)
    else:
        with HTTPClient(config) as client:
            page = fetch_page(args.url, client, cache_key="page")

    record = service.extractor.extract(page, args.url)
    if record is None:
        logger.warning("Nothing extractable on %s", args.url)
        return 1

    _print_json(record.to_dict())
    if args.track:
        if isinstance(record, ProductData):
            entity_id = service.track_product(record)
        else:
            entity_id = service.track_seller(record)
        logger.info("Tracked as %s", entity_id)
    return 0


def _run_alerts(service: TrackerService, config: Config, args: argparse.Namespace) -> int:
    evaluator = AlertEvaluator(service.store)
    if not args.loop:
        fired = evaluator.sweep()
        _print_json([a.model_dump(mode="json") for a in fired])
        return 0

    scheduler = AlertScheduler(evaluator, interval_seconds=config.alert_interval_minutes * 60)
    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


def _run_usage(service: TrackerService, args: argparse.Namespace) -> int:
    if args.consume:
        granted = service.consume_quota()
        if not granted:
            logger.warning("Monthly limit reached")
            return 2
    usage = service.store.read().usage
    _print_json({**usage.model_dump(mode="json"), "remaining": service.quota.remaining()})
    return 0


def _run_products(service: TrackerService, args: argparse.Namespace) -> int:
    products = sort_products(service.store.read().tracked_products, args.sort)
    _print_json([p.model_dump(mode="json", exclude={"price_history", "sales_history"}) for p in products])
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Shop Tracker")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_extract = sub.add_parser("extract", help="Extract a product or seller page")
    p_extract.add_argument("url", help="Page URL (decides product/seller profile)")
    p_extract.add_argument("--html", type=str, help="Read HTML from this file instead of fetching")
    p_extract.add_argument("--track", action="store_true", help="Track the extracted entity")

    p_alerts = sub.add_parser("alerts", help="Evaluate price alerts")
    p_alerts.add_argument("--loop", action="store_true", help="Keep sweeping on the configured interval")

    p_usage = sub.add_parser("usage", help="Show the monthly quota")
    p_usage.add_argument("--consume", action="store_true", help="Consume one analysis unit")

    p_products = sub.add_parser("products", help="List tracked products")
    p_products.add_argument("--sort", choices=SORT_KEYS, default="recent")

    sub.add_parser("stats", help="Dashboard statistics")
    sub.add_parser("clear", help="Delete all tracked products, competitors, trends and alerts")

    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    config = Config()
    service = TrackerService.from_config(config)

    if args.command == "extract":
        return _run_extract(service, config, args)
    if args.command == "alerts":
        return _run_alerts(service, config, args)
    if args.command == "usage":
        return _run_usage(service, args)
    if args.command == "products":
        return _run_products(service, args)
    if args.command == "stats":
        _print_json(dashboard_stats(service.store.read()).model_dump(mode="json"))
        return 0
    if args.command == "clear":
        service.store.clear_all_data()
        return 0
    return 1


if __name__ == "__main__":
    sys.exit(main())
