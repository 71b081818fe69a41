# core/services/metadata.py
"""
Client for the Audnexus title metadata API.

Titles are never stored locally, so every view that shows a title resolves it
here. Results are cached in-process for a few minutes.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import requests

from core import config

logger = logging.getLogger(__name__)

# asin -> (metadata, expires_at monotonic seconds)
_cache: dict[str, tuple[dict, float]] = {}
_cache_lock = threading.Lock()


def _cache_get(asin: str) -> Optional[dict]:
    with _cache_lock:
        cached = _cache.get(asin)
        if cached is None:
            return None
        data, expires_at = cached
        if expires_at > time.monotonic():
            return data
        del _cache[asin]
        return None


def _cache_set(asin: str, data: dict) -> None:
    with _cache_lock:
        _cache[asin] = (data, time.monotonic() + config.METADATA_CACHE_TTL_SECONDS)


def evict(asin: str) -> None:
    """Drop a cached title so the next lookup goes upstream."""
    with _cache_lock:
        _cache.pop(asin, None)


def clear_cache() -> None:
    with _cache_lock:
        _cache.clear()


def fetch_title_metadata(
    asin: str,
    retries: int = config.METADATA_RETRIES,
    retry_delay: float = config.METADATA_RETRY_DELAY_SECONDS,
) -> Optional[dict]:
    """Fetch one title from Audnexus.

    Rate limits, server errors and network errors are retried with exponential
    backoff (1s, 2s, 4s with the defaults). Any other error status means the
    title is unknown upstream.

    Args:
        asin: The title's ASIN
        retries: Retries left
        retry_delay: Base delay in seconds

    Returns:
        The Audnexus title document, or None if it could not be fetched
    """
    cached = _cache_get(asin)
    if cached is not None:
        return cached

    url = f"{config.AUDNEXUS_URL.rstrip('/')}/books/{asin}"
    while True:
        backoff = 2 ** (config.METADATA_RETRIES - retries) * retry_delay
        try:
            response = requests.get(url, timeout=config.METADATA_TIMEOUT_SECONDS)
        except requests.RequestException as e:
            logger.error(f"Audnexus network error for {asin}: {e}")
            if retries > 0:
                logger.warning(f"Network error for {asin}, retrying in {backoff:.1f}s")
                time.sleep(backoff)
                retries -= 1
                continue
            return None

        if response.ok:
            data = response.json()
            _cache_set(asin, data)
            return data

        if (response.status_code == 429 or response.status_code >= 500) and retries > 0:
            logger.warning(
                f"Audnexus error {response.status_code} for {asin}, retrying in {backoff:.1f}s "
                f"({retries} retries left)"
            )
            time.sleep(backoff)
            retries -= 1
            continue

        logger.warning(f"Audnexus error {response.status_code} for {asin}: {response.reason}")
        return None


def fetch_title_metadata_batch(
    asins: list[str],
    concurrency: int = config.METADATA_BATCH_CONCURRENCY,
) -> list[Optional[dict]]:
    """Fetch many titles, deduplicated, with bounded concurrency.

    Args:
        asins: ASINs to fetch, duplicates allowed
        concurrency: Maximum concurrent upstream requests

    Returns:
        Results aligned with the input order (None for failures)
    """
    unique = list(dict.fromkeys(asins))
    if not unique:
        return []

    results: dict[str, Optional[dict]] = {}
    with ThreadPoolExecutor(max_workers=max(1, min(concurrency, len(unique)))) as executor:
        futures = {asin: executor.submit(fetch_title_metadata, asin) for asin in unique}
        for asin, future in futures.items():
            try:
                results[asin] = future.result()
            except Exception as e:
                logger.warning(f"Metadata fetch failed for {asin}: {e}")
                results[asin] = None

    return [results.get(asin) for asin in asins]


def _names(people) -> list[str]:
    return [p.get("name") for p in (people or []) if isinstance(p, dict) and p.get("name")]


def summarize(metadata: dict) -> dict:
    """Trim an Audnexus document to the fields the API returns for a title."""
    return {
        "asin": metadata.get("asin"),
        "title": metadata.get("title"),
        "subtitle": metadata.get("subtitle"),
        "authors": _names(metadata.get("authors")),
        "narrators": _names(metadata.get("narrators")),
        "image": metadata.get("image"),
        "runtimeLengthMin": metadata.get("runtimeLengthMin"),
    }


def summarize_or_none(metadata: Optional[dict]) -> Optional[dict]:
    return summarize(metadata) if metadata else None


def title_card(asin: str, metadata: Optional[dict]) -> dict:
    """Display fields for a title, falling back to the bare ASIN when upstream has no record."""
    summary = summarize(metadata) if metadata else {}
    return {
        "asin": asin,
        "title": summary.get("title") or asin,
        "subtitle": summary.get("subtitle"),
        "authors": summary.get("authors") or [],
        "narrators": summary.get("narrators") or [],
        "image": summary.get("image"),
        "runtimeLengthMin": summary.get("runtimeLengthMin"),
    }


def title_cards(asins: list[str]) -> list[dict]:
    """Resolve display fields for many titles, aligned with the input order."""
    metadata = fetch_title_metadata_batch(asins) if asins else []
    return [title_card(asin, meta) for asin, meta in zip(asins, metadata)]
