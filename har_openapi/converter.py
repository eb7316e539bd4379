"""Conversion pipeline: HAR entries -> aggregated endpoints."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .aggregator import EndpointAggregator, build_observation
from .har_loader import entry_to_call, get_entries, is_excluded, matches_base_path
from .models import CapturedCall, ConversionStats, Endpoint
from .params import url_path
from .path_normalizer import DEFAULT_RULES, IdentifierRules

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def select_candidates(har: Dict[str, Any], base_path: str,
                      stats: ConversionStats) -> List[CapturedCall]:
    """Convert entries and keep those under the base path, counting the rest."""
    entries = get_entries(har)
    stats.total_entries = len(entries)

    candidates = []
    for entry in entries:
        call = entry_to_call(entry)
        if call is None:
            stats.skipped_malformed += 1
            logger.debug("Skipping entry without method/url")
            continue
        if not matches_base_path(url_path(call.url), base_path):
            stats.skipped_prefix += 1
            continue
        candidates.append(call)
    return candidates


def convert_calls(calls: List[CapturedCall], base_path: str,
                  stats: ConversionStats,
                  rules: IdentifierRules = DEFAULT_RULES,
                  progress: Optional[ProgressCallback] = None) -> List[Endpoint]:
    """Aggregate captured calls into endpoints, in capture order."""
    aggregator = EndpointAggregator()

    for call in calls:
        path = url_path(call.url)
        if is_excluded(call, path):
            stats.skipped_static += 1
            logger.debug("Skipping static/non-XHR request %s %s", call.method, path)
            if progress:
                progress("skipping")
            continue

        obs = build_observation(call, base_path, rules)
        aggregator.observe(obs)

        if obs.request_body is not None:
            stats.request_examples += 1
        if obs.response_body is not None:
            stats.response_examples += 1
        if progress:
            progress(f"{obs.method} {obs.template}")

    stats.unique_endpoints = len(aggregator)
    return aggregator.endpoints


def convert_har(har: Dict[str, Any], base_path: str,
                rules: IdentifierRules = DEFAULT_RULES,
                progress: Optional[ProgressCallback] = None
                ) -> Tuple[List[Endpoint], ConversionStats]:
    """Run the whole aggregation over a parsed HAR document."""
    stats = ConversionStats()
    calls = select_candidates(har, base_path, stats)
    endpoints = convert_calls(calls, base_path, stats, rules=rules, progress=progress)
    logger.info("%d entries, %d candidates, %d unique endpoints",
                stats.total_entries, stats.candidates, stats.unique_endpoints)
    return endpoints, stats
