"""Matching engine: plausibility, geometry, distance, tiers and aggregation."""
from .aggregator import aggregate, aggregate_faces, dedupe_by_identity
from .distance import best_distance_to_identity, euclidean_distance
from .geometry import (
    detection_scale_for,
    display_scale_for,
    padded_crop_box,
    to_detection_space,
    to_display_space,
    to_source_space,
)
from .matcher import FaceMatcher, classify, distance_to_confidence, ensure_pool_ready, match, rank_candidates
from .plausibility import filter_observations, is_plausible
from .selection import active_identities, is_active, pool_sample_count, resync

__all__ = [
    "FaceMatcher",
    "active_identities",
    "aggregate",
    "aggregate_faces",
    "best_distance_to_identity",
    "classify",
    "dedupe_by_identity",
    "detection_scale_for",
    "display_scale_for",
    "distance_to_confidence",
    "ensure_pool_ready",
    "euclidean_distance",
    "filter_observations",
    "is_active",
    "is_plausible",
    "match",
    "padded_crop_box",
    "pool_sample_count",
    "rank_candidates",
    "resync",
    "to_detection_space",
    "to_display_space",
    "to_source_space",
]
