"""
Vector similarity and rank fusion.

Brute-force scoring used by the document store for cache lookups and
product retrieval. Every function returns a score where higher means
more similar, whatever the underlying distance function.

Dependencies: math (stdlib)
System role: Similarity math for vector and hybrid search
"""

import math
from collections.abc import Hashable, Sequence
from enum import Enum


class DistanceFunction(str, Enum):
    """Distance functions supported by vector queries."""

    COSINE = "cosine"
    DOT_PRODUCT = "dotproduct"
    EUCLIDEAN = "euclidean"


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Compute cosine similarity between two vectors."""
    if len(vec_a) != len(vec_b):
        return 0.0

    dot_product = sum(a * b for a, b in zip(vec_a, vec_b))
    norm_a = math.sqrt(sum(a * a for a in vec_a))
    norm_b = math.sqrt(sum(b * b for b in vec_b))

    if norm_a == 0 or norm_b == 0:
        return 0.0

    return dot_product / (norm_a * norm_b)


def similarity_score(
    vec_a: Sequence[float],
    vec_b: Sequence[float],
    distance_function: DistanceFunction = DistanceFunction.COSINE,
) -> float:
    """
    Score two vectors with the given distance function.

    Euclidean distance is negated so that a larger score is always
    more similar.

    Args:
        vec_a: First vector
        vec_b: Second vector
        distance_function: Function used to compare the vectors

    Returns:
        float: Similarity score (higher = more similar)
    """
    if distance_function == DistanceFunction.COSINE:
        return cosine_similarity(vec_a, vec_b)
    if len(vec_a) != len(vec_b):
        return float("-inf")
    if distance_function == DistanceFunction.DOT_PRODUCT:
        return sum(a * b for a, b in zip(vec_a, vec_b))
    return -math.dist(vec_a, vec_b)


def reciprocal_rank_fusion(
    rankings: Sequence[Sequence[Hashable]],
    k: int = 60,
) -> list[Hashable]:
    """
    Combine several ranked id lists into one ordering.

    Each id scores sum(1 / (k + rank)) over the rankings it appears in,
    with rank starting at 1. Ties keep first-seen order.

    Args:
        rankings: Ranked lists of ids, best first
        k: Smoothing constant (60 is the conventional value)

    Returns:
        list: Ids ordered by fused score, best first
    """
    scores: dict[Hashable, float] = {}
    for ranking in rankings:
        for rank, item_id in enumerate(ranking, start=1):
            scores[item_id] = scores.get(item_id, 0.0) + 1.0 / (k + rank)

    return sorted(scores, key=lambda item_id: scores[item_id], reverse=True)
