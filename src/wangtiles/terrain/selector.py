"""Weighted selection among interchangeable Wang tile variants.

Weights combine the tile's own probability with the probability of every
material it depicts. The random source is always passed in explicitly so
callers control reproducibility and never share a generator across threads.
"""

import random
from typing import Sequence

from wangtiles.tilesets.models import WangSet, WangTile


def tile_weight(wang_set: WangSet, tile: WangTile) -> float:
    """Selection weight of a tile within its Wang set.

    Args:
        wang_set: Wang set declaring the tile's materials
        tile: Candidate tile

    Returns:
        Tile probability times the probability of each painted corner
    """
    weight = tile.probability
    for corner in tile.signature:
        material = wang_set.material(corner)
        if material is not None:
            weight *= material.probability
    return weight


def select_weighted_tile(
    wang_set: WangSet,
    candidates: Sequence[WangTile],
    rng: random.Random,
) -> WangTile:
    """Pick one candidate with probability proportional to its weight.

    Candidates with non-positive weight are never picked unless every
    candidate is non-positive, in which case the choice is uniform.

    Args:
        wang_set: Wang set the candidates belong to
        candidates: Non-empty list of matching tiles
        rng: Random source for the draw

    Returns:
        Selected WangTile
    """
    if len(candidates) == 1:
        return candidates[0]

    weights = [max(0.0, tile_weight(wang_set, tile)) for tile in candidates]
    total_weight = sum(weights)
    if total_weight <= 0:
        return candidates[rng.randrange(len(candidates))]

    selection = rng.random() * total_weight

    # Find tile by accumulated weight
    accumulated = 0.0
    for tile, weight in zip(candidates, weights):
        accumulated += weight
        if selection < accumulated:
            return tile

    # Float rounding can leave selection == total; take the last weighted tile
    for tile, weight in zip(reversed(candidates), reversed(weights)):
        if weight > 0:
            return tile
    return candidates[-1]


def coordinate_rng(seed: int, wang_set: str, x: int, y: int) -> random.Random:
    """Deterministic generator for one grid coordinate.

    String seeds are hashed with SHA-512 by `random.Random`, so the stream
    is stable across processes (unlike the builtin `hash`).
    """
    return random.Random(f"{seed}:{wang_set}:{x}:{y}")
