"""Corner-based Wang tile resolution.

Maps the four corner materials around a tile to the tile id whose image
depicts that blend. Unset corners are wildcards. When several tiles depict
the same blend they are treated as variants and picked by weight.
"""

import logging
import random
import threading
from typing import Dict, Mapping, Sequence, Tuple

from wangtiles.tilesets.errors import InvalidWangSet, NoMatchingTile, UnknownMaterial
from wangtiles.tilesets.models import UNSET, CornerSignature, WangKind, WangSet, WangTile

from .selector import select_weighted_tile


class TerrainResolver:
    """Resolves corner signatures against the Wang sets of one tileset.

    Holds read-only tables only; the candidate cache is filled lazily and
    never affects which tile a given random source picks.
    """

    def __init__(self, wang_sets: Mapping[str, WangSet]):
        """Initialize the resolver.

        Args:
            wang_sets: Wang sets by name; non-corner sets are ignored
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._wang_sets: Dict[str, WangSet] = {
            name: wang_set
            for name, wang_set in wang_sets.items()
            if wang_set.kind is WangKind.CORNER
        }
        # (wang_set, query) -> candidates, for queries containing wildcards
        self._candidate_cache: Dict[Tuple[str, CornerSignature], Tuple[WangTile, ...]] = {}
        self._lock = threading.Lock()

    @property
    def wang_set_names(self) -> list[str]:
        return list(self._wang_sets.keys())

    def get_wang_set(self, name: str) -> WangSet:
        """Return a Wang set by name.

        Raises:
            InvalidWangSet: If no corner Wang set has this name
        """
        wang_set = self._wang_sets.get(name)
        if wang_set is None:
            raise InvalidWangSet(name, self.wang_set_names)
        return wang_set

    def candidates(
        self, wang_set_name: str, signature: Sequence[int]
    ) -> Tuple[WangTile, ...]:
        """Return every tile satisfying a query, most specific tier only.

        Tiles must equal the query on each painted corner. If some of them
        also carry exactly the query's unset corners, only those are kept;
        this is what makes the all-wildcard query resolve to the blank tile.

        Args:
            wang_set_name: Name of the Wang set to search
            signature: (ne, se, sw, nw) material indices, UNSET as wildcard

        Returns:
            Matching tiles ordered by tile id (possibly empty)
        """
        wang_set = self.get_wang_set(wang_set_name)
        query = CornerSignature(*signature)
        self._check_materials(wang_set, query)

        exact = wang_set.tiles_with_signature(query)
        if exact or not query.has_wildcards:
            return exact

        key = (wang_set.name, query)
        with self._lock:
            cached = self._candidate_cache.get(key)
        if cached is not None:
            return cached

        found = tuple(
            tile
            for tile in sorted(wang_set.tiles.values(), key=lambda t: t.tile_id)
            if tile.signature.matches(query)
        )
        with self._lock:
            self._candidate_cache[key] = found
        return found

    def resolve_tile(
        self,
        wang_set_name: str,
        signature: Sequence[int],
        rng: random.Random | None = None,
    ) -> WangTile:
        """Resolve a query to a single WangTile.

        Args:
            wang_set_name: Name of the Wang set
            signature: (ne, se, sw, nw) material indices, UNSET as wildcard
            rng: Random source for variant selection; a fresh unseeded
                generator is used when None

        Returns:
            Selected WangTile

        Raises:
            InvalidWangSet: Unknown Wang set
            UnknownMaterial: Corner index not declared by the Wang set
            NoMatchingTile: No tile depicts the requested blend
        """
        found = self.candidates(wang_set_name, signature)
        if not found:
            error = NoMatchingTile(wang_set_name, CornerSignature(*signature))
            self.logger.warning(str(error))
            raise error
        if len(found) == 1:
            return found[0]
        return select_weighted_tile(
            self.get_wang_set(wang_set_name), found, rng or random.Random()
        )

    def resolve(
        self,
        wang_set_name: str,
        signature: Sequence[int],
        rng: random.Random | None = None,
    ) -> int:
        """Resolve a query to a tile id. See `resolve_tile`."""
        return self.resolve_tile(wang_set_name, signature, rng).tile_id

    def clear_cache(self) -> None:
        """Drop memoised wildcard candidates."""
        with self._lock:
            self._candidate_cache.clear()

    @staticmethod
    def _check_materials(wang_set: WangSet, query: CornerSignature) -> None:
        declared = len(wang_set.materials)
        for corner in query:
            if corner != UNSET and not 1 <= corner <= declared:
                raise UnknownMaterial(wang_set.name, corner, declared)
