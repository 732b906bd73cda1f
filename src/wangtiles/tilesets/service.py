"""
High-level service for working with Wang tilesets.

Provides orchestration and public API for loading, validating and querying
tilesets. Responsibilities:
    * Load .tsx/.tsj tileset files (single files or whole directories)
    * Validate bounds and completeness before any query is served
    * Build one TerrainResolver and one AnimationClock per tileset
    * Forward collision rectangles keyed by tile id
"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Tuple

from wangtiles.animation.clock import AnimationClock, GlobalClock
from wangtiles.terrain.grid import ChunkResolver
from wangtiles.terrain.resolver import TerrainResolver

from .errors import TilesetError
from .loaders import TILESET_SUFFIXES, TilesetFileLoader
from .managers import TilesetManager, TilesManager
from .models import CollisionRect, Tileset
from .validation import TilesetValidator

if TYPE_CHECKING:
    from ..settings import AppSettings


class TilesetService:
    """Facade for tileset operations.

    Tables are immutable once `load` returns, so resolvers and clocks can be
    shared freely between threads.
    """

    def __init__(
        self,
        settings: Optional["AppSettings"] = None,
        clock: Optional[GlobalClock] = None,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings

        start_paused = settings.animation.start_paused if settings else False
        self.clock = clock or GlobalClock(start_paused=start_paused)

        self.loader = TilesetFileLoader()
        self.tilesets = TilesetManager()
        self.tiles = TilesManager()
        self._resolvers: Dict[str, TerrainResolver] = {}
        self._clocks: Dict[str, AnimationClock] = {}

    @property
    def require_complete_wang_sets(self) -> bool:
        return self.settings.resolver.require_complete_wang_sets if self.settings else True

    @property
    def random_seed(self) -> int:
        return self.settings.resolver.random_seed if self.settings else 0

    @property
    def parallel_workers(self) -> int:
        return self.settings.resolver.parallel_workers if self.settings else 1

    # === LOADING ===

    def load(self, path: str | Path) -> Tileset:
        """Load, validate and register a tileset file.

        Args:
            path: Path to a .tsx, .tsj or .json tileset

        Returns:
            Registered Tileset

        Raises:
            TilesetError: Format, bounds or completeness problem (the first
                one found; all are logged)
        """
        tileset = self._read_and_validate(Path(path))
        self._register(tileset)
        if self.settings:
            self.settings.paths.add_recent_tileset(Path(path).resolve())
        return tileset

    def load_directory(self, directory: Optional[str | Path] = None) -> list[Tileset]:
        """Load every tileset file in a directory in parallel.

        Files are parsed and validated concurrently, then registered
        sequentially in name order. Broken files are logged and skipped.

        Args:
            directory: Directory to scan; defaults to the configured
                tilesets path

        Returns:
            Tilesets that loaded successfully
        """
        if directory is None:
            directory = self.settings.paths.tilesets_path if self.settings else None
        if directory is None:
            raise ValueError("No tilesets directory given or configured")

        ts_dir = Path(directory)
        if not ts_dir.is_dir():
            raise TilesetError(f"Tilesets path is invalid: {ts_dir}")

        files = sorted(
            f for f in ts_dir.iterdir() if f.is_file() and f.suffix.lower() in TILESET_SUFFIXES
        )
        self.logger.debug(f"total {len(files)} tileset files found in {ts_dir}")

        loaded: list[Tuple[Path, Tileset]] = []
        with ThreadPoolExecutor(max_workers=self.parallel_workers) as executor:
            future_to_file = {
                executor.submit(self._read_and_validate, ts_file): ts_file for ts_file in files
            }
            for future in as_completed(future_to_file):
                ts_file = future_to_file[future]
                try:
                    loaded.append((ts_file, future.result()))
                except TilesetError as e:
                    self.logger.error(f"Failed to load tileset {ts_file.name}: {e}")

        loaded.sort(key=lambda item: item[0].name)
        for ts_file, tileset in loaded:
            self._register(tileset)
            self.logger.info(f"  tileset: {tileset.name} ({ts_file.name})")
        return [tileset for _, tileset in loaded]

    def _read_and_validate(self, ts_file: Path) -> Tileset:
        tileset = self.loader.load(ts_file)
        for warning in self.loader.inspect_image(tileset):
            self.logger.warning(f"{tileset.name}: {warning}")

        validator = TilesetValidator(self.require_complete_wang_sets)
        validator.validate(tileset).raise_for_errors()
        return tileset

    def _register(self, tileset: Tileset) -> None:
        self.tilesets.add_tileset(tileset)
        self.tiles.add_tiles(tileset)
        self._resolvers[tileset.name] = TerrainResolver(tileset.wang_sets)
        self._clocks[tileset.name] = AnimationClock(tileset.animations, self.clock)
        self.logger.debug(
            f"Registered tileset '{tileset.name}': "
            f"wang sets {self._resolvers[tileset.name].wang_set_names}, "
            f"{len(tileset.animations)} animated tiles"
        )

    # === LOOKUP ===

    def get_available_tilesets(self) -> list[str]:
        """Get list of available tileset names."""
        return self.tilesets.names()

    def get_tileset(self, tileset_name: str) -> Tileset:
        """Get tileset metadata object.

        Raises:
            KeyError: If the tileset was never loaded
        """
        tileset = self.tilesets.get_tileset(tileset_name)
        if not tileset:
            raise KeyError(
                f"Tileset '{tileset_name}' not found. Available: {self.get_available_tilesets()}"
            )
        return tileset

    def resolver(self, tileset_name: str) -> TerrainResolver:
        """Terrain resolver bound to a tileset's Wang sets."""
        self.get_tileset(tileset_name)
        return self._resolvers[tileset_name]

    def animation_clock(self, tileset_name: str) -> AnimationClock:
        """Animation clock holding a tileset's animated tiles."""
        self.get_tileset(tileset_name)
        return self._clocks[tileset_name]

    # === TERRAIN ===

    def resolve(
        self,
        tileset_name: str,
        wang_set_name: str,
        signature: Sequence[int],
        rng: Optional[random.Random] = None,
    ) -> int:
        """Resolve a corner signature to a tile id.

        See `TerrainResolver.resolve`.
        """
        return self.resolver(tileset_name).resolve(wang_set_name, signature, rng)

    def chunk_resolver(
        self,
        tileset_name: str,
        wang_set_name: str,
        missing_tile: Optional[int] = None,
    ) -> ChunkResolver:
        """Chunk resolver using the configured seed and worker count."""
        return ChunkResolver(
            self.resolver(tileset_name),
            wang_set_name,
            seed=self.random_seed,
            workers=self.parallel_workers,
            missing_tile=missing_tile,
        )

    # === ANIMATION ===

    def current_frame(
        self, tileset_name: str, tile_id: int, elapsed_ms: Optional[float] = None
    ) -> int:
        """Tile id to display for `tile_id` (itself when not animated).

        Uses the shared clock's last sample when `elapsed_ms` is None.
        """
        return self.animation_clock(tileset_name).current_frame(tile_id, elapsed_ms)

    # === COLLISION ===

    def collision_shapes(self, tileset_name: str, tile_id: int) -> Tuple[CollisionRect, ...]:
        """Collision rectangles of a resolved tile, forwarded unchanged."""
        self.get_tileset(tileset_name)
        return self.tiles.get_collision_shapes(tileset_name, tile_id)

    def tiles_of_class(self, tileset_name: str, tile_class: str) -> set[int]:
        """Ids of tiles with the given class (e.g. "water")."""
        self.get_tileset(tileset_name)
        return self.tiles.tiles_of_class(tileset_name, tile_class)
