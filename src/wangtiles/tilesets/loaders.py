"""
File loaders for Tiled tilesets.

Reads `.tsx` (XML) and `.tsj`/`.json` (JSON, parsed with orjson) tileset
files. The XML reader converts elements into the same dict layout the JSON
format uses, so both feed `Tileset.from_dict`.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, List

import orjson
from PIL import Image, UnidentifiedImageError

from .errors import TilesetFormatError
from .models import Tileset

XML_SUFFIXES = {".tsx", ".xml"}
JSON_SUFFIXES = {".tsj", ".json"}
TILESET_SUFFIXES = XML_SUFFIXES | JSON_SUFFIXES
NON_RECT_SHAPES = {"ellipse", "point", "polygon", "polyline", "text"}


class TilesetFileLoader:
    """Loads and parses Tiled tileset files."""

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def load(self, path: str | Path) -> Tileset:
        """Read a tileset file and build a `Tileset`.

        Args:
            path: Path to a .tsx, .tsj or .json file

        Returns:
            Parsed Tileset (not yet validated)

        Raises:
            TilesetFormatError: If the file is missing, unreadable or malformed
        """
        file_path = Path(path)
        if not file_path.exists():
            raise TilesetFormatError(f"Tileset file not found: {file_path}")

        suffix = file_path.suffix.lower()
        if suffix in XML_SUFFIXES:
            data = self.read_tsx(file_path)
        elif suffix in JSON_SUFFIXES:
            data = self.read_json(file_path)
        else:
            raise TilesetFormatError(f"Unsupported tileset format: {file_path.name}")

        try:
            tileset = Tileset.from_dict(data, source_path=str(file_path))
        except (KeyError, ValueError, TypeError) as e:
            raise TilesetFormatError(f"Malformed tileset {file_path}: {e}") from e

        self.logger.debug(
            f"Loaded tileset '{tileset.name}' from {file_path.name}: "
            f"{tileset.tile_count} tiles, {len(tileset.wang_sets)} wang sets, "
            f"{len(tileset.animations)} animations"
        )
        return tileset

    @staticmethod
    def read_json(json_file: Path) -> dict[str, Any]:
        """Read a Tiled JSON tileset into a dict."""
        try:
            with json_file.open("rb") as f:  # orjson works with bytes
                data = orjson.loads(f.read())
        except (OSError, orjson.JSONDecodeError) as e:
            raise TilesetFormatError(f"Error reading JSON tileset {json_file}: {e}") from e

        if not isinstance(data, dict):
            raise TilesetFormatError(f"Tileset root must be an object: {json_file}")
        return data  # type: ignore[return-value]

    def read_tsx(self, tsx_file: Path) -> dict[str, Any]:
        """Read a Tiled XML tileset into the JSON dict layout."""
        try:
            root = ET.parse(tsx_file).getroot()
        except (OSError, ET.ParseError) as e:
            raise TilesetFormatError(f"Error reading TSX tileset {tsx_file}: {e}") from e

        if root.tag != "tileset":
            raise TilesetFormatError(f"Root element must be <tileset>, got <{root.tag}>")

        try:
            data: dict[str, Any] = {
                "name": root.get("name", tsx_file.stem),
                "tilewidth": int(root.get("tilewidth", 32)),
                "tileheight": int(root.get("tileheight", 32)),
                "tilecount": int(root.get("tilecount", 0)),
                "columns": int(root.get("columns", 0)),
            }

            image = root.find("image")
            if image is not None:
                data["image"] = image.get("source", "")
                data["imagewidth"] = int(image.get("width", 0))
                data["imageheight"] = int(image.get("height", 0))

            data["tiles"] = [self._tile_to_dict(tile) for tile in root.findall("tile")]
            data["wangsets"] = [
                self._wangset_to_dict(wangset) for wangset in root.findall("wangsets/wangset")
            ]
        except (ValueError, TypeError) as e:
            # Non-numeric attribute somewhere in the file
            raise TilesetFormatError(f"Malformed TSX tileset {tsx_file}: {e}") from e
        return data

    def _tile_to_dict(self, tile: ET.Element) -> dict[str, Any]:
        """Convert a <tile> element into a JSON tile entry."""
        entry: dict[str, Any] = {"id": int(tile.get("id", 0))}

        tile_class = tile.get("class", tile.get("type"))
        if tile_class:
            entry["type"] = tile_class
        if tile.get("probability") is not None:
            entry["probability"] = float(tile.get("probability", 1.0))

        properties = tile.findall("properties/property")
        if properties:
            entry["properties"] = [
                {"name": prop.get("name", ""), "value": prop.get("value", prop.text or "")}
                for prop in properties
            ]

        animation = tile.find("animation")
        if animation is not None:
            entry["animation"] = [
                {"tileid": int(frame.get("tileid", 0)), "duration": int(frame.get("duration", 0))}
                for frame in animation.findall("frame")
            ]

        objectgroup = tile.find("objectgroup")
        if objectgroup is not None:
            objects: List[dict[str, Any]] = []
            for obj in objectgroup.findall("object"):
                shaped = any(child.tag in NON_RECT_SHAPES for child in obj)
                if shaped or obj.get("width") is None:
                    # ellipse, polygon, point: not an axis-aligned rectangle
                    self.logger.debug(
                        f"Skipping non-rectangle collision object {obj.get('id')} on tile {entry['id']}"
                    )
                    continue
                objects.append({
                    "id": int(obj.get("id", 0)),
                    "name": obj.get("name", ""),
                    "x": float(obj.get("x", 0)),
                    "y": float(obj.get("y", 0)),
                    "width": float(obj.get("width", 0)),
                    "height": float(obj.get("height", 0)),
                })
            entry["objectgroup"] = {"objects": objects}

        return entry

    @staticmethod
    def _wangset_to_dict(wangset: ET.Element) -> dict[str, Any]:
        """Convert a <wangset> element into a JSON wangset entry."""
        return {
            "name": wangset.get("name", "unknown"),
            "type": wangset.get("type", "corner"),
            "tile": int(wangset.get("tile", -1)),
            "colors": [
                {
                    "name": color.get("name", ""),
                    "color": color.get("color", "#000000"),
                    "tile": int(color.get("tile", -1)),
                    "probability": float(color.get("probability", 1.0)),
                }
                for color in wangset.findall("wangcolor")
            ],
            "wangtiles": [
                {"tileid": int(wt.get("tileid", 0)), "wangid": wt.get("wangid", "")}
                for wt in wangset.findall("wangtile")
            ],
        }

    def inspect_image(self, tileset: Tileset) -> List[str]:
        """Cross-check the sprite sheet against the declared grid.

        Only the image header is read; pixels are never decoded. A missing
        image is not an error since rendering belongs to another layer.

        Returns:
            Warning messages (empty when consistent or image absent)
        """
        warnings: List[str] = []
        if not tileset.image.source or not tileset.source_path:
            return warnings

        image_path = Path(tileset.source_path).parent / tileset.image.source
        if not image_path.exists():
            self.logger.debug(f"Image file not found, skipping check: {image_path}")
            return warnings

        try:
            with Image.open(image_path) as img:
                width, height = img.size
        except (OSError, UnidentifiedImageError) as e:
            warnings.append(f"Could not read tileset image {image_path}: {e}")
            return warnings

        if tileset.image.width and (width, height) != (tileset.image.width, tileset.image.height):
            warnings.append(
                f"Image {image_path.name} is {width}x{height}, "
                f"tileset declares {tileset.image.width}x{tileset.image.height}"
            )

        if tileset.tile_width > 0 and tileset.tile_height > 0:
            cols = width // tileset.tile_width
            rows = height // tileset.tile_height
            if tileset.columns and cols != tileset.columns:
                warnings.append(
                    f"Image {image_path.name} fits {cols} columns, tileset declares {tileset.columns}"
                )
            if cols * rows < tileset.tile_count:
                warnings.append(
                    f"Image {image_path.name} holds {cols * rows} tiles, "
                    f"tileset declares {tileset.tile_count}"
                )
        return warnings
