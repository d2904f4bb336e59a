"""
Hex Grid Layout v1

A single-file Python library and CLI tool that computes the layout of a
responsive grid of pointy-top hexagonal tiles. Rows alternate between a
maximum and a minimum tile count and interlock without gaps; every tile's
width, height, vertical overlap and horizontal offset is derived from its
1-based index alone, so any tile can be laid out in isolation. The CLI turns
the computed layouts into a CSS stylesheet.

Usage:
    python hexlayout.py --debug
    python hexlayout.py --max_in_row 5 --breakpoint 600:7 --breakpoint 1200:9:8
    python hexlayout.py --tiles 24 --viewport 800 --debug
    python hexlayout.py --import_settings settings.json
    python hexlayout.py --export_settings settings.json
"""

import argparse
import enum
import json
import math
import operator
import os
import re
import sys
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from PIL import ImageColor


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
class HexLayoutError(ValueError):
    """Base class for all layout errors raised by this module."""


class ConfigurationError(HexLayoutError):
    """Raised when a HexSpec or breakpoint definition is invalid."""


class InputError(HexLayoutError):
    """Raised when a tile index is not a positive integer."""


# ---------------------------------------------------------------------------
# HexagonGeometry
# ---------------------------------------------------------------------------
class HexagonGeometry:
    """Vertical measurements of a pointy-top regular hexagon.

    The hexagon has flat left/right sides and points at the top and bottom.
    Its width is the distance between the two flat sides and its height the
    distance between the two points. All methods are pure and accept either
    an absolute length or a fraction of the grid width.
    """

    @staticmethod
    def height(width: float) -> float:
        """Return the point-to-point height for a side-to-side width.

        Args:
            width: Distance between the two vertical sides.

        Returns:
            width * 2 / sqrt(3).
        """
        return width * 2.0 / math.sqrt(3)

    @staticmethod
    def half_height(width: float) -> float:
        """Return half of the hexagon height."""
        return HexagonGeometry.height(width) / 2.0

    @staticmethod
    def quarter_height(width: float) -> float:
        """Return a quarter of the hexagon height.

        This is the vertical size of one pointy cap, and therefore the
        amount by which consecutive rows overlap when they interlock.
        """
        return HexagonGeometry.height(width) / 4.0


# ---------------------------------------------------------------------------
# HexSpec
# ---------------------------------------------------------------------------
def _as_count(value: Any) -> Optional[int]:
    """Return value as a plain int if it is integer-like (bools excluded), else None."""
    if isinstance(value, bool):
        return None
    try:
        return operator.index(value)
    except TypeError:
        return None


@dataclass(frozen=True)
class HexSpec:
    """Tiles-per-row configuration for alternating max/min rows.

    A super-row (one cycle) holds one row of ``max_in_row`` tiles followed by
    one row of ``min_in_row`` tiles.

    Attributes:
        max_in_row: Tile count of the longer rows (>= 1).
        min_in_row: Tile count of the shorter rows (0 <= min <= max).
            Defaults to ``max_in_row - 1``.

    Raises:
        ConfigurationError: On construction with invalid counts.
    """

    max_in_row: int
    min_in_row: Optional[int] = None

    def __post_init__(self) -> None:
        max_in_row = _as_count(self.max_in_row)
        if max_in_row is None:
            raise ConfigurationError(
                f"max_in_row must be an integer, got {self.max_in_row!r}")
        object.__setattr__(self, "max_in_row", max_in_row)
        if self.max_in_row < 1:
            raise ConfigurationError(
                f"max_in_row must be >= 1, got {self.max_in_row}")
        if self.min_in_row is None:
            object.__setattr__(self, "min_in_row", self.max_in_row - 1)
        min_in_row = _as_count(self.min_in_row)
        if min_in_row is None:
            raise ConfigurationError(
                f"min_in_row must be an integer, got {self.min_in_row!r}")
        object.__setattr__(self, "min_in_row", min_in_row)
        if self.min_in_row < 0:
            raise ConfigurationError(
                f"min_in_row must be >= 0, got {self.min_in_row}")
        if self.min_in_row > self.max_in_row:
            raise ConfigurationError(
                f"min_in_row ({self.min_in_row}) must not exceed "
                f"max_in_row ({self.max_in_row})")

    @property
    def cycle(self) -> int:
        """Number of tiles in one max-row plus one min-row."""
        return self.max_in_row + self.min_in_row

    @property
    def width_fraction(self) -> float:
        """Width of every tile as a fraction of the grid width."""
        return 1.0 / self.max_in_row


# ---------------------------------------------------------------------------
# TileLayout
# ---------------------------------------------------------------------------
class RowKind(enum.Enum):
    """Which of the two alternating rows a tile sits in."""

    MAX = "max"
    MIN = "min"


@dataclass(frozen=True)
class TileLayout:
    """Computed placement of one tile. All lengths are grid-width fractions.

    Attributes:
        index: 1-based tile index.
        row_kind: MAX or MIN row.
        is_first_in_row: True for the first tile of its row.
        is_first_row_overall: True for the leading tiles that have no row
            above them to interlock with.
        width_fraction: Tile width (always 1 / max_in_row).
        vertical_offset: Top margin; negative pulls the tile up.
        horizontal_offset: Left margin; always explicit, never inherited.
    """

    index: int
    row_kind: RowKind
    is_first_in_row: bool
    is_first_row_overall: bool
    width_fraction: float
    vertical_offset: float
    horizontal_offset: float

    @property
    def height_fraction(self) -> float:
        """Box height needed to hold a regular hexagon of this width."""
        return HexagonGeometry.height(self.width_fraction)


# ---------------------------------------------------------------------------
# RowAssigner
# ---------------------------------------------------------------------------
class RowAssigner:
    """Assigns rows and offsets to tiles of an alternating hex grid.

    Assignment only looks at the tile index and the active HexSpec, never at
    neighbouring tiles or the total tile count, so it works for an unbounded
    stream of tiles and for any single tile in isolation.

    Attributes:
        spec: The HexSpec this assigner lays tiles out against.
    """

    def __init__(self, spec: HexSpec) -> None:
        """Initialise the assigner for a validated HexSpec.

        Args:
            spec: The active row configuration.
        """
        self._spec: HexSpec = spec

    @property
    def spec(self) -> HexSpec:
        """Return the HexSpec in use."""
        return self._spec

    def position_in_cycle(self, index: int) -> int:
        """Return the 1-based position of a tile within its super-row.

        Args:
            index: 1-based tile index.

        Returns:
            A value in [1, cycle].

        Raises:
            InputError: If index is not a positive integer.
        """
        n = _as_count(index)
        if n is None or n < 1:
            raise InputError(f"Tile index must be a positive integer, got {index!r}")
        return (n - 1) % self._spec.cycle + 1

    def assign(self, index: int) -> TileLayout:
        """Compute the layout of a single tile.

        Args:
            index: 1-based tile index.

        Returns:
            The tile's TileLayout.

        Raises:
            InputError: If index is not a positive integer.
        """
        spec = self._spec
        pos = self.position_in_cycle(index)
        index = operator.index(index)

        row_kind = RowKind.MAX if pos <= spec.max_in_row else RowKind.MIN
        is_first_in_row = pos == 1 or pos == spec.max_in_row + 1
        is_first_row_overall = index <= spec.min_in_row

        width = spec.width_fraction
        vertical = 0.0 if is_first_row_overall else -HexagonGeometry.quarter_height(width)
        horizontal = width / 2.0 if is_first_in_row and row_kind is RowKind.MIN else 0.0

        return TileLayout(
            index=index,
            row_kind=row_kind,
            is_first_in_row=is_first_in_row,
            is_first_row_overall=is_first_row_overall,
            width_fraction=width,
            vertical_offset=vertical,
            horizontal_offset=horizontal,
        )

    def assign_range(self, start: int, stop: int) -> List[TileLayout]:
        """Compute layouts for tile indices in [start, stop)."""
        return [self.assign(i) for i in range(start, stop)]


def compute_layout(index: int, spec: HexSpec) -> TileLayout:
    """Compute the layout of tile ``index`` under ``spec``.

    Args:
        index: 1-based tile index.
        spec: The active HexSpec.

    Returns:
        The tile's TileLayout.

    Raises:
        InputError: If index is not a positive integer.
    """
    return RowAssigner(spec).assign(index)


# ---------------------------------------------------------------------------
# Breakpoints
# ---------------------------------------------------------------------------
Predicate = Callable[[Any], bool]
Breakpoint = Tuple[Predicate, HexSpec]


class MinWidth:
    """Predicate matching viewport widths at or above a threshold.

    Mirrors a ``min-width`` media query and can render itself as one.

    Attributes:
        px: Threshold in pixels.
    """

    def __init__(self, px: float) -> None:
        if isinstance(px, bool) or not isinstance(px, (int, float)) or px < 0:
            raise ConfigurationError(f"Breakpoint width must be a number >= 0, got {px!r}")
        self.px = px

    def __call__(self, viewport: float) -> bool:
        return viewport >= self.px

    def media_query(self) -> str:
        """Return the equivalent CSS media query condition."""
        return f"(min-width: {_format_number(self.px)}px)"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MinWidth) and other.px == self.px

    def __hash__(self) -> int:
        return hash(("MinWidth", self.px))

    def __repr__(self) -> str:
        return f"MinWidth({self.px!r})"


def min_width(px: float) -> MinWidth:
    """Build a predicate that matches viewport widths >= px."""
    return MinWidth(px)


def resolve_spec(context: Any, breakpoints: Sequence[Breakpoint], default: HexSpec) -> HexSpec:
    """Select the HexSpec active for a rendering context.

    Predicates are evaluated in listed order and the last match wins, the
    same way later style rules override earlier ones. Nothing is memoised;
    every call re-evaluates every predicate.

    Args:
        context: Rendering context passed to each predicate (e.g. viewport
            width in pixels).
        breakpoints: Ordered (predicate, HexSpec) pairs.
        default: HexSpec used when no predicate matches.

    Returns:
        The active HexSpec.
    """
    active = default
    for predicate, spec in breakpoints:
        if predicate(context):
            active = spec
    return active


class BreakpointParser:
    """Parses ``MIN_WIDTH:MAX[:MIN]`` breakpoint strings.

    Examples: ``600:4`` (min-width 600px, 4/3 tiles per row) and
    ``1200:6:6`` (min-width 1200px, 6 tiles in every row).
    """

    _PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*:\s*(\d+)\s*(?::\s*(\d+)\s*)?$")

    def parse(self, text: str) -> Breakpoint:
        """Parse one breakpoint definition.

        Args:
            text: Definition string.

        Returns:
            A (MinWidth predicate, HexSpec) pair.

        Raises:
            ConfigurationError: If the text is malformed or the counts are
                invalid.
        """
        m = self._PATTERN.match(text) if isinstance(text, str) else None
        if not m:
            raise ConfigurationError(
                f"Invalid breakpoint '{text}': expected MIN_WIDTH:MAX[:MIN]")
        width = float(m.group(1))
        if width.is_integer():
            width = int(width)
        max_in_row = int(m.group(2))
        min_in_row = int(m.group(3)) if m.group(3) is not None else None
        return min_width(width), HexSpec(max_in_row, min_in_row)

    def parse_all(self, texts: Sequence[str]) -> List[Breakpoint]:
        """Parse a list of definitions, keeping their order."""
        return [self.parse(t) for t in texts]


# ---------------------------------------------------------------------------
# HexGrid
# ---------------------------------------------------------------------------
class HexGrid:
    """A responsive grid: a default HexSpec plus ordered breakpoints.

    A relayout resolves the active spec exactly once and lays every tile out
    against that snapshot, so a breakpoint switch is seen by all tiles at
    the same time.

    Attributes:
        default: HexSpec used when no breakpoint matches.
        breakpoints: Ordered (predicate, HexSpec) pairs.
    """

    def __init__(self, default: HexSpec, breakpoints: Sequence[Breakpoint] = ()) -> None:
        """Initialise the grid.

        Args:
            default: Fallback HexSpec.
            breakpoints: Ordered (predicate, HexSpec) pairs; later entries
                override earlier ones.
        """
        self._default: HexSpec = default
        self._breakpoints: Tuple[Breakpoint, ...] = tuple(breakpoints)

    @property
    def default(self) -> HexSpec:
        """Return the fallback HexSpec."""
        return self._default

    @property
    def breakpoints(self) -> Tuple[Breakpoint, ...]:
        """Return the ordered breakpoints."""
        return self._breakpoints

    def spec_for(self, context: Any) -> HexSpec:
        """Return the HexSpec active for a context."""
        return resolve_spec(context, self._breakpoints, self._default)

    def relayout(self, count: int, context: Any) -> List[TileLayout]:
        """Lay out tiles 1..count for a context.

        Args:
            count: Number of tiles (>= 0).
            context: Rendering context (e.g. viewport width).

        Returns:
            One TileLayout per tile, in index order.

        Raises:
            InputError: If count is negative or not an integer.
        """
        n = _as_count(count)
        if n is None or n < 0:
            raise InputError(f"Tile count must be a non-negative integer, got {count!r}")
        assigner = RowAssigner(self.spec_for(context))
        return assigner.assign_range(1, n + 1)


# ---------------------------------------------------------------------------
# ColorParser
# ---------------------------------------------------------------------------
class ColorParser:
    """Reads tile fill colours: CSS names, '#rgb'/'#rrggbb' or 'r,g,b'."""

    def parse(self, color_str: str) -> Tuple[int, int, int]:
        """Return the (R, G, B) value of a colour string; ValueError if unreadable."""
        if not isinstance(color_str, str):
            raise ValueError(f"Colour must be a string, got {color_str!r}")
        s = color_str.strip()
        if "," in s:
            return self._parse_rgb_tuple(s)
        try:
            r, g, b = ImageColor.getrgb(s)[:3]
        except ValueError:
            raise ValueError(f"Invalid colour: '{color_str}'")
        return (r, g, b)

    def to_hex(self, rgb: Tuple[int, int, int]) -> str:
        """Format an (R, G, B) tuple as a lowercase '#rrggbb' string."""
        return "#{:02x}{:02x}{:02x}".format(*rgb)

    def _parse_rgb_tuple(self, s: str) -> Tuple[int, int, int]:
        try:
            channels = [int(p) for p in s.split(",")]
        except ValueError:
            raise ValueError(f"Invalid colour '{s}': channels must be integers")
        if len(channels) != 3 or not all(0 <= c <= 255 for c in channels):
            raise ValueError(f"Invalid colour '{s}': expected three channels in [0, 255]")
        return (channels[0], channels[1], channels[2])


# ---------------------------------------------------------------------------
# StylesheetEmitter
# ---------------------------------------------------------------------------
def _format_number(value: float) -> str:
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _percent(fraction: float) -> str:
    text = _format_number(fraction * 100.0)
    return "0" if text == "0" else text + "%"


class StylesheetEmitter:
    """Translates tile layouts into CSS rules.

    Every tile gets explicit ``margin-top`` and ``margin-left`` values. The
    default spec is emitted first and each breakpoint follows in its own
    ``@media`` block, so the cascade reproduces last-match-wins resolution.
    """

    # Pointy-top hexagon with vertical sides, in box percentages.
    _CLIP_PATH: str = "polygon(50% 0%, 100% 25%, 100% 75%, 50% 100%, 0% 75%, 0% 25%)"
    _INDENT: str = "  "

    def __init__(
        self,
        selector: str = ".hex-grid",
        item_selector: str = ".hex-item",
        color_fill: Tuple[int, int, int] = (128, 128, 128),
    ) -> None:
        """Initialise the emitter.

        Args:
            selector: Selector of the grid container.
            item_selector: Selector of a tile inside the container.
            color_fill: Tile background colour as (R, G, B).
        """
        self._selector = selector
        self._item_selector = item_selector
        self._color_fill = color_fill

    def emit(self, grid: HexGrid, tiles: int = 0) -> Tuple[str, int]:
        """Emit a full stylesheet for a responsive grid.

        Args:
            grid: The grid whose default spec and breakpoints to emit.
            tiles: Tile count for one rule per tile, or 0 for periodic
                ``nth-of-type`` rules that cover any number of tiles.

        Returns:
            A tuple of (stylesheet text, number of rules written).

        Raises:
            ConfigurationError: If a breakpoint predicate cannot be written
                as a media query.
        """
        blocks: List[List[str]] = [self._container_rules(), self._spec_rules(grid.default, tiles)]
        for predicate, spec in grid.breakpoints:
            media_query = getattr(predicate, "media_query", None)
            if media_query is None:
                raise ConfigurationError(
                    f"Breakpoint predicate {predicate!r} has no media query form")
            inner = self._spec_rules(spec, tiles)
            blocks.append(
                [f"@media {media_query()} {{"]
                + [self._INDENT + line if line else line for line in inner]
                + ["}"]
            )

        text = "\n\n".join("\n".join(block) for block in blocks) + "\n"
        rule_count = text.count("{") - len(grid.breakpoints)
        return text, rule_count

    def _container_rules(self) -> List[str]:
        item = self._item
        return self._rule(self._selector, ["overflow: hidden"]) + [""] + self._rule(item, [
            "float: left",
            "position: relative",
            "box-sizing: border-box",
            f"background-color: {ColorParser().to_hex(self._color_fill)}",
            f"clip-path: {self._CLIP_PATH}",
        ])

    def _spec_rules(self, spec: HexSpec, tiles: int) -> List[str]:
        assigner = RowAssigner(spec)
        lines = self._rule(self._item, [
            f"width: {_percent(spec.width_fraction)}",
            f"padding-bottom: {_percent(HexagonGeometry.height(spec.width_fraction))}",
            "height: 0",
        ])

        if tiles > 0:
            for layout in assigner.assign_range(1, tiles + 1):
                lines += [""] + self._tile_rule(f"{self._item}:nth-of-type({layout.index})", layout)
            return lines

        # Second-cycle layouts are clear of the first-row special case
        cycle = spec.cycle
        for layout in assigner.assign_range(cycle + 1, 2 * cycle + 1):
            pos = layout.index - cycle
            lines += [""] + self._tile_rule(f"{self._item}:nth-of-type({cycle}n+{pos})", layout)
        if spec.min_in_row > 0:
            lines += [""] + self._rule(
                f"{self._item}:nth-of-type(-n+{spec.min_in_row})", ["margin-top: 0"])
        return lines

    def _tile_rule(self, selector: str, layout: TileLayout) -> List[str]:
        return self._rule(selector, [
            f"margin-top: {_percent(layout.vertical_offset)}",
            f"margin-left: {_percent(layout.horizontal_offset)}",
        ])

    def _rule(self, selector: str, declarations: List[str]) -> List[str]:
        return [f"{selector} {{"] + [f"{self._INDENT}{d};" for d in declarations] + ["}"]

    @property
    def _item(self) -> str:
        return f"{self._selector} > {self._item_selector}"


# ---------------------------------------------------------------------------
# SettingsManager
# ---------------------------------------------------------------------------
class SettingsManager:
    """JSON import/export of parameter sets with CLI-precedence logic.

    JSON overrides argparse defaults; explicit CLI args override JSON.
    """

    # Keys that are persisted to JSON.
    _PERSISTED_KEYS: List[str] = [
        "tiles", "max_in_row", "min_in_row", "breakpoints", "viewport",
        "color_fill", "selector", "item_selector", "file", "debug",
    ]

    # Keys whose JSON values must be strings.
    _STRING_KEYS: List[str] = ["color_fill", "selector", "item_selector", "file"]

    def export_settings(self, params: argparse.Namespace, path: str) -> None:
        """Export current parameters to a JSON file.

        Args:
            params: The resolved argparse Namespace.
            path: Output JSON file path.

        Raises:
            OSError: If the file cannot be written.
        """
        data: Dict = {}
        for key in self._PERSISTED_KEYS:
            data[key] = getattr(params, key, None)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)

    def import_settings(self, path: str) -> Dict:
        """Import settings from a JSON file.

        Args:
            path: Path to the JSON settings file.

        Returns:
            A dictionary of loaded settings.

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the file is not valid JSON.
            ValueError: If the top-level JSON value is not an object.
        """
        with open(path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a JSON object: '{path}'")
        self._check_types(data, path)
        return data

    def _check_types(self, data: Dict, path: str) -> None:
        for key in self._STRING_KEYS:
            if key in data and not isinstance(data[key], str):
                raise ValueError(
                    f"Setting '{key}' must be a string, got {data[key]!r} in '{path}'")
        breakpoints = data.get("breakpoints")
        if breakpoints is None or isinstance(breakpoints, str):
            return
        if not isinstance(breakpoints, list) or not all(isinstance(b, str) for b in breakpoints):
            raise ValueError(
                f"Setting 'breakpoints' must be a list of strings, got {breakpoints!r} in '{path}'")

    def merge_settings(
        self,
        defaults: argparse.Namespace,
        json_settings: Dict,
        explicit_keys: set,
    ) -> argparse.Namespace:
        """Merge JSON settings with CLI args, respecting precedence.

        Args:
            defaults: The argparse Namespace with default/CLI values.
            json_settings: Dictionary loaded from JSON.
            explicit_keys: Set of parameter names explicitly provided on CLI.

        Returns:
            The merged Namespace.
        """
        for key in self._PERSISTED_KEYS:
            if key in json_settings and key not in explicit_keys:
                setattr(defaults, key, json_settings[key])
        return defaults


# ---------------------------------------------------------------------------
# Version helper
# ---------------------------------------------------------------------------
def _changelog_version(fallback: str = "0.0.0") -> str:
    """Read the highest version from CHANGELOG.md next to this script.

    Scans for ``## [X.Y.Z]`` headings (skipping ``[Unreleased]``) and returns
    the first match, which is the highest version. Returns *fallback* when the
    file is missing or contains no versioned headings.
    """
    changelog = os.path.join(os.path.dirname(os.path.abspath(__file__)), "CHANGELOG.md")
    try:
        with open(changelog, "r", encoding="utf-8") as fh:
            for line in fh:
                m = re.match(r"^##\s+\[(\d+\.\d+\.\d+)\]", line)
                if m:
                    return m.group(1)
    except OSError:
        pass
    return fallback


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------
class Application:
    """Top-level entry point for the Hex Grid Layout CLI.

    Orchestrates CLI argument parsing, settings loading, layout resolution,
    stylesheet output, and debug reporting.
    """

    VERSION:      str = _changelog_version("1.0.0")
    BUILD_DATE:   str = "2026-10-19"
    TITLE:        str = "Hex Grid Layout"
    AUTHOR:       str = "Rohin Gosling"
    BANNER_WIDTH: int = 60

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Execute the full application pipeline.

        Args:
            argv: Argument list, or None to read sys.argv.

        Returns:
            Process exit status (0 on success, 1 on error).
        """
        # Step 1: Parse CLI arguments and detect explicit keys
        args, explicit_keys = self._parse_args(argv)

        # Step 2: Import settings if requested
        if args.import_settings:
            args.import_settings = self._with_extension(args.import_settings, ".json")
            try:
                manager = SettingsManager()
                json_data = manager.import_settings(args.import_settings)
                args = manager.merge_settings(args, json_data, explicit_keys)
            except FileNotFoundError:
                return self._fail(f"Settings file not found: '{args.import_settings}'")
            except json.JSONDecodeError as e:
                return self._fail(f"Malformed JSON in settings file: {e}")
            except ValueError as e:
                return self._fail(str(e))

        # Step 3: Build the grid configuration and colour
        breakpoint_texts = args.breakpoints or []
        if isinstance(breakpoint_texts, str):
            breakpoint_texts = [breakpoint_texts]
        try:
            grid = HexGrid(
                default=HexSpec(args.max_in_row, args.min_in_row),
                breakpoints=BreakpointParser().parse_all(breakpoint_texts),
            )
            color_fill = ColorParser().parse(args.color_fill)
        except ValueError as e:
            return self._fail(str(e))

        tiles = _as_count(args.tiles)
        if tiles is None or tiles < 0:
            return self._fail(f"Tile count must be a non-negative integer, got {args.tiles!r}")
        if isinstance(args.viewport, bool) or not isinstance(args.viewport, (int, float)):
            return self._fail(f"Viewport must be a number, got {args.viewport!r}")

        # Step 4: Export settings once they are known to be valid
        export_path = None
        if args.export_settings:
            export_path = self._with_extension(args.export_settings, ".json")
            try:
                SettingsManager().export_settings(args, export_path)
            except OSError as e:
                return self._fail(f"Cannot write settings file: {e}")

        # Step 5: Emit and save the stylesheet
        emitter = StylesheetEmitter(
            selector=args.selector,
            item_selector=args.item_selector,
            color_fill=color_fill,
        )
        try:
            css, rule_count = emitter.emit(grid, tiles=tiles)
        except ConfigurationError as e:
            return self._fail(str(e))

        out_file = self._with_extension(args.file, ".css")
        try:
            with open(out_file, "w", encoding="utf-8") as f:
                f.write(css)
        except OSError as e:
            return self._fail(f"Cannot write stylesheet: {e}")

        # Banner and save confirmation (always shown)
        self._print_banner()
        print(f"  Saved: {out_file} ({self._format_file_size(os.path.getsize(out_file))})")
        if export_path:
            print(f"  Saved: {export_path} ({self._format_file_size(os.path.getsize(export_path))})")

        # Step 6: Debug output
        if args.debug:
            self._print_debug(args, grid, color_fill, rule_count)
        print()
        return 0

    def _fail(self, message: str) -> int:
        print(f"Error: {message}", file=sys.stderr)
        return 1

    def _with_extension(self, path: str, ext: str) -> str:
        return path if path.lower().endswith(ext) else path + ext

    def _parse_args(self, argv: Optional[List[str]]) -> Tuple[argparse.Namespace, set]:
        """Parse CLI arguments and detect which were explicitly provided.

        Returns:
            A tuple of (parsed Namespace, set of explicitly-provided key names).
        """
        args = self._build_parser().parse_args(argv)

        # Second parse with SUPPRESS defaults to detect explicit keys
        explicit_args = self._build_parser(suppress_defaults=True).parse_args(argv)
        explicit_keys = set(vars(explicit_args).keys())

        return args, explicit_keys

    def _build_parser(self, suppress_defaults: bool = False) -> argparse.ArgumentParser:
        """Build the argparse ArgumentParser.

        Args:
            suppress_defaults: If True, set all defaults to SUPPRESS to
                detect explicitly-provided CLI args.

        Returns:
            A configured ArgumentParser.
        """
        banner = self._banner_text()

        class _BannerParser(argparse.ArgumentParser):
            """ArgumentParser that prints the banner before help text."""

            def print_help(self, file=None):
                if file is None:
                    file = sys.stdout
                file.write(banner + "\n\n")
                super().print_help(file)

        def default(value):
            return argparse.SUPPRESS if suppress_defaults else value

        parser = _BannerParser(
            description="Hex Grid Layout: generate CSS for responsive hexagonal tile grids.",
        )
        parser.add_argument("--tiles", type=int, default=default(0),
                            help="Number of tiles, 0 = periodic rules for any count (default: 0)")
        parser.add_argument("--max_in_row", type=int, default=default(4),
                            help="Tiles in the longer rows (default: 4)")
        parser.add_argument("--min_in_row", type=int, default=default(None),
                            help="Tiles in the shorter rows (default: max_in_row - 1)")
        parser.add_argument("--breakpoint", dest="breakpoints", action="append",
                            default=default(None), metavar="MIN_WIDTH:MAX[:MIN]",
                            help="Responsive override, repeatable; later ones win")
        parser.add_argument("--viewport", type=float, default=default(1024.0),
                            help="Viewport width used for the debug layout table (default: 1024)")
        parser.add_argument("--color_fill", type=str, default=default("grey"),
                            help="Tile fill colour (default: grey)")
        parser.add_argument("--selector", type=str, default=default(".hex-grid"),
                            help="Grid container selector (default: .hex-grid)")
        parser.add_argument("--item_selector", type=str, default=default(".hex-item"),
                            help="Tile selector (default: .hex-item)")
        parser.add_argument("--file", type=str, default=default("hexgrid.css"),
                            help="Output stylesheet filename (default: hexgrid.css)")
        parser.add_argument("--debug", nargs="?", const=True, default=default(False),
                            type=self._parse_bool_flag,
                            help="Enable debug output")
        parser.add_argument("--export_settings", type=str, default=None,
                            help="Export parameters to a JSON file")
        parser.add_argument("--import_settings", type=str, default=None,
                            help="Import parameters from a JSON file")

        return parser

    def _parse_bool_flag(self, value: str) -> bool:
        if isinstance(value, bool):
            return value
        if value.lower() in ("true", "1", "yes"):
            return True
        if value.lower() in ("false", "0", "no"):
            return False
        raise argparse.ArgumentTypeError(f"Boolean value expected, got '{value}'")

    def _banner_text(self) -> str:
        w = self.BANNER_WIDTH
        inner = w - 2  # space between │ and │
        lines = [
            "┌" + "─" * inner + "┐",
            f"│{'  Program:    ' + self.TITLE:<{inner}}│",
            f"│{'  Version:    ' + self.VERSION:<{inner}}│",
            f"│{'  Build Date: ' + self.BUILD_DATE:<{inner}}│",
            f"│{'  Author:     ' + self.AUTHOR:<{inner}}│",
            "└" + "─" * inner + "┘",
        ]
        return "\n".join(lines)

    def _print_banner(self) -> None:
        print(self._banner_text())

    def _print_debug(
        self,
        args: argparse.Namespace,
        grid: HexGrid,
        color_fill: Tuple[int, int, int],
        rule_count: int,
    ) -> None:
        """Print the resolved parameters and the per-tile layout table.

        Args:
            args: The resolved parameters.
            grid: The configured grid.
            color_fill: Resolved fill colour.
            rule_count: Number of CSS rules written.
        """
        spec = grid.spec_for(args.viewport)
        print(f"\n  Default spec:     {grid.default.max_in_row}/{grid.default.min_in_row}")
        for predicate, bp_spec in grid.breakpoints:
            print(f"  Breakpoint:       {predicate.media_query()} -> "
                  f"{bp_spec.max_in_row}/{bp_spec.min_in_row}")
        print(f"  Viewport:         {_format_number(args.viewport)}px -> "
              f"{spec.max_in_row}/{spec.min_in_row} (cycle {spec.cycle})")
        print(f"  Tile width:       {_percent(spec.width_fraction)}")
        print(f"  Tile height:      {_percent(HexagonGeometry.height(spec.width_fraction))}")
        print(f"  Row overlap:      {_percent(HexagonGeometry.quarter_height(spec.width_fraction))}")
        print(f"  Fill colour:      {args.color_fill} -> {color_fill}")
        print(f"  Rules written:    {rule_count}")

        count = args.tiles or 2 * spec.cycle
        print(f"\n  {'Tile':>5}  {'Row':<4} {'First':<6} {'Top':>12} {'Left':>12}")
        for layout in grid.relayout(count, args.viewport):
            first = "yes" if layout.is_first_in_row else ""
            print(f"  {layout.index:>5}  {layout.row_kind.value:<4} {first:<6} "
                  f"{_percent(layout.vertical_offset):>12} "
                  f"{_percent(layout.horizontal_offset):>12}")

    def _format_file_size(self, size_bytes: int) -> str:
        if size_bytes < 1024:
            return f"{size_bytes} B"
        elif size_bytes < 1024 * 1024:
            return f"{size_bytes / 1024:.2f} KB"
        else:
            return f"{size_bytes / (1024 * 1024):.2f} MB"


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main() -> None:
    """Main entry point for the Hex Grid Layout CLI."""
    if sys.stdout and hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    sys.exit(Application().run())


if __name__ == "__main__":
    main()
