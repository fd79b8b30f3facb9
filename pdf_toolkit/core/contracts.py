from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal, Union

PageImagesMode = Literal["auto", "split", "crop"]
SymmetryStrategy = Literal["independent", "match_max_width", "mirror_from_gutter"]
SplitStrategy = Literal["ranges", "pages_per_file"]

PAGE_IMAGES_MODES: tuple[str, ...] = ("auto", "split", "crop")
SYMMETRY_STRATEGIES: tuple[str, ...] = ("independent", "match_max_width", "mirror_from_gutter")
SPLIT_STRATEGIES: tuple[str, ...] = ("ranges", "pages_per_file")
ROTATE_DEGREES: tuple[int, ...] = (90, 180, 270)


@dataclass(frozen=True)
class RenderOptions:
    dpi: int
    pages: str | None = None
    overwrite: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SplitOptions:
    strategy: SplitStrategy
    ranges: str | None = None
    pages_per_file: int | None = None
    overwrite: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RotateOptions:
    degrees: int
    pages: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PageImagesOptions:
    in_dir: str
    mode: PageImagesMode = "auto"
    glob: str = "*.png"
    # Pixels shaved on both sides of a detected gutter after splitting.
    gutter_trim_px: int = 0
    # Inward inset of the final crop box, removes faint borders.
    edge_inset_px: int = 0
    outer_margin_frac: float = 0.0
    # Applied after left/right crop boxes are computed independently.
    symmetry_strategy: SymmetryStrategy = "independent"
    overwrite: bool = False
    debug: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


RunOptions = Union[RenderOptions, SplitOptions, RotateOptions, PageImagesOptions]
