"""
PartIdentity - Structured identity decoded from a part sheet filename.

Filename grammar:

    fbas_<layercode>_<name...>_<vv>[<p>][_e].png

`vv` is a two-digit version, `<p>` an optional palette letter (a, b, c, d, f)
that is only legal on version 00, and a trailing `_e` marks an exclusive part.
"""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional

from ..constants import (
    BASE_TOKEN,
    MIN_SEGMENTS,
    PALETTE_LETTERS,
    PART_EXTENSION,
    SPECIAL_TOKEN,
)
from ..schemas.service_results import ErrorCodes, ServiceResult
from .enums import BaseType, LayerCode, Special


class PartFilenameError(ValueError):
    """Raised when a filename does not follow the part sheet grammar."""

    def __init__(self, file_name: str, reason: str):
        super().__init__(reason)
        self.file_name = file_name
        self.reason = reason


@dataclass(frozen=True)
class OutfitSetKey:
    """Identity shared by every layer of one designed outfit."""
    name: str
    version: int
    palette: Optional[str] = None


@dataclass(frozen=True)
class PartIdentity:
    """
    Parsed identity of a single part sheet.

    This class is immutable (frozen=True); catalogs hand out the same
    instance to every reader.

    Attributes:
        base: Part family
        layer: Rendering layer the sheet belongs to
        name: Lowercase, underscore-joined part name
        version: Version number (0-99)
        palette: Palette suffix letter, only present on version 0
        special: Special marker (exclusive head/hair)
    """
    base: BaseType
    layer: LayerCode
    name: str
    version: int
    palette: Optional[str] = None
    special: Optional[Special] = None

    def __post_init__(self):
        if self.palette is not None and self.version != 0:
            raise ValueError("Palette suffix is only valid on version 00")

    @property
    def is_exclusive(self) -> bool:
        return self.special == Special.EXCLUSIVE

    @property
    def version_token(self) -> str:
        """Version plus palette, e.g. "00b" or "03"."""
        return f"{self.version:02d}{self.palette or ''}"

    @property
    def set_key(self) -> OutfitSetKey:
        return OutfitSetKey(name=self.name, version=self.version, palette=self.palette)

    @property
    def short_label(self) -> str:
        """Label shown when cycling parts, e.g. "headscarf_00b_e"."""
        label = f"{self.name}_{self.version_token}"
        if self.special is not None:
            label += f"_{self.special.value}"
        return label

    def sort_key(self) -> tuple:
        """
        Browsing order within a layer.

        Missing palette and special markers sort before present ones.
        """
        return (
            self.base.sort_order,
            self.name,
            self.version,
            (0, "") if self.palette is None else (1, self.palette),
            (0, "") if self.special is None else (1, self.special.value),
        )


def format_part_key(identity: PartIdentity) -> str:
    """
    Build the stable catalog key for a part.

    Returns:
        Key like "14head/headscarf/00b/e"
    """
    key = f"{identity.layer.value}/{identity.name}/{identity.version_token}"
    if identity.special is not None:
        key += f"/{identity.special.value}"
    return key


def parse_part_filename(file_name: str) -> PartIdentity:
    """
    Decode a part sheet filename.

    Args:
        file_name: Bare filename (not a path), e.g. "fbas_14head_hat_00b_e.png"

    Returns:
        The parsed PartIdentity

    Raises:
        PartFilenameError: If any part of the grammar is violated. Every
            rejection carries a distinct, human-readable reason.
    """
    path = PurePosixPath(file_name)
    if not path.suffix:
        raise PartFilenameError(file_name, "Missing extension")
    if path.suffix[1:].lower() != PART_EXTENSION:
        raise PartFilenameError(file_name, "Not a png file")

    stem = path.stem
    if not stem:
        raise PartFilenameError(file_name, "Missing file stem")

    segments = stem.split("_")
    if len(segments) < MIN_SEGMENTS:
        raise PartFilenameError(file_name, "Expected at least 4 filename segments")
    if segments[0] != BASE_TOKEN:
        raise PartFilenameError(file_name, f"Base prefix must be {BASE_TOKEN}")

    layer = LayerCode.from_code(segments[1])
    if layer is None:
        raise PartFilenameError(file_name, f"Unknown layer code: {segments[1]}")

    end = len(segments)
    special = None
    if segments[end - 1] == SPECIAL_TOKEN:
        end -= 1
        special = Special.EXCLUSIVE
    if end < MIN_SEGMENTS:
        raise PartFilenameError(file_name, "Missing name/version segments")

    version_token = segments[end - 1]
    name = "_".join(segments[2:end - 1]).lower()
    if not name:
        raise PartFilenameError(file_name, "Part name is empty")

    if (
        len(version_token) < 2
        or not _is_ascii_digit(version_token[0])
        or not _is_ascii_digit(version_token[1])
    ):
        raise PartFilenameError(file_name, "Version token must start with two digits")
    if len(version_token) > 3:
        raise PartFilenameError(
            file_name, "Version token must be 2 digits, optional palette suffix"
        )
    version = int(version_token[:2])

    palette = None
    if len(version_token) == 3:
        palette = version_token[2].lower()
        if palette not in PALETTE_LETTERS:
            raise PartFilenameError(file_name, f"Invalid palette suffix: {palette}")
        if version != 0:
            raise PartFilenameError(file_name, "Palette suffix is only valid on version 00")

    return PartIdentity(
        base=BaseType.FBAS,
        layer=layer,
        name=name,
        version=version,
        palette=palette,
        special=special,
    )


def try_parse_part_filename(file_name: str) -> ServiceResult[PartIdentity]:
    """Parse a filename, reporting failure as a ServiceResult instead of raising."""
    try:
        identity = parse_part_filename(file_name)
    except PartFilenameError as e:
        return ServiceResult.failure(e.reason, ErrorCodes.INVALID_FILENAME)
    return ServiceResult.success_with_data(identity, "Filename parsed")


def _is_ascii_digit(char: str) -> bool:
    return "0" <= char <= "9"
