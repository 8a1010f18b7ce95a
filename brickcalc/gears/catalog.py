"""
Technic gear catalog.

Standard spur gears have a pitch radius of teeth/16 studs. The two worm
gears are identified by "1(1L)" and "1(2L)" and carry fixed radii.

ASSUMPTIONS:
- Worm gears only drive; they never appear as the follower
- Custom gears follow the teeth/16 radius rule
"""

from dataclasses import dataclass
from typing import Union

WORM_1L = "1(1L)"
WORM_2L = "1(2L)"

WORM_RADII = {
    WORM_1L: 0.75,
    WORM_2L: 0.5,
}

STANDARD_TEETH = [8, 12, 16, 20, 24, 28, 36, 40]

DEFAULT_SELECTION: list[Union[int, str]] = [WORM_1L, WORM_2L, 8, 12, 16, 20, 24]


@dataclass(frozen=True)
class GearSpec:
    """A gear usable in a coupling."""
    gear_id: Union[int, str]  # Teeth count or worm identifier
    teeth: int
    radius: float  # Pitch radius in studs
    is_worm: bool

    @property
    def sort_value(self) -> float:
        """Numeric sort key: worms sort as their radius."""
        return self.radius if self.is_worm else float(self.teeth)

    @property
    def label(self) -> str:
        return str(self.gear_id)


def gear_radius(teeth: int) -> float:
    """Pitch radius in studs of a standard gear."""
    return teeth / 16


def parse_gear(value: Union[int, str]) -> GearSpec:
    """
    Build a GearSpec from a teeth count or worm identifier.

    Args:
        value: Teeth count (int or numeric string) or "1(1L)"/"1(2L)"

    Returns:
        GearSpec for the gear

    Raises:
        ValueError: If the value is neither a worm id nor a positive count
    """
    if isinstance(value, str):
        text = value.strip()
        if text.upper() in (WORM_1L.upper(), WORM_2L.upper()):
            worm_id = WORM_1L if text.upper() == WORM_1L.upper() else WORM_2L
            return GearSpec(gear_id=worm_id, teeth=1, radius=WORM_RADII[worm_id], is_worm=True)
        try:
            value = int(text)
        except ValueError:
            raise ValueError(f"Unknown gear: {value!r}")
    if isinstance(value, bool) or value <= 0:
        raise ValueError(f"Gear teeth must be a positive integer, got {value!r}")
    return GearSpec(gear_id=value, teeth=value, radius=gear_radius(value), is_worm=False)


def parse_gear_list(text: str) -> list[Union[int, str]]:
    """
    Parse a comma-separated gear list such as "8, 16, 1(1L)".

    Empty entries are skipped, duplicates keep their first position.
    """
    gears: list[Union[int, str]] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        gear_id = parse_gear(part).gear_id
        if gear_id not in gears:
            gears.append(gear_id)
    return gears


def is_valid_teeth(value: int, side: str = "A") -> bool:
    """True for 8, 12, 16, ... and, on side A only, 1 (a worm)."""
    return (value == 1 and side == "A") or (value >= 8 and (value - 8) % 4 == 0)


def snap_teeth(value: int, previous: int, side: str = "A") -> int:
    """
    Snap a coupling teeth count to the nearest valid Technic value.

    Valid counts are 8, 12, 16, ... and, on side A only, 1 (a worm).
    Invalid values move to the next valid count in the direction of the
    change from `previous`.

    Args:
        value: Requested teeth count
        previous: Teeth count before the change
        side: "A" or "B"

    Returns:
        A valid teeth count
    """
    minimum = 1 if side == "A" else 8
    if not is_valid_teeth(value, side):
        if value > previous:
            if value < 8:
                value = 8
            else:
                value = -(-(value - 8) // 4) * 4 + 8
        else:
            if side == "A" and 1 <= value < 8:
                value = 1
            elif value < 8:
                value = minimum
            else:
                value = (value - 8) // 4 * 4 + 8

    return max(value, minimum)
