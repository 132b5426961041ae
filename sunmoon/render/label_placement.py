"""
Label slot selection for the sunrise and sunset labels.

Sunrise and sunset swing by roughly two hours over the year, so the labels
move between fixed slots to stay clear of the dial and of each other:

    +---------+--------+
    | slot 0  | slot 4 |
    | slot 1  | slot 5 |
    +---------+--------+
    | slot 2  | slot 6 |
    | slot 3  | slot 7 |
    |         | slot 8 |   late summer sunsets
    +---------+--------+
"""

import logging
from typing import Sequence, Tuple

from ..models.dial_geometry import LabelPlacement, LabelSlot
from ..services.window_resolvers import TWILIGHT_DEGREES

logger = logging.getLogger(__name__)

SIX_AM_DEGREES = 90.0
SIX_PM_DEGREES = 270.0

LABEL_SLOTS: Tuple[LabelSlot, ...] = (
    LabelSlot(0, 350, 350),
    LabelSlot(1, 300, 470),
    LabelSlot(2, 300, 680),
    LabelSlot(3, 350, 800),
    LabelSlot(4, 1400, 350),
    LabelSlot(5, 1450, 470),
    LabelSlot(6, 1450, 680),
    LabelSlot(7, 1400, 800),
    LabelSlot(8, 1350, 920),
)


class LabelPlacementPolicy:
    """Chooses label slots from the sunrise and sunset angles."""

    def __init__(self, slots: Sequence[LabelSlot] = LABEL_SLOTS,
                 twilight_degrees: float = TWILIGHT_DEGREES):
        if len(slots) != 9:
            raise ValueError(f"Expected 9 label slots, got {len(slots)}")
        self.slots = tuple(slots)
        self.twilight_degrees = twilight_degrees

    def sunrise_slots(self, sunrise_angle: float) -> Tuple[LabelSlot, LabelSlot]:
        """
        Get the (sunrise, first light) slots.

        First light is always earlier than sunrise, so its label goes in the
        slot below the sunrise label in the left column.
        """
        if sunrise_angle <= SIX_AM_DEGREES:
            # Both before 6 AM
            return self.slots[2], self.slots[3]
        if sunrise_angle < SIX_AM_DEGREES + self.twilight_degrees:
            # Sunrise after 6 AM, first light before
            return self.slots[1], self.slots[2]
        return self.slots[0], self.slots[1]

    def sunset_slots(self, sunset_angle: float) -> Tuple[LabelSlot, LabelSlot]:
        """Get the (sunset, last light) slots."""
        if sunset_angle <= SIX_PM_DEGREES - self.twilight_degrees:
            # Both before 6 PM
            return self.slots[4], self.slots[5]
        if sunset_angle < SIX_PM_DEGREES:
            # Sunset before 6 PM, last light after
            return self.slots[5], self.slots[6]
        if sunset_angle <= SIX_PM_DEGREES + self.twilight_degrees:
            return self.slots[6], self.slots[7]
        return self.slots[7], self.slots[8]

    def place(self, sunrise_angle: float, sunset_angle: float) -> LabelPlacement:
        sunrise, first_light = self.sunrise_slots(sunrise_angle)
        sunset, last_light = self.sunset_slots(sunset_angle)
        logger.debug(
            f"Label slots: sunrise {sunrise.index}, first light {first_light.index}, "
            f"sunset {sunset.index}, last light {last_light.index}"
        )
        return LabelPlacement(
            sunrise=sunrise,
            first_light=first_light,
            sunset=sunset,
            last_light=last_light,
        )
