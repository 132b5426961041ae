"""
24-hour sun and moon dial renderer.

Builds the ordered list of drawing commands for one snapshot and runs them
on a DrawingSurface. Midnight is at the bottom of the dial and noon at the
top; the outer circle tracks the sun and the inner circle the moon.
"""

import logging
import math
from datetime import date
from functools import partial
from typing import List, Optional

from ..models.dial_geometry import DialGeometry, LabelSlot
from ..models.sun_moon_data import SunMoonSnapshot
from ..services.time_angle_converter import TimeAngleConverter
from ..services.window_resolvers import MoonWindowResolver, TwilightWindowResolver
from .draw_commands import DrawCommand, DrawCommandExecutor, DrawResult
from .drawing_surface import DrawingSurface, TAU, make_gradient
from .label_placement import LabelPlacementPolicy

logger = logging.getLogger(__name__)

IMAGE_WIDTH = 1920
IMAGE_HEIGHT = 1080
CENTER_X = IMAGE_WIDTH / 2
CENTER_Y = IMAGE_HEIGHT / 2 + 40
SUN_RADIUS = IMAGE_HEIGHT / 3
MOON_RADIUS = IMAGE_HEIGHT / 4

BACKGROUND_COLOR = "#E0E0F0"
GUIDE_COLOR = "#B0B0B0"
SUN_CIRCLE_COLOR = "#303050"
SUN_ARC_COLOR = "#FCD303"
SUN_UP_COLOR = "#FDF000"
SUN_DOWN_COLOR = "#D1AF02"
TWILIGHT_COLORS = ("#F0E000", "#B80010", "#500028")
MOON_ARC_COLOR = "#808080"
MOON_UP_COLOR = "#D0D0D0"
MOON_DOWN_COLOR = "#808080"
TITLE_COLOR = "#2020F0"
LABEL_COLOR = "#2020F0"

LARGE_FONT_SIZE = 72
SMALL_FONT_SIZE = 40
EXTRA_SMALL_FONT_SIZE = 30
# Approximate cap height of the small font
SMALL_FONT_CHAR_HEIGHT = 30

TITLE_Y = 90
LABEL_VALUE_OFFSET = 50
DATE_X = IMAGE_WIDTH * 3 / 4
DATE_Y = IMAGE_HEIGHT - 30
LUNAR_SUMMARY_X = 40
LUNAR_SUMMARY_Y = IMAGE_HEIGHT - 30

ARC_WIDTH = 20
EVENT_TICK_LENGTH = 50
MARKER_CLEAR_RADIUS = 35
MARKER_RADIUS = 30
MOON_FILL_RADIUS = 28


def format_date_label(value: date) -> str:
    """Format a date as "October 19th, 2026"."""
    day = value.day
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{value.strftime('%B')} {day}{suffix}, {value.year}"


class DialRenderer:
    """
    Lays out and draws the dial for a SunMoonSnapshot.

    compute_geometry() holds all of the angle work, so the layout can be
    checked without a canvas; build_commands() turns it into drawing steps.
    Every angle handed to the surface goes through to_render_rotation().
    """

    def __init__(self, converter: Optional[TimeAngleConverter] = None,
                 twilight: Optional[TwilightWindowResolver] = None,
                 moon_resolver: Optional[MoonWindowResolver] = None,
                 placement: Optional[LabelPlacementPolicy] = None,
                 executor: Optional[DrawCommandExecutor] = None):
        self.converter = converter or TimeAngleConverter()
        self.twilight = twilight or TwilightWindowResolver()
        self.moon_resolver = moon_resolver or MoonWindowResolver(self.converter)
        self.placement = placement or LabelPlacementPolicy()
        self.executor = executor or DrawCommandExecutor()

    def compute_geometry(self, snapshot: SunMoonSnapshot) -> DialGeometry:
        sunrise = self.converter.to_dial_angle(snapshot.sunrise)
        sunset = self.converter.to_dial_angle(snapshot.sunset)

        return DialGeometry(
            sunrise=sunrise,
            sunset=sunset,
            current_time=self.converter.to_dial_angle(snapshot.current_time),
            morning_twilight=self.twilight.morning_window(sunrise),
            evening_twilight=self.twilight.evening_window(sunset),
            moon=self.moon_resolver.resolve(snapshot.moonrise, snapshot.moonset),
            labels=self.placement.place(sunrise, sunset),
        )

    def render(self, snapshot: Optional[SunMoonSnapshot], title: str,
               surface: DrawingSurface) -> Optional[List[DrawResult]]:
        """
        Draw the dial onto a surface.

        Args:
            snapshot: Astronomy data, or None when it could not be obtained
            title: Title drawn across the top of the image
            surface: Target canvas

        Returns:
            One DrawResult per command, or None if there was no snapshot and
            nothing was drawn
        """
        if snapshot is None:
            logger.warning("No astronomy data, nothing to render")
            return None

        geometry = self.compute_geometry(snapshot)
        logger.debug(
            f"Dial geometry: sunrise {geometry.sunrise}, sunset {geometry.sunset}, "
            f"now {geometry.current_time}, moon {geometry.moon.rise}-{geometry.moon.set}"
        )
        return self.executor.execute(surface, self.build_commands(snapshot, title, geometry))

    def build_commands(self, snapshot: SunMoonSnapshot, title: str,
                       geometry: DialGeometry) -> List[DrawCommand]:
        """Get the drawing steps in painting order."""
        return [
            DrawCommand("background", self._draw_background),
            DrawCommand("title", partial(self._draw_title, title=title)),
            DrawCommand("tick marks", self._draw_tick_marks),
            DrawCommand("guide circles", self._draw_guide_circles),
            DrawCommand("guide labels", self._draw_guide_labels),
            DrawCommand("daylight arc", partial(self._draw_daylight_arc, geometry=geometry)),
            DrawCommand("morning twilight", partial(
                self._draw_twilight_arc,
                event_angle=geometry.morning_twilight.end,
                light_angle=geometry.morning_twilight.start,
                start=geometry.morning_twilight.start,
                end=geometry.morning_twilight.end)),
            DrawCommand("evening twilight", partial(
                self._draw_twilight_arc,
                event_angle=geometry.evening_twilight.start,
                light_angle=geometry.evening_twilight.end,
                start=geometry.evening_twilight.start,
                end=geometry.evening_twilight.end)),
            DrawCommand("event ticks", partial(self._draw_event_ticks, geometry=geometry)),
            DrawCommand("moon arc", partial(self._draw_moon_arc, geometry=geometry)),
            DrawCommand("sun marker", partial(self._draw_sun_marker, geometry=geometry)),
            DrawCommand("moon marker", partial(self._draw_moon_marker, geometry=geometry)),
            DrawCommand("sun labels", partial(self._draw_sun_labels, snapshot=snapshot, geometry=geometry)),
            DrawCommand("moon labels", partial(self._draw_moon_labels, snapshot=snapshot)),
            DrawCommand("date label", partial(self._draw_date_label, snapshot=snapshot)),
            DrawCommand("lunar summary", partial(self._draw_lunar_summary, snapshot=snapshot)),
        ]

    def _point_on_circle(self, radius: float, dial_angle: float):
        rotation = self.converter.to_render_rotation(dial_angle)
        return CENTER_X + radius * math.cos(rotation), CENTER_Y + radius * math.sin(rotation)

    def _draw_background(self, surface: DrawingSurface) -> None:
        surface.fill_rect(0, 0, surface.width, surface.height, BACKGROUND_COLOR)

    def _draw_title(self, surface: DrawingSurface, title: str) -> None:
        surface.set_font(LARGE_FONT_SIZE, bold=True)
        text_width = surface.measure_text(title)
        surface.fill_text(title, (surface.width - text_width) / 2, TITLE_Y, TITLE_COLOR)

    def _draw_tick_marks(self, surface: DrawingSurface) -> None:
        surface.translate(CENTER_X, CENTER_Y)

        # One minor tick per hour
        for _ in range(24):
            surface.rotate(math.radians(15))
            surface.line(SUN_RADIUS - 20, 0, SUN_RADIUS + 20, 0, GUIDE_COLOR, 2, round_cap=True)

        for _ in range(4):
            surface.rotate(math.radians(90))
            surface.line(SUN_RADIUS - 25, 0, SUN_RADIUS + 25, 0, GUIDE_COLOR, 8, round_cap=True)

    def _draw_guide_circles(self, surface: DrawingSurface) -> None:
        surface.stroke_arc(CENTER_X, CENTER_Y, SUN_RADIUS, 0, TAU, SUN_CIRCLE_COLOR, 18)
        surface.stroke_arc(CENTER_X, CENTER_Y, MOON_RADIUS, 0, TAU, GUIDE_COLOR, 8)

    def _draw_guide_labels(self, surface: DrawingSurface) -> None:
        surface.set_font(SMALL_FONT_SIZE)

        noon_width = surface.measure_text("12 PM")
        surface.fill_text("12 PM", CENTER_X - noon_width / 2,
                          CENTER_Y - (SUN_RADIUS + 50), GUIDE_COLOR)

        midnight_width = surface.measure_text("12 AM")
        surface.fill_text("12 AM", CENTER_X - midnight_width / 2,
                          CENTER_Y + SUN_RADIUS + SMALL_FONT_CHAR_HEIGHT + 50, GUIDE_COLOR)

        morning_width = surface.measure_text("6 AM")
        surface.fill_text("6 AM", CENTER_X - (SUN_RADIUS + morning_width + 60),
                          CENTER_Y + SMALL_FONT_CHAR_HEIGHT / 2, GUIDE_COLOR)
        surface.fill_text("6 PM", CENTER_X + SUN_RADIUS + 60,
                          CENTER_Y + SMALL_FONT_CHAR_HEIGHT / 2, GUIDE_COLOR)

    def _draw_daylight_arc(self, surface: DrawingSurface, geometry: DialGeometry) -> None:
        surface.stroke_arc(
            CENTER_X, CENTER_Y, SUN_RADIUS,
            self.converter.to_render_rotation(geometry.sunrise),
            self.converter.to_render_rotation(geometry.sunset),
            SUN_ARC_COLOR, ARC_WIDTH,
        )

    def _draw_twilight_arc(self, surface: DrawingSurface, event_angle: float,
                           light_angle: float, start: float, end: float) -> None:
        # Bright at sunrise/sunset, dark at first/last light
        x0, y0 = self._point_on_circle(SUN_RADIUS, event_angle)
        x1, y1 = self._point_on_circle(SUN_RADIUS, light_angle)
        gradient = make_gradient(x0, y0, x1, y1, TWILIGHT_COLORS)

        surface.stroke_arc(
            CENTER_X, CENTER_Y, SUN_RADIUS,
            self.converter.to_render_rotation(start),
            self.converter.to_render_rotation(end),
            gradient, ARC_WIDTH,
        )

    def _draw_event_ticks(self, surface: DrawingSurface, geometry: DialGeometry) -> None:
        angles = (
            geometry.sunrise,
            geometry.morning_twilight.start,
            geometry.sunset,
            geometry.evening_twilight.end,
        )
        surface.translate(CENTER_X, CENTER_Y)
        for angle in angles:
            surface.save()
            surface.rotate(self.converter.to_render_rotation(angle))
            surface.line(SUN_RADIUS - EVENT_TICK_LENGTH, 0, SUN_RADIUS + EVENT_TICK_LENGTH, 0,
                         LABEL_COLOR, 3)
            surface.restore()

    def _draw_moon_arc(self, surface: DrawingSurface, geometry: DialGeometry) -> None:
        moon = geometry.moon
        if moon.span >= 360:
            start, end = 0.0, TAU
        else:
            start = self.converter.to_render_rotation(moon.rise)
            end = self.converter.to_render_rotation(moon.set)
        surface.stroke_arc(CENTER_X, CENTER_Y, MOON_RADIUS, start, end, MOON_ARC_COLOR, ARC_WIDTH)

    def _draw_sun_marker(self, surface: DrawingSurface, geometry: DialGeometry) -> None:
        surface.translate(CENTER_X, CENTER_Y)
        surface.rotate(self.converter.to_render_rotation(geometry.current_time))

        # Clear the arc under the marker first
        surface.fill_circle(SUN_RADIUS, 0, MARKER_CLEAR_RADIUS, BACKGROUND_COLOR)
        surface.fill_circle(SUN_RADIUS, 0, MARKER_RADIUS,
                            SUN_UP_COLOR if geometry.sun_up else SUN_DOWN_COLOR)

    def _draw_moon_marker(self, surface: DrawingSurface, geometry: DialGeometry) -> None:
        surface.translate(CENTER_X, CENTER_Y)
        surface.rotate(self.converter.to_render_rotation(geometry.current_time))

        surface.fill_circle(MOON_RADIUS, 0, MARKER_CLEAR_RADIUS, BACKGROUND_COLOR)
        surface.fill_circle(MOON_RADIUS, 0, MARKER_RADIUS, MOON_DOWN_COLOR)
        surface.fill_circle(MOON_RADIUS, 0, MOON_FILL_RADIUS,
                            MOON_UP_COLOR if geometry.moon_up else MOON_DOWN_COLOR)

    def _draw_sun_labels(self, surface: DrawingSurface, snapshot: SunMoonSnapshot,
                         geometry: DialGeometry) -> None:
        surface.set_font(SMALL_FONT_SIZE)
        labels = geometry.labels

        entries = [
            ("Sunrise", snapshot.sunrise, labels.sunrise),
            ("First light", snapshot.first_light, labels.first_light),
            ("Sunset", snapshot.sunset, labels.sunset),
            ("Last light", snapshot.last_light, labels.last_light),
        ]
        for label, time_str, slot in entries:
            self._draw_slot_label(surface, label, self.converter.format_clock_12h(time_str), slot)

    def _draw_slot_label(self, surface: DrawingSurface, label: str, value: str,
                         slot: LabelSlot) -> None:
        surface.fill_text(label, slot.x, slot.y, LABEL_COLOR)
        surface.fill_text(value, slot.x, slot.y + LABEL_VALUE_OFFSET, LABEL_COLOR)

    def _draw_moon_labels(self, surface: DrawingSurface, snapshot: SunMoonSnapshot) -> None:
        surface.set_font(SMALL_FONT_SIZE)
        x = CENTER_X - 110

        moonrise = (self.converter.format_clock_12h(snapshot.moonrise)
                    if snapshot.has_moonrise else "Yesterday")
        moonset = (self.converter.format_clock_12h(snapshot.moonset)
                   if snapshot.has_moonset else "Tomorrow")

        surface.fill_text("Moonrise", x, CENTER_Y - 80, MOON_ARC_COLOR)
        surface.fill_text(moonrise, x, CENTER_Y - 30, MOON_ARC_COLOR)
        surface.fill_text("Moonset", x, CENTER_Y + 50, MOON_ARC_COLOR)
        surface.fill_text(moonset, x, CENTER_Y + 110, MOON_ARC_COLOR)

    def _draw_date_label(self, surface: DrawingSurface, snapshot: SunMoonSnapshot) -> None:
        surface.set_font(SMALL_FONT_SIZE)
        surface.fill_text(format_date_label(snapshot.date), DATE_X, DATE_Y, LABEL_COLOR)

    def _draw_lunar_summary(self, surface: DrawingSurface, snapshot: SunMoonSnapshot) -> None:
        surface.set_font(EXTRA_SMALL_FONT_SIZE)
        text = (
            f"{snapshot.lunar_phase_name} · {snapshot.lunar_illumination_percent}% "
            f"({snapshot.lunar_wax_wane.value})"
        )
        surface.fill_text(text, LUNAR_SUMMARY_X, LUNAR_SUMMARY_Y, LABEL_COLOR)
