"""
Best-effort execution of drawing commands.

Each command runs inside its own save/restore pair. A command that raises is
recorded as a failed DrawResult and logged; the remaining commands still run.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from .drawing_surface import DrawingSurface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrawCommand:
    """Named drawing step."""
    name: str
    action: Callable[[DrawingSurface], None]


@dataclass(frozen=True)
class DrawResult:
    """Outcome of one drawing step."""
    name: str
    ok: bool
    error: Optional[Exception] = None


class DrawCommandExecutor:
    """Runs drawing commands in order and collects their results."""

    def execute(self, surface: DrawingSurface, commands: Iterable[DrawCommand]) -> List[DrawResult]:
        results: List[DrawResult] = []

        for command in commands:
            try:
                surface.save()
            except Exception as e:
                logger.error(f"Draw command '{command.name}' could not start: {e}")
                results.append(DrawResult(name=command.name, ok=False, error=e))
                continue

            try:
                command.action(surface)
            except Exception as e:
                logger.error(f"Draw command '{command.name}' failed: {e}")
                results.append(DrawResult(name=command.name, ok=False, error=e))
            else:
                logger.debug(f"Draw command '{command.name}' done")
                results.append(DrawResult(name=command.name, ok=True))
            finally:
                surface.restore()

        failed = [r.name for r in results if not r.ok]
        if failed:
            logger.warning(f"{len(failed)} of {len(results)} draw commands failed: {', '.join(failed)}")
        return results
