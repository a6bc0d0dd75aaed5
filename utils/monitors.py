"""
Monitor detection and display identifier resolution.

Qt does not expose a numeric display id, so the persisted identifier for a
screen is a CRC-32 of its name, manufacturer, model and serial number. It
survives restarts and re-plugging; it changes only when the physical
display (or its port name) changes.
"""
from __future__ import annotations

import zlib
from typing import Callable, List, Optional, Sequence

from PySide6.QtGui import QGuiApplication, QScreen

from core.logging.logger import get_logger
from core.logging.tags import TAG_DISPLAY, TAG_FALLBACK

logger = get_logger(__name__)


def get_all_screens() -> List[QScreen]:
    """
    Get all connected screens.

    Returns:
        List of QScreen objects (empty when no QGuiApplication exists)
    """
    if QGuiApplication.instance() is None:
        return []
    return list(QGuiApplication.screens())


def get_primary_screen() -> Optional[QScreen]:
    """
    Get the primary screen.

    Returns:
        Primary QScreen object, or None when Qt reports none
    """
    if QGuiApplication.instance() is None:
        return None
    return QGuiApplication.primaryScreen()


def screen_display_id(screen: QScreen) -> int:
    """Return the stable integer identifier persisted for *screen*."""
    fingerprint = "|".join((
        screen.name() or "",
        screen.manufacturer() or "",
        screen.model() or "",
        screen.serialNumber() or "",
    ))
    return zlib.crc32(fingerprint.encode("utf-8"))


class DisplayResolver:
    """
    Resolves persisted display identifiers to live screens.

    Resolution is total: an unknown or missing identifier falls back to the
    primary screen, then to the first connected screen, and only returns
    None when no screen exists at all (e.g. before QGuiApplication starts).
    """

    def __init__(
        self,
        screens_provider: Callable[[], Sequence[QScreen]] = get_all_screens,
        primary_provider: Callable[[], Optional[QScreen]] = get_primary_screen,
        id_fn: Callable[[QScreen], int] = screen_display_id,
    ):
        self._screens_provider = screens_provider
        self._primary_provider = primary_provider
        self._id_fn = id_fn

    def resolve(self, stored_id: Optional[int]) -> Optional[QScreen]:
        """
        Return the live screen matching *stored_id*, or the fallback screen.

        Args:
            stored_id: Identifier previously returned by persist(), or None
        """
        screens = list(self._screens_provider())
        if stored_id is not None:
            for screen in screens:
                if self._id_fn(screen) == stored_id:
                    logger.debug("%s Resolved display %s to %s", TAG_DISPLAY, stored_id, screen.name())
                    return screen

        fallback = self._primary_provider()
        if fallback is None and screens:
            fallback = screens[0]

        if stored_id is not None:
            logger.info(
                "%s Display %s not connected, using %s",
                TAG_FALLBACK,
                stored_id,
                fallback.name() if fallback is not None else "<none>",
            )
        return fallback

    def persist(self, screen: QScreen) -> int:
        """Extract the identifier to store for a live screen."""
        return self._id_fn(screen)

    def available_ids(self) -> List[int]:
        return [self._id_fn(screen) for screen in self._screens_provider()]


def get_screen_info_dict(screen: QScreen) -> dict:
    """
    Get information about a screen as a dictionary.

    Args:
        screen: QScreen object

    Returns:
        Dictionary with the screen's identity and logical/physical geometry
    """
    geometry = screen.geometry()
    dpr = screen.devicePixelRatio()
    primary = get_primary_screen()

    return {
        'name': screen.name(),
        'manufacturer': screen.manufacturer(),
        'model': screen.model(),
        'display_id': screen_display_id(screen),
        'geometry': {
            'x': geometry.x(),
            'y': geometry.y(),
            'width': geometry.width(),
            'height': geometry.height()
        },
        'physical_geometry': {
            'width': int(geometry.width() * dpr),
            'height': int(geometry.height() * dpr)
        },
        'device_pixel_ratio': dpr,
        'is_primary': primary is not None and screen == primary,
    }


def log_screen_configuration():
    """Log the current screen configuration for debugging."""
    screens = get_all_screens()
    logger.info("=== Screen Configuration ===")
    logger.info(f"Total screens: {len(screens)}")

    for i, screen in enumerate(screens):
        info = get_screen_info_dict(screen)
        logger.info(f"Screen {i}: {info['name']} (id={info['display_id']})")
        logger.info(f"  Primary: {info['is_primary']}")
        logger.info(f"  Logical Resolution: {info['geometry']['width']}x{info['geometry']['height']} "
                    f"at ({info['geometry']['x']}, {info['geometry']['y']})")
        logger.info(f"  Device Pixel Ratio: {info['device_pixel_ratio']}")

    logger.info("=== End Screen Configuration ===")
