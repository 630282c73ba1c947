"""
Image Store - Loads and caches part and palette images as pygame surfaces.

Handles:
- Loading sheets from disk on demand
- Normalizing every sheet to 32-bit pixels with per-pixel alpha
- In-memory caching keyed by absolute path
- Remembering failed loads so a missing file is not retried every frame
"""

import threading
from pathlib import Path
from typing import Dict, Optional, Set, Tuple

import pygame

from paperdoll.src.core.logging_config import get_logger

logger = get_logger(__name__)


def normalize_surface(surface: pygame.Surface) -> pygame.Surface:
    """
    Get a 32-bit per-pixel-alpha version of a surface.

    Indexed and 24-bit sheets are blitted onto a fresh SRCALPHA surface, so
    this works without a display. Surfaces already in that format are
    returned as-is.
    """
    if surface.get_bitsize() == 32 and surface.get_flags() & pygame.SRCALPHA:
        return surface
    normalized = pygame.Surface(surface.get_size(), pygame.SRCALPHA, 32)
    normalized.fill((0, 0, 0, 0))
    normalized.blit(surface, (0, 0))
    return normalized


class ImageStore:
    """
    Manages image loading and caching.

    Loaded sheets go through convert_alpha() when a display surface exists
    and through normalize_surface() otherwise, so the store works headless
    (tests, scripts) and recolouring always writes exact RGB values.
    """

    def __init__(self):
        self._lock = threading.Lock()

        # In-memory surface cache: absolute path -> pygame.Surface
        self._surface_cache: Dict[str, pygame.Surface] = {}

        # Failed loads (don't retry until clear_failed)
        self._failed_paths: Set[str] = set()

    def get_surface(self, path: Path) -> Optional[pygame.Surface]:
        """
        Get a pygame surface for an image file.

        Returns the cached surface or loads it from disk.

        Args:
            path: Absolute path of the image

        Returns:
            pygame.Surface, or None if the file is missing or unreadable
        """
        key = str(path)
        with self._lock:
            if key in self._surface_cache:
                return self._surface_cache[key]
            if key in self._failed_paths:
                return None

        if not Path(path).is_file():
            logger.debug("Image not found", extra={"path": key})
            with self._lock:
                self._failed_paths.add(key)
            return None

        try:
            surface = pygame.image.load(key)
        except (pygame.error, OSError) as e:
            logger.warning("Error loading image", extra={"path": key, "error": str(e)})
            with self._lock:
                self._failed_paths.add(key)
            return None

        if pygame.display.get_init() and pygame.display.get_surface() is not None:
            surface = surface.convert_alpha()
        else:
            surface = normalize_surface(surface)

        with self._lock:
            self._surface_cache[key] = surface
        return surface

    def put_surface(self, path: Path, surface: pygame.Surface) -> None:
        """Register an already decoded surface under a path."""
        key = str(path)
        with self._lock:
            self._surface_cache[key] = surface
            self._failed_paths.discard(key)

    def get_size(self, path: Path) -> Optional[Tuple[int, int]]:
        surface = self.get_surface(path)
        if surface is None:
            return None
        return surface.get_size()

    def is_cached(self, path: Path) -> bool:
        with self._lock:
            return str(path) in self._surface_cache

    def clear_memory_cache(self) -> None:
        """Clear the in-memory surface cache."""
        with self._lock:
            self._surface_cache.clear()

    def clear_failed(self) -> None:
        """Clear the failed loads list to allow retrying."""
        with self._lock:
            self._failed_paths.clear()

    def clear(self) -> None:
        self.clear_memory_cache()
        self.clear_failed()
