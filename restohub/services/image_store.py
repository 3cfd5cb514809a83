"""Recipe image storage on the local media directory."""

from __future__ import annotations

import logging
from pathlib import Path

from restohub.core.config import settings

logger = logging.getLogger(__name__)

RECIPE_IMAGE_DIR = "recipes"


def recipe_image_name(recipe_id: int, original_filename: str | None) -> str:
    extension = "png"
    if original_filename and "." in original_filename:
        extension = original_filename.rsplit(".", 1)[-1].lower() or "png"
    return f"RCP-{recipe_id:03d}.{extension}"


def save_recipe_image(recipe_id: int, original_filename: str | None, content: bytes) -> str:
    """Write the image and return its public URL."""
    file_name = recipe_image_name(recipe_id, original_filename)
    target_dir = Path(settings.media_root) / RECIPE_IMAGE_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / file_name).write_bytes(content)
    return f"{settings.media_url.rstrip('/')}/{RECIPE_IMAGE_DIR}/{file_name}"


def remove_recipe_image(image_url: str | None) -> bool:
    """Delete a stored image referenced by ``image_url``; external URLs are ignored."""
    prefix = f"{settings.media_url.rstrip('/')}/{RECIPE_IMAGE_DIR}/"
    if not image_url or not image_url.startswith(prefix):
        return False
    path = Path(settings.media_root) / RECIPE_IMAGE_DIR / image_url[len(prefix):]
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError:
        logger.warning("Could not delete recipe image %s", path, exc_info=True)
        return False
    return True
