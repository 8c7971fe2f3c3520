"""
File-backed persistence: one floor plan document per show id, a read-only
vendor directory per show, and uploaded background images.

Show ids are percent-encoded into file names. Layout under the data directory::

    floorplans/<show_id>.json
    vendors/<show_id>.json
    images/<show_id>/<file>
"""
from __future__ import annotations
import json, logging, os, shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import quote

from .errors import PersistenceError
from .models import FloorPlanConfig, Vendor
from .state import ConfigState, default_config
from .utils import data_dir

logger = logging.getLogger(__name__)

def _safe_name(show_id: str) -> str:
    # one-to-one: distinct ids map to distinct files
    show_id = (show_id or "").strip()
    if not show_id:
        raise PersistenceError("Show id is empty")
    return quote(show_id, safe="-_").replace(".", "%2E")


class FloorPlanStore:
    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root else data_dir()
        self.state = ConfigState()

    def _plan_path(self, show_id: str) -> Path:
        return self.root / "floorplans" / f"{_safe_name(show_id)}.json"

    def _vendor_path(self, show_id: str) -> Path:
        return self.root / "vendors" / f"{_safe_name(show_id)}.json"

    def image_dir(self, show_id: str) -> Path:
        return self.root / "images" / _safe_name(show_id)

    # ---- floor plan ----
    def load(self, show_id: str) -> FloorPlanConfig:
        path = self._plan_path(show_id)
        if not path.exists():
            logger.info("No floor plan for %s, using defaults", show_id)
            return default_config(show_id)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.exception("Loading %s failed", path)
            raise PersistenceError(f"Could not load floor plan: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"{path.name} is not a floor plan document")
        return self.state.deserialize(data, show_id)

    def save(self, config: FloorPlanConfig) -> FloorPlanConfig:
        """Overwrite the whole document (last save wins)."""
        path = self._plan_path(config.show_id)
        now = datetime.now(timezone.utc)
        data = self.state.serialize(config)
        data["updatedAt"] = now.isoformat()
        if not config.created_at:
            data["createdAt"] = now.isoformat()
        tmp = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except OSError as e:
            logger.exception("Saving %s failed", path)
            raise PersistenceError(f"Could not save floor plan: {e}") from e
        # stamp only once the write went through
        config.updated_at = now
        if not config.created_at:
            config.created_at = now
        logger.info("Saved floor plan %s (%d booths)", config.show_id, len(config.booths))
        return config

    # ---- vendor directory ----
    def vendors(self, show_id: str) -> List[Vendor]:
        path = self._vendor_path(show_id)
        if not path.exists():
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                rows = json.load(f)
        except (OSError, ValueError) as e:
            logger.exception("Loading vendors from %s failed", path)
            raise PersistenceError(f"Could not load vendors: {e}") from e
        out: List[Vendor] = []
        for r in rows if isinstance(rows, list) else []:
            if not isinstance(r, dict):
                logger.warning("Skipping malformed vendor row in %s", path)
                continue
            vid = str(r.get("id") or "").strip()
            if not vid:
                continue
            name = r.get("name") or r.get("companyName") or "Unknown"
            out.append(Vendor(vid, str(name), str(r.get("category") or "")))
        out.sort(key=lambda v: v.name.lower())
        return out

    # ---- background image ----
    def upload_background(self, show_id: str, source: Path) -> Tuple[str, int, int]:
        """Copy a raster image into the store; returns (ref, native width, native height)."""
        from .images import read_image_size

        source = Path(source)
        width, height = read_image_size(source)
        dest_dir = self.image_dir(show_id)
        dest = dest_dir / f"floorplan{source.suffix.lower()}"
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, dest)
        except OSError as e:
            logger.exception("Upload of %s failed", source)
            raise PersistenceError(f"Could not upload image: {e}") from e
        logger.info("Uploaded background %s (%dx%d)", dest, width, height)
        return str(dest), width, height
