"""Build directory layout and bootstrap."""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildPaths:
    """Output locations under one build directory."""

    root: Path

    @property
    def json_dir(self) -> Path:
        return self.root / "json"

    @property
    def images_dir(self) -> Path:
        return self.root / "images"

    @property
    def metadata_file(self) -> Path:
        return self.json_dir / "_metadata.json"

    @property
    def rarity_file(self) -> Path:
        return self.root / "rarity.txt"

    def edition_json(self, edition: int) -> Path:
        return self.json_dir / f"{edition}.json"

    def edition_image(self, edition: int) -> Path:
        return self.images_dir / f"{edition}.png"


def build_setup(build_dir: Path | str) -> BuildPaths:
    """Recreate an empty build directory with json/ and images/ subfolders."""
    paths = BuildPaths(Path(build_dir))
    if paths.root.exists():
        logger.debug("Removing previous build at %s", paths.root)
        shutil.rmtree(paths.root)
    paths.json_dir.mkdir(parents=True)
    paths.images_dir.mkdir(parents=True)
    return paths
