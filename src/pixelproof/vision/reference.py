"""Reference screenshot storage.

Loads named reference screenshots and writes the diff image produced by a
failed comparison. Writing the diff is best-effort: a failure is logged and
never interrupts the comparison.
"""

import logging
from pathlib import Path

from pixelproof.config import get_settings
from pixelproof.verification.errors import ReferenceNotFoundError

logger = logging.getLogger(__name__)


class ReferenceStore:
    """Filesystem access for reference screenshots and diff artifacts.

    Usage:
        store = ReferenceStore("tests/reference-screenshots")
        reference = store.load("header.png")
        store.write_diff(diff_png)
    """

    def __init__(
        self,
        reference_dir: str | Path | None = None,
        diff_path: str | Path | None = None,
    ) -> None:
        """Initialize reference store.

        Args:
            reference_dir: Directory with reference screenshots (default from settings).
            diff_path: File the diff image is written to (default from settings).
        """
        settings = get_settings()
        self.reference_dir = Path(reference_dir or settings.reference_dir)
        self.diff_path = Path(diff_path or settings.diff_artifact_path)

    def path_for(self, name: str) -> Path:
        """Resolve the path of a reference screenshot."""
        return self.reference_dir / name

    def load(self, name: str) -> bytes:
        """Read a reference screenshot.

        Args:
            name: File name relative to the reference directory.

        Returns:
            PNG bytes.

        Raises:
            ReferenceNotFoundError: If the file does not exist.
        """
        path = self.path_for(name)
        if not path.is_file():
            raise ReferenceNotFoundError(name, str(path))
        return path.read_bytes()

    def write_diff(self, png_bytes: bytes) -> Path | None:
        """Write the diff image.

        Returns:
            The written path, or None if writing failed.
        """
        try:
            self.diff_path.parent.mkdir(parents=True, exist_ok=True)
            self.diff_path.write_bytes(png_bytes)
        except OSError as e:
            logger.warning(f"Could not write diff image to {self.diff_path}: {e}")
            return None

        logger.info(f"Diff image written to {self.diff_path}")
        return self.diff_path


def load_reference_screenshot(name: str) -> bytes:
    """Read a reference screenshot from the configured directory."""
    return ReferenceStore().load(name)
