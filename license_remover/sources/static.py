"""Discovery sources that do not touch the network."""

from collections.abc import Iterable
from pathlib import Path

from ..core.errors import DiscoveryError
from ..observability.logger import get_logger

logger = get_logger(__name__)


class IdentifierFileSource:
    """Package ids listed in a text file, one per line.

    Blank lines and lines starting with '#' are ignored. Duplicates are
    dropped, file order is kept.
    """

    name = "file"

    def __init__(self, path: Path):
        self.path = path

    async def discover(self) -> list[str]:
        try:
            with open(self.path, encoding="utf-8") as f:
                lines = [line.strip() for line in f]
        except OSError as e:
            raise DiscoveryError(f"Cannot read {self.path}: {e}", source=self.name) from e

        ids = list(dict.fromkeys(line for line in lines if line and not line.startswith("#")))
        logger.info(f"Loaded {len(ids)} package ids from {self.path}")
        return ids


class StaticSource:
    """In-memory identifier list."""

    name = "static"

    def __init__(self, identifiers: Iterable[str]):
        self._identifiers = list(identifiers)

    async def discover(self) -> list[str]:
        return list(self._identifiers)
