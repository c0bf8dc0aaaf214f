"""Migration script discovery."""

import os
import re
from dataclasses import dataclass
from typing import List, Optional

from tenantry.migration.errors import DiscoveryError

DEFAULT_PATTERN = r"^\d{8}_\d{3}_.+\.py$"


@dataclass(frozen=True)
class MigrationScript:
    """Represents a discovered migration script file.

    :param name: the script filename without the ``.py`` extension, used as the revision name
    :param path: the absolute path to the script file
    """

    name: str
    path: str


class ScriptDiscovery:
    """Scans a directory for migration scripts matching a naming pattern.

    The same scripts are applied to every tenant, so discovery happens once per runner and is shared by the
    parallel workers.
    """

    def __init__(self, script_dir: str, pattern: Optional[str] = None):
        """Construct a script discovery instance.

        :param script_dir: path to the directory containing migration scripts
        :param pattern: regex pattern filenames must match, defaults to ``20240315_001_description.py``
        :raises DiscoveryError: if the directory does not exist or the pattern does not compile
        """
        if not os.path.isdir(script_dir):
            raise DiscoveryError(f"Migration script directory does not exist: {script_dir}")
        self._script_dir = os.path.abspath(script_dir)
        try:
            self._pattern = re.compile(pattern or DEFAULT_PATTERN)
        except re.error as exc:
            raise DiscoveryError(f"Invalid migration script pattern '{pattern}': {exc}") from exc

    @property
    def script_dir(self) -> str:
        """Return the absolute path of the scanned directory."""
        return self._script_dir

    def discover(self) -> List[MigrationScript]:
        """Scan the script directory and return matching scripts in sorted order.

        :returns: a list of ``MigrationScript`` sorted lexicographically by name
        """
        names = sorted(f for f in os.listdir(self._script_dir) if self._pattern.match(f))
        return [MigrationScript(name=os.path.splitext(f)[0], path=os.path.join(self._script_dir, f)) for f in names]
