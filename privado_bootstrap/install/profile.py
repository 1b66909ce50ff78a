"""
Shell profile PATH management for unprivileged installs.

Exactly one profile file is edited per run. Candidates are probed in a fixed
order and the last one that exists is the target; when none exist the PATH
line goes to ``.bashrc``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from ..core.exceptions import FilesystemError

logger = logging.getLogger(__name__)

PROFILE_CANDIDATES = (".profile", ".bash_profile", ".zshrc")
FALLBACK_PROFILE = ".bashrc"


@dataclass
class ProfileUpdate:
    """Outcome of a profile update."""

    profile_path: Path
    """Profile file selected as the PATH target"""

    appended: bool
    """Whether the export line was written"""

    fallback: bool = False
    """Whether no candidate existed and the fallback profile was used"""


def export_line(bin_dir: Path) -> str:
    """The line added to a profile to put bin_dir on PATH."""
    return f"export PATH=$PATH:{bin_dir}"


class ShellProfileUpdater:
    """
    Adds the install bin directory to PATH through a shell profile.

    Example:
        >>> updater = ShellProfileUpdater(Path.home(), Path.home() / ".privado")
        >>> update = updater.update()
        >>> print(update.profile_path)
    """

    def __init__(
        self,
        home: Path,
        install_root: Path,
        candidates: Sequence[str] = PROFILE_CANDIDATES,
        fallback: str = FALLBACK_PROFILE,
    ):
        """
        Initialize updater.

        Args:
            home: Home directory holding the profile files
            install_root: Install root; its bin/ directory goes on PATH
            candidates: Profile file names in precedence order
            fallback: Profile file used when no candidate exists
        """
        self.home = home
        self.install_root = install_root
        self.bin_dir = install_root / "bin"
        self.candidates = tuple(candidates)
        self.fallback = fallback

    @property
    def marker(self) -> str:
        """Substring that means a profile already references the install."""
        return f"/{self.install_root.name}"

    def select_profile(self) -> Optional[Path]:
        """
        Pick the target profile: the last candidate that exists.

        Returns:
            Path of the selected profile, or None if no candidate exists
        """
        selected = None
        for name in self.candidates:
            candidate = self.home / name
            if candidate.is_file():
                selected = candidate
        return selected

    def references_install(self, profile_path: Path) -> bool:
        """Check whether profile_path already mentions the install directory."""
        try:
            content = profile_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise FilesystemError(f"Cannot read {profile_path}: {e}") from e
        return self.marker in content

    def update(self) -> ProfileUpdate:
        """
        Add the PATH export to the selected profile.

        The selected candidate is left alone if it already references the
        install; the fallback profile is appended to unconditionally.

        Returns:
            ProfileUpdate describing what was done

        Raises:
            FilesystemError: If the profile cannot be read or written
        """
        selected = self.select_profile()

        if selected is None:
            target = self.home / self.fallback
            logger.debug(f"No shell profile found, falling back to {target}")
            self._append(target)
            return ProfileUpdate(profile_path=target, appended=True, fallback=True)

        if self.references_install(selected):
            logger.info(f"{selected} already adds {self.bin_dir} to PATH")
            return ProfileUpdate(profile_path=selected, appended=False)

        self._append(selected)
        return ProfileUpdate(profile_path=selected, appended=True)

    def _append(self, profile_path: Path) -> None:
        """Append the export line, starting it on a fresh line."""
        line = export_line(self.bin_dir)
        try:
            prefix = ""
            if profile_path.exists():
                existing = profile_path.read_bytes()
                if existing and not existing.endswith(b"\n"):
                    prefix = "\n"
            with open(profile_path, "a", encoding="utf-8") as f:
                f.write(f"{prefix}{line}\n")
        except OSError as e:
            raise FilesystemError(f"Failed to update {profile_path}: {e}") from e

        logger.info(f"Added {self.bin_dir} to PATH in {profile_path}")
