import os
import sys
from pathlib import Path
from dataclasses import dataclass

# Lil helper function to create missing directories, returning the path for chaining.
def ensure_directory(path: Path):
    path.mkdir(parents=True,exist_ok=True)
    return path

# Picks the per-user base folder. TIMENOTES_HOME always wins, then APPDATA on Windows, then XDG_DATA_HOME
# (or ~/.local/share) everywhere else.
def _user_data_root():
    override = os.getenv("TIMENOTES_HOME")
    if override:
        return Path(override)
    if sys.platform == "win32":
        appdata = os.getenv("APPDATA")
        if not appdata:
            raise RuntimeError("Missing APPDATA environment variable, cannot determine data directories.")
        return Path(appdata) / "TimeNotes"
    xdg = os.getenv("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / "timenotes"

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    data: Path
    logs: Path

    @staticmethod
    def build():
        # Folder for all timenotes user-specific stuff (settings.json lives directly in here)
        data = ensure_directory(_user_data_root())
        logs = ensure_directory(data / "logs")

        return ProjectPaths(
            data = data,
            logs = logs,
        )
PATHS = ProjectPaths.build()
