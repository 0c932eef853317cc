"""syncgit - guided pull, stage, commit and push from any folder of a git repository."""

from importlib.metadata import version

try:
    __version__ = version("syncgit")
except Exception:
    __version__ = "0.0.0-dev"
