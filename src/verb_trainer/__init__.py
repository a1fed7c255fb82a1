"""Top-level package for the German verb trainer core.

Provides subpackages:
- verb_trainer.core – models, catalog input validation, serialization
- verb_trainer.catalog – in-memory verb catalog and its loaders
- verb_trainer.generation – question generation
- verb_trainer.scoring – answer validation and quiz scoring
- verb_trainer.ledger – local attempt log, statistics, preferences
- verb_trainer.sync – remote reconciliation
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text(encoding="utf-8")
        except OSError:
            content = ""
        for line in content.splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.1.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("verb-trainer")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 verb-trainer contributors. Licensed under the MIT License"

from .catalog import VerbCatalog, VerbFilter, load_catalog
from .generation import QuestionGenerator
from .scoring import ScoringEngine, VocabularyScoringEngine
from .ledger import AttemptLedger, MemoryStore, JsonFileStore
from .sync import SyncReconciler
from .session import TrainerSession
from .config import Settings, load_settings

__all__: list[str] = [
    "__version__",
    "VerbCatalog",
    "VerbFilter",
    "load_catalog",
    "QuestionGenerator",
    "ScoringEngine",
    "VocabularyScoringEngine",
    "AttemptLedger",
    "MemoryStore",
    "JsonFileStore",
    "SyncReconciler",
    "TrainerSession",
    "Settings",
    "load_settings",
]
