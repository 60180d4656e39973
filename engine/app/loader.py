from __future__ import annotations
import importlib
import logging
from pathlib import Path
import yaml
from typing import Dict, Any

logger = logging.getLogger(__name__)

GAMES_DIR = Path(__file__).resolve().parents[2] / "games"


def load_game_manifest(game_root: Path) -> Dict[str, Any]:
    manifest = game_root / "manifest.yaml"
    if not manifest.exists():
        raise FileNotFoundError(f"Missing manifest.yaml in {game_root}")
    with open(manifest, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"{manifest} must contain a mapping, got {type(data).__name__}")
    logger.debug("manifest for %s: %s", game_root.name, data)
    return data


def load_game_module(game_root: Path, package: str = "games"):
    """
    Imports <package>.<id>.main and returns the module object.
    The module must define a get_game() -> Game factory.
    """
    if not (game_root / "main.py").exists():
        raise FileNotFoundError(f"Missing main.py in {game_root}")
    module = importlib.import_module(f"{package}.{game_root.name}.main")
    if not hasattr(module, "get_game"):
        raise AttributeError("Game module must define get_game()")
    return module
