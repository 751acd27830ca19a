import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

import yaml

from .constants import DECK_FILE_SUFFIXES
from .deck_models import DeckLoaderConfig, RawDeckSource
from .deck_validators import validate_deck, validate_raw_decks
from .exceptions import DeckError, DeckFileError
from .models import Deck

logger = logging.getLogger(__name__)


def is_deck_file(path: Path) -> bool:
    return path.suffix.lower() in DECK_FILE_SUFFIXES


def read_raw_deck(file_path: Path) -> Any:
    """
    Read and decode one deck file. JSON by default, YAML for .yaml/.yml.

    Raises:
        DeckFileError: If the file is missing, unreadable or not valid
            JSON/YAML.
    """
    try:
        content = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise DeckFileError("File not found.", source=file_path) from None
    except (IOError, UnicodeDecodeError) as e:
        raise DeckFileError(f"Could not read file: {e}", source=file_path) from e

    if file_path.suffix.lower() in (".yaml", ".yml"):
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DeckFileError(
                f"Invalid YAML syntax: {e}", source=file_path
            ) from e

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise DeckFileError(f"Invalid JSON syntax: {e}", source=file_path) from e


def load_deck_file(
    file_path: Path, config: Optional[DeckLoaderConfig] = None
) -> Deck:
    """Read, decode and validate a single deck file."""
    config = config or DeckLoaderConfig()
    raw_deck = read_raw_deck(file_path)
    return validate_deck(
        raw_deck, source=file_path, default_name=config.default_deck_name
    )


def discover_deck_files(
    paths: Iterable[RawDeckSource],
    config: Optional[DeckLoaderConfig] = None,
) -> Tuple[List[Path], List[DeckError]]:
    """
    Expand files and directories into a list of deck files.

    Directories contribute their .json/.yaml/.yml files (recursively,
    unless disabled), in sorted order. A file given explicitly with
    another extension is ignored. A missing path is reported as an error.
    """
    config = config or DeckLoaderConfig()
    files: List[Path] = []
    errors: List[DeckError] = []

    for raw_path in paths:
        path = Path(raw_path)
        if path.is_dir():
            pattern = "**/*" if config.recursive else "*"
            files.extend(
                sorted(p for p in path.glob(pattern) if p.is_file() and is_deck_file(p))
            )
        elif path.is_file():
            if is_deck_file(path):
                files.append(path)
            else:
                logger.debug("Ignoring non-deck file %s", path)
        else:
            errors.append(
                DeckFileError("Path does not exist.", source=path)
            )

    return files, errors


def _read_all(
    deck_files: List[Path],
    config: DeckLoaderConfig,
    all_errors: List[DeckError],
) -> List[Tuple[Path, Any]]:
    raw_decks: List[Tuple[Path, Any]] = []
    for file_path in deck_files:
        try:
            raw_decks.append((file_path, read_raw_deck(file_path)))
        except DeckFileError as e:
            if config.fail_fast:
                raise
            logger.warning("Skipping deck file: %s", e)
            all_errors.append(e)
    return raw_decks


def load_decks(
    paths: Iterable[RawDeckSource],
    config: Optional[DeckLoaderConfig] = None,
) -> Tuple[List[Deck], List[DeckError]]:
    """
    Load and validate every deck found under `paths`.

    A deck that fails is skipped and its error collected; loading goes on
    with the remaining files. A deck whose name was already loaded is
    skipped with a DuplicateDeckNameError.

    Parameters:
        paths (Iterable[RawDeckSource]): Deck files and/or directories.
        config (Optional[DeckLoaderConfig]): Loader options; with
            `fail_fast` the first error is raised instead of collected.

    Returns:
        Tuple[List[Deck], List[DeckError]]: The valid decks in load order,
        and the errors for the files that were skipped.
    """
    config = config or DeckLoaderConfig()
    deck_files, all_errors = discover_deck_files(paths, config)
    if config.fail_fast and all_errors:
        raise all_errors[0]

    logger.info("Found %s deck files to load.", len(deck_files))

    raw_decks = _read_all(deck_files, config, all_errors)
    decks, validation_errors = validate_raw_decks(
        raw_decks,
        default_name=config.default_deck_name,
        fail_fast=config.fail_fast,
    )
    for error in validation_errors.values():
        logger.warning("Skipping deck: %s", error)
        all_errors.append(error)

    logger.info(
        "Loaded %s decks with %s cards from %s files with %s errors.",
        len(decks),
        sum(len(deck) for deck in decks),
        len(deck_files),
        len(all_errors),
    )
    return decks, all_errors
