import os
import json
import logging
from typing import Dict, Optional

from triebpe.errors import StorageError


def load_vocabulary(path: str) -> Optional[Dict[str, int]]:
    """Read a flat {token: id} JSON vocabulary. Returns None if `path` does not exist."""
    if not os.path.exists(path):
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            vocab = json.load(f)
    except (OSError, ValueError) as e:
        raise StorageError(f"Could not read vocabulary from {path}: {e}") from e

    if not isinstance(vocab, dict) or not all(
        isinstance(k, str) and isinstance(v, int) and not isinstance(v, bool)
        for k, v in vocab.items()
    ):
        raise StorageError(f"{path} is not a flat token -> id mapping")

    logging.info(f"Vocabulary of {len(vocab)} tokens loaded from {path}")
    return vocab


def save_vocabulary(path: str, vocab: Dict[str, int]) -> None:
    """Write the whole vocabulary to `path`, replacing previous content."""
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(vocab, f, ensure_ascii=False)
    except OSError as e:
        raise StorageError(f"Could not write vocabulary to {path}: {e}") from e

    logging.info(f"Vocabulary saved to {path}")
