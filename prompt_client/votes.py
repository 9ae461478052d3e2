"""
Local record of the votes this user has cast.

Keeps at most one direction per prompt id in a small JSON file. The ledger is
advisory: it only stops the client from offering a second vote and is never
sent to the service.
"""

import json
from pathlib import Path
from typing import Dict, Optional, Union

from loguru import logger
from typing_extensions import Literal

VoteDirection = Literal["up", "down"]
DIRECTIONS = ("up", "down")


class VoteLedger:
    """
    Maps prompt ids to the direction voted.

    Args:
        path: JSON file backing the ledger. ``None`` keeps it in memory only.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path).expanduser() if path is not None else None
        self._memory: Dict[str, str] = {}

    def _read(self) -> Dict[str, str]:
        if self.path is None:
            return dict(self._memory)
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(f"Could not read vote ledger {self.path}: {e}")
            return {}
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning(f"Vote ledger {self.path} is corrupt; treating it as empty")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if v in DIRECTIONS}

    def _write(self, store: Dict[str, str]) -> None:
        if self.path is None:
            self._memory = dict(store)
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(store, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write vote ledger {self.path}: {e}")

    def has_voted(self, prompt_id: str) -> bool:
        if not prompt_id:
            return False
        return prompt_id in self._read()

    def get_vote(self, prompt_id: str) -> Optional[str]:
        if not prompt_id:
            return None
        return self._read().get(prompt_id)

    def record_vote(self, prompt_id: str, direction: VoteDirection) -> bool:
        """
        Record a vote unless one already exists for ``prompt_id``.

        Returns:
            bool: True if the vote was recorded, False if an earlier vote was kept.
        """
        if not prompt_id:
            return False
        if direction not in DIRECTIONS:
            raise ValueError(f"direction must be one of {DIRECTIONS}, got {direction!r}")
        store = self._read()
        if prompt_id in store:
            return False
        store[prompt_id] = direction
        self._write(store)
        return True

    def clear_vote(self, prompt_id: str) -> None:
        store = self._read()
        if prompt_id in store:
            del store[prompt_id]
            self._write(store)
