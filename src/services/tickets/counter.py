"""
Ticket Counter Store
====================

Persists the next ticket number as `{"counter": <int>}` in a JSON file.

DESIGN:
    The counter is the only durable state of the ticket system. A number
    is persisted before it is handed out, so a crash can leave a gap in
    the numbering but can never hand the same number out twice.
"""

import json
import os
from pathlib import Path
from typing import Union

from src.core.logger import logger

from .constants import FIRST_TICKET_ID


class CounterStore:
    """
    Load/save access to the persisted ticket counter.

    The stored value is the number the next ticket will receive.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._value: int = self.load()

    @property
    def value(self) -> int:
        """Number the next ticket will receive."""
        return self._value

    def load(self) -> int:
        """
        Read the persisted counter.

        Returns:
            The stored counter, or 1 if the file is missing, unreadable,
            or does not hold a positive integer under "counter".
        """
        if not self.path.exists():
            return FIRST_TICKET_ID

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ticket Counter Unreadable", [
                ("Path", str(self.path)),
                ("Error", str(e)[:100]),
                ("Using", str(FIRST_TICKET_ID)),
            ])
            return FIRST_TICKET_ID

        counter = data.get("counter") if isinstance(data, dict) else None
        if isinstance(counter, bool) or not isinstance(counter, int) or counter < FIRST_TICKET_ID:
            logger.warning("Ticket Counter Malformed", [
                ("Path", str(self.path)),
                ("Using", str(FIRST_TICKET_ID)),
            ])
            return FIRST_TICKET_ID

        return counter

    def save(self, value: int) -> None:
        """
        Overwrite the persisted counter.

        Writes to a sibling temp file and renames it over the target so a
        crash mid-write never leaves a truncated file behind.

        Raises:
            OSError: If the file cannot be written.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump({"counter": value}, f)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, self.path)

    def allocate(self) -> int:
        """
        Hand out the next ticket number.

        The incremented counter is persisted before the number is
        returned; if persisting fails nothing is handed out.

        Returns:
            The allocated ticket number.

        Raises:
            OSError: If the new counter cannot be persisted.
        """
        ticket_id = self._value
        self.save(ticket_id + 1)
        self._value = ticket_id + 1
        return ticket_id


__all__ = ["CounterStore"]
