"""
Static validator directory adapter - Implements ValidatorDirectory protocol.

Serves a fixed validator set, either passed in directly or loaded from a
JSON file holding a list of validator records.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from src.domain.models import ValidatorRecord

logger = logging.getLogger(__name__)


class StaticValidatorDirectory:
    """
    Implements ValidatorDirectory protocol over an in-memory validator set.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, validators: Iterable[ValidatorRecord] = ()) -> None:
        self._validators = {validator.address: validator for validator in validators}

    @classmethod
    def from_file(cls, path: str | Path) -> "StaticValidatorDirectory":
        """
        Load validators from a JSON file.

        The file holds a list of objects with address, commission,
        max_commission and max_change_rate.

        Raises:
            RuntimeError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            records = json.loads(path.read_text())
            validators = [ValidatorRecord.from_dict(record) for record in records]
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise RuntimeError(f"Failed to load validator set: {path}") from e

        logger.info("Loaded %d validator(s) from %s", len(validators), path)
        return cls(validators)

    def get_validator(self, address: str) -> ValidatorRecord | None:
        return self._validators.get(address)

    def __len__(self) -> int:
        return len(self._validators)
