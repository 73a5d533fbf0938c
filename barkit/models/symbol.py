"""Instrument identity."""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Symbol:
    """Opaque instrument identity, compared by name and reference id."""
    name: str
    ref_id: Optional[Union[str, int]] = None

    def __post_init__(self):
        if self.ref_id is not None and (
            isinstance(self.ref_id, bool) or not isinstance(self.ref_id, (str, int))
        ):
            raise ValueError(
                f"ref_id must be str or int, got {type(self.ref_id).__name__}"
            )

    def __str__(self) -> str:
        return self.name
