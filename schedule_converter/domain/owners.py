# schedule_converter/domain/owners.py
from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from schedule_converter.domain.models import PlaceKey


class OwnerDirectory:
    """place (case-insensitive, exact) -> owner"""

    def __init__(self, pairs: Iterable[Tuple[str, str]] = ()):
        self._owners: Dict[str, str] = {}
        for place, owner in pairs:
            place = (place or "").strip()
            if not place:
                continue
            self._owners[place.lower()] = (owner or "").strip()

    def owner_of(self, place: str) -> str:
        return self._owners.get((place or "").strip().lower(), "")

    def owner_for(self, place: PlaceKey) -> str:
        """sector first, then center"""
        return self.owner_of(place.sector) or self.owner_of(place.center)

    def places(self) -> List[str]:
        return list(self._owners.keys())

    def __len__(self) -> int:
        return len(self._owners)
