"""Choosing which settings profile each game runs with."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ikiru.config import Profile
from ikiru.title_id import TitleId

_log = logging.getLogger(__name__)


@dataclass
class GameCfg:
    """All known profiles and the active one for each title."""

    active: dict[TitleId, int] = field(default_factory=dict)
    profiles: list[Profile] = field(default_factory=list)

    def add_profile(self, profile: Profile) -> None:
        """Add a profile."""
        self.profiles.append(profile)

    def set_active(self, title: TitleId, profile: str | None = None) -> None:
        """Make a named profile active for a title; None means the unnamed one."""
        index = next(
            (
                i
                for i, candidate in enumerate(self.profiles)
                if candidate.title == title and candidate.name == profile
            ),
            None,
        )
        if index is not None:
            self.active[title] = index
        elif profile is None:
            self._insert_default(title)
        else:
            _log.error("failed to set profile for %s to %s", title, profile)

    def get_cfg(self, title: TitleId) -> Profile:
        """The active profile for a title, or a new default one."""
        index = self.active.get(title)
        if index is not None:
            return self.profiles[index]
        return self._insert_default(title)

    def _insert_default(self, title: TitleId) -> Profile:
        default = Profile(title=title)
        self.profiles.append(default)
        return default