from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class Profile:
    account: str
    name: Optional[str] = None
    avatar: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.account

    def matches(self, query: str) -> bool:
        query = query.strip().lower()
        if not query:
            return True
        return query in self.account.lower() or query in (self.name or "").lower()


def search(profiles: Iterable[Profile], query: str, exclude: Iterable[Profile] = ()) -> List[Profile]:
    excluded = {p.account for p in exclude}
    return [p for p in profiles if p.account not in excluded and p.matches(query)]


@dataclass(frozen=True)
class UserPickerModel:
    """Selection state of a single user picker."""
    selected: Optional[Profile] = None
    query: str = ""

    def select(self, profile: Profile) -> "UserPickerModel":
        return replace(self, selected=profile, query="")

    def clear(self) -> "UserPickerModel":
        return replace(self, selected=None)

    def with_query(self, query: str) -> "UserPickerModel":
        return replace(self, query=query)

    def is_empty(self) -> bool:
        return self.selected is None


@dataclass(frozen=True)
class MultipleUserPickerModel:
    """Selection state of a picker that accepts several users."""
    selected: Tuple[Profile, ...] = ()
    query: str = ""

    def select(self, profile: Profile) -> "MultipleUserPickerModel":
        if any(p.account == profile.account for p in self.selected):
            return replace(self, query="")
        return replace(self, selected=self.selected + (profile,), query="")

    def remove(self, profile: Profile) -> "MultipleUserPickerModel":
        return replace(self, selected=tuple(p for p in self.selected if p.account != profile.account))

    def with_query(self, query: str) -> "MultipleUserPickerModel":
        return replace(self, query=query)

    def is_empty(self) -> bool:
        return not self.selected
