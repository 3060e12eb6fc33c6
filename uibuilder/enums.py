"""Ordinal <-> member-name tables for the runtime's UI enums.

The serializer and the parser share these tables, so an ordinal written as
``mod.UIAnchor.TopLeft`` always parses back to the same number.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterator, Optional, Tuple, Type


class UIAnchor(IntEnum):
    BottomCenter = 0
    BottomLeft = 1
    BottomRight = 2
    Center = 3
    CenterLeft = 4
    CenterRight = 5
    TopCenter = 6
    TopLeft = 7
    TopRight = 8


@dataclass(frozen=True)
class EnumTable:
    """Bidirectional table for one runtime enum (``mod.<name>.<member>``)."""

    name: str
    members: Tuple[str, ...]
    _ordinals: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_ordinals", {member: idx for idx, member in enumerate(self.members)}
        )

    @classmethod
    def from_enum(cls, enum_cls: Type[IntEnum]) -> "EnumTable":
        ordered = sorted(enum_cls, key=int)
        if [int(member) for member in ordered] != list(range(len(ordered))):
            raise ValueError(f"{enum_cls.__name__} ordinals must be contiguous from 0")
        return cls(enum_cls.__name__, tuple(member.name for member in ordered))

    def member_name(self, ordinal: object) -> Optional[str]:
        if isinstance(ordinal, bool) or not isinstance(ordinal, int):
            return None
        if 0 <= ordinal < len(self.members):
            return self.members[ordinal]
        return None

    def ordinal(self, member: str) -> Optional[int]:
        return self._ordinals.get(member)

    def __contains__(self, ordinal: object) -> bool:
        return self.member_name(ordinal) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.members)

    def __len__(self) -> int:
        return len(self.members)


UI_ANCHOR = EnumTable.from_enum(UIAnchor)

UI_BG_FILL = EnumTable(
    "UIBgFill",
    (
        "Blur",
        "GradientBottom",
        "GradientLeft",
        "GradientRight",
        "GradientTop",
        "None",
        "OutlineThick",
        "OutlineThin",
        "Solid",
    ),
)

UI_BUTTON_EVENT = EnumTable(
    "UIButtonEvent",
    ("ButtonDown", "ButtonUp", "FocusIn", "FocusOut", "HoverIn", "HoverOut"),
)

UI_DEPTH = EnumTable("UIDepth", ("AboveGameUI", "BelowGameUI"))

UI_IMAGE_TYPE = EnumTable(
    "UIImageType",
    (
        "CrownOutline",
        "CrownSolid",
        "None",
        "QuestionMark",
        "RifleAmmo",
        "SelfHeal",
        "SpawnBeacon",
        "TEMP_PortalIcon",
    ),
)

ENUM_TABLES: Dict[str, EnumTable] = {
    table.name: table
    for table in (UI_ANCHOR, UI_BG_FILL, UI_BUTTON_EVENT, UI_DEPTH, UI_IMAGE_TYPE)
}


def enum_table(name: str) -> Optional[EnumTable]:
    return ENUM_TABLES.get(name)
