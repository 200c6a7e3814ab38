from typing import Dict, List, Sequence

from .exceptions import LoadError, ValidationError
from .loader import DataLoader
from .models import CharacterGroup, CharacterList, KanaEntry, KanjiEntry

ROW_SIZE = 5
UNCATEGORIZED = "Uncategorized"

# Rows that do not fit the regular five-column grid.
SPECIAL_ROMAJI_GROUPS = [
    ["ya", "yu", "yo"],
    ["wa", "wo", "n"],
    ["kya", "kyu", "kyo"],
    ["sha", "shu", "sho"],
    ["cha", "chu", "cho"],
    ["nya", "nyu", "nyo"],
    ["hya", "hyu", "hyo"],
    ["mya", "myu", "myo"],
    ["rya", "ryu", "ryo"],
    ["gya", "gyu", "gyo"],
    ["ja", "ju", "jo"],
    ["bya", "byu", "byo"],
    ["pya", "pyu", "pyo"],
]

LIST_TITLES = {
    "hiragana": "Hiragana",
    "katakana": "Katakana",
    "kanji": "Kanji",
}


def group_kana(entries: Sequence[KanaEntry]) -> List[CharacterGroup]:
    """Regular kana in rows of five, followed by one row per special group."""
    special_romaji = {romaji for group in SPECIAL_ROMAJI_GROUPS for romaji in group}
    regular = [e for e in entries if e.romanization not in special_romaji]

    groups = [
        CharacterGroup(columns=ROW_SIZE, entries=regular[i:i + ROW_SIZE])
        for i in range(0, len(regular), ROW_SIZE)
    ]
    for group in SPECIAL_ROMAJI_GROUPS:
        members = [e for e in entries if e.romanization in group]
        if members:
            groups.append(CharacterGroup(columns=len(members), entries=members))
    return groups


def group_kanji(entries: Sequence[KanjiEntry]) -> List[CharacterGroup]:
    """One section per category, in the order categories first appear."""
    categories: Dict[str, List[KanjiEntry]] = {}
    for entry in entries:
        categories.setdefault(entry.category or UNCATEGORIZED, []).append(entry)
    return [
        CharacterGroup(title=name, columns=ROW_SIZE, entries=members)
        for name, members in categories.items()
    ]


def build_list(list_type: str, loader: DataLoader) -> CharacterList:
    if list_type not in LIST_TITLES:
        raise ValidationError("Please choose Hiragana, Katakana, or Kanji.")

    label = LIST_TITLES[list_type]
    entries = loader.load([list_type])[list_type]
    if not entries:
        return CharacterList(
            list_type=list_type,
            title=f"{label} List",
            groups=[],
            message=f"No {label} data available.",
        )

    if list_type == "kanji":
        if not all(isinstance(e, KanjiEntry) for e in entries):
            raise LoadError(f"Dataset {list_type} does not contain kanji entries.")
        groups = group_kanji(entries)
    else:
        if not all(isinstance(e, KanaEntry) for e in entries):
            raise LoadError(f"Dataset {list_type} does not contain kana entries.")
        groups = group_kana(entries)
    return CharacterList(list_type=list_type, title=f"{label} List", groups=groups)
