from __future__ import annotations

import random
from typing import Sequence


DEFAULT_WORDS = [
    "house", "tree", "car", "dog", "cat", "sun", "moon", "star", "flower",
    "book", "chair", "table", "computer", "phone", "hat", "shoe", "shirt",
    "apple", "banana", "grape", "orange", "pizza", "burger", "coffee", "tea",
    "mountain", "river", "ocean", "cloud", "rain", "snow", "wind", "fire",
    "bird", "fish", "bear", "lion", "tiger", "zebra", "elephant", "giraffe",
    "rocket", "robot", "alien", "magic", "wizard", "castle", "knight", "dragon",
    "guitar", "piano", "drum", "violin", "saxophone", "trumpet", "flute",
    "camera", "television", "radio", "microphone", "headphones", "speaker",
    "bicycle", "motorcycle", "train", "airplane", "boat", "submarine", "bus",
    "doctor", "teacher", "engineer", "artist", "chef", "pilot", "police",
    "football", "basketball", "tennis", "soccer", "golf", "swimming", "boxing",
    "diamond", "ruby", "emerald", "sapphire", "pearl", "gold", "silver", "bronze",
    "pyramid", "sphinx", "statue", "fountain", "bridge", "tower",
    "ghost", "vampire", "werewolf", "zombie", "monster", "witch",
    "rainbow", "thunder", "lightning", "storm", "hurricane", "tornado", "volcano",
    "desert", "forest", "jungle", "swamp", "glacier", "canyon", "cave", "island",
]

# Shown before the drawer has picked a word.
PLACEHOLDER_HINT = "_ _ _ _ _"


def pick_words(words: Sequence[str], count: int) -> list[str]:
    """Random sample without replacement; duplicates in `words` are collapsed."""
    unique = list(dict.fromkeys(w for w in words if w))
    return random.sample(unique, min(count, len(unique)))


def mask_word(word: str) -> str:
    """Each letter becomes "_ ", everything else is kept as is.

    >>> mask_word("ice cream")
    '_ _ _  _ _ _ _ _'
    """
    return "".join("_ " if ch.isalpha() else ch for ch in word).strip()
