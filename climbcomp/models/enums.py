from enum import Enum


class Role(str, Enum):
    PARTICIPANT = "participant"
    ARBITER = "arbiter"
    ADMIN = "admin"


class Gender(str, Enum):
    MASCULI = "masculi"
    FEMENI = "femeni"


class Category(str, Enum):
    ABSOLUTA = "absoluta"
    SUB18 = "sub-18"
    UNIVERSITARI = "universitari"


class Difficulty(str, Enum):
    VERY_EASY = "Molt Fàcil"
    EASY = "Fàcil"
    MEDIUM = "Mitjà"
    HARD = "Difícil"
    # Finals tier: scored by attempt count instead of base_score
    SCOREABLE = "Puntuables"


class BlockColor(str, Enum):
    ROSA = "rosa"
    LILA = "lila"
    GROC = "groc"
    BLAU = "blau"
    VERD = "verd"
    VERMELL = "vermell"
    TARONJA = "taronja"
    TRANSPARENT = "transparent"
    NEGRE = "negre"
    GRIS = "gris"


# Display / grouping order, easiest first
DIFFICULTY_ORDER = [
    Difficulty.VERY_EASY,
    Difficulty.EASY,
    Difficulty.MEDIUM,
    Difficulty.HARD,
    Difficulty.SCOREABLE,
]
