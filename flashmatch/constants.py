"""
Quiz engine constants.

Static values shared by the validator, the question builder and the
settings layer. No runtime configuration here - see config.py for that.
"""

# A card needs a question face and an answer face.
MIN_FACE_COUNT: int = 2

# Choices shown per question when nothing else is configured
# (the correct answer plus three distractors).
DEFAULT_CHOICE_COUNT: int = 4

# Smallest choice count the builder may fall back to.
DEFAULT_MIN_CHOICE_COUNT: int = 2

# Separators used when a subdivided face is shown in full.
DEFAULT_FACE_SEPARATOR: str = ", "
COMMA_FACE_SEPARATOR: str = "; "

DECK_FILE_SUFFIXES = (".json", ".yaml", ".yml")
