import secrets
import string

SYMBOLS = "!@#$%^&*()_+[]{}|;:,.<>?"

CHARACTER_CLASSES = (
    string.ascii_uppercase,
    string.ascii_lowercase,
    string.digits,
    SYMBOLS,
)

DEFAULT_LENGTH = 8

_random = secrets.SystemRandom()


def generate_password(length: int = DEFAULT_LENGTH) -> str:
    """
    Generate a random password with at least one uppercase letter, lowercase
    letter, digit and symbol. The remaining characters come from all four
    classes combined, then the whole thing is shuffled.
    """
    if length < len(CHARACTER_CLASSES):
        raise ValueError(
            f"Password length must be at least {len(CHARACTER_CLASSES)}, got {length}"
        )

    chars = [secrets.choice(charset) for charset in CHARACTER_CLASSES]

    alphabet = "".join(CHARACTER_CLASSES)
    chars.extend(secrets.choice(alphabet) for _ in range(length - len(chars)))

    _random.shuffle(chars)
    return "".join(chars)
