"""Generate short, human-friendly pickup codes."""
import secrets

# Uppercase letters without O, I and L, which read as 0 and 1 on a label
ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ"
CODE_LENGTH = 3


def generate_code(length: int = CODE_LENGTH) -> str:
    """
    Generate a random pickup code.

    Each character is drawn uniformly from ALPHABET using the secrets
    module, so codes cannot be predicted from earlier ones. With the
    default length there are 23**3 = 12,167 possible codes, so callers
    must check for collisions within an event.
    """
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def normalize_code(code: str) -> str:
    """Normalize user-typed input for lookup (case-insensitive)."""
    return code.strip().upper()
