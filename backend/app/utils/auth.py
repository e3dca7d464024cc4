from passlib.context import CryptContext

from ..core.config import settings

# Configure bcrypt rounds explicitly for predictable performance.
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time comparison of a password against its stored hash."""
    return pwd_context.verify(plain_password, hashed_password)


def normalize_email(email: str) -> str:
    """Return a normalized email address for comparison and storage."""
    return email.strip().lower()


def tokenize_card(card_number: str | None) -> str | None:
    """Reduce a card number to an opaque ``tok_<last4>`` reference."""
    if not card_number:
        return None
    digits = "".join(ch for ch in card_number if ch.isdigit())
    if len(digits) < 4:
        return None
    return f"tok_{digits[-4:]}"
