import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+")
ISBN_PATTERN = re.compile(r"[0-9]{10}|[0-9]{13}")


class ISBNValidator:
    """Format check for ISBNs typed at the console: 10 or 13 digits, hyphens allowed.
    No checksum is verified.
    """

    @staticmethod
    def normalize_isbn(raw: Optional[str]) -> str:
        if raw is None:
            return ""
        return raw.strip().replace("-", "")

    @staticmethod
    def is_valid_isbn(isbn: Optional[str]) -> bool:
        if not isbn:
            return False
        return ISBN_PATTERN.fullmatch(ISBNValidator.normalize_isbn(isbn)) is not None


class EmailValidator:

    @staticmethod
    def is_valid_email(email: Optional[str]) -> bool:
        if email is None:
            return False
        return EMAIL_PATTERN.fullmatch(email) is not None


class TextValidator:
    """Basic text checks for member fields."""

    @staticmethod
    def validate_name(name: Optional[str]) -> bool:
        if name is None:
            return False
        return bool(name.strip())

    @staticmethod
    def parse_positive_int(raw: Optional[str]) -> Optional[int]:
        # console input for pages, duration and issue numbers
        if raw is None:
            return None
        t = raw.strip()
        if not t.isdigit():
            return None
        value = int(t)
        return value if value > 0 else None
