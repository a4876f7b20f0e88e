import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_list(name: str, default: str) -> List[str]:
    return [part.strip() for part in os.getenv(name, default).split(",") if part.strip()]


@dataclass
class Settings:
    # Lending rules
    max_borrow_limit: int = int(os.getenv("LIBRARY_MAX_BORROW_LIMIT", "5"))
    default_borrow_days: int = int(os.getenv("LIBRARY_DEFAULT_BORROW_DAYS", "14"))
    max_renewal_times: int = int(os.getenv("LIBRARY_MAX_RENEWAL_TIMES", "2"))

    # Late fees
    late_fee_cap: float = float(os.getenv("LIBRARY_LATE_FEE_CAP", "50.0"))
    compound_rate: float = float(os.getenv("LIBRARY_COMPOUND_RATE", "1.05"))

    # Catalog
    categories: List[str] = field(
        default_factory=lambda: _env_list("LIBRARY_CATEGORIES", "Fiction,Non-Fiction,Reference,Periodicals")
    )
    load_sample_data: bool = _env_bool("LIBRARY_LOAD_SAMPLE_DATA", "True")

    # Application
    app_name: str = os.getenv("APP_NAME", "Library Console")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()


settings = Settings()
