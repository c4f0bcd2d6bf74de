import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Base directory
BASE_DIR = Path(__file__).parent.parent
PACKAGE_DIR = Path(__file__).parent


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    # --- Application Settings ---
    DOC_AUTHOR = os.getenv("DOC_AUTHOR", "Proposal Studio")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # --- Page Geometry (PDF points) ---
    PAGE_SIZE = os.getenv("PAGE_SIZE", "letter")
    PAGE_MARGIN = float(os.getenv("PAGE_MARGIN", "50"))

    # --- Typography ---
    # DejaVu fonts (bundled with matplotlib) cover non-Latin characters
    UNICODE_FONTS = _env_flag("UNICODE_FONTS")

    # --- Branding ---
    LOGO_DIR = Path(os.getenv("LOGO_DIR", str(PACKAGE_DIR / "assets" / "logos")))
    DEFAULT_LOGO_FILE = os.getenv("DEFAULT_LOGO_FILE", "default.png")
    POLARIS_LOGO_FILE = os.getenv("POLARIS_LOGO_FILE", "polaris.png")

    # --- Title Page ---
    DEFAULT_CONTACT_NAME = os.getenv("DEFAULT_CONTACT_NAME", "Not specified")

    # --- Export ---
    EXPORT_DIR = Path(os.getenv("EXPORT_DIR", str(BASE_DIR / "exports")))
