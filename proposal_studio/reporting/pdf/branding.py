"""
Header Branding.

Resolves which logo a company gets and draws it in the top-right corner
of every page. Branding is decorative: any failure to load or draw a
logo is logged and generation continues without it.
"""
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from reportlab.lib.utils import ImageReader

from proposal_studio.config import Config

from .document import Document


logger = logging.getLogger("ProposalStudio.Branding")

DEFAULT_ASSET = "default"
POLARIS_ASSET = "polaris"

LOGO_WIDTH = 80
LOGO_HEIGHT = 60
LOGO_TOP = 20
LOGO_RIGHT_SPACING = 20
LOGO_BOTTOM_GAP = 30


def _company_name(company) -> str:
    if company is None:
        return ""
    if isinstance(company, dict):
        return str(company.get("name") or "")
    return str(getattr(company, "name", "") or "")


def _company_branding_key(company) -> Optional[str]:
    if company is None:
        return None
    if isinstance(company, dict):
        return company.get("branding_key") or company.get("brandingKey")
    return getattr(company, "branding_key", None)


def legacy_asset_for(company_name: str) -> str:
    """Legacy rule: companies whose name mentions Polaris get its logo."""
    return POLARIS_ASSET if "polaris" in company_name.lower() else DEFAULT_ASSET


class BrandingRegistry:
    """Logo assets keyed by asset id, plus explicit company overrides.

    Images are loaded once at construction. A logo that cannot be read is
    kept as missing and simply not drawn.
    """

    def __init__(
        self,
        logo_files: Optional[Dict[str, Union[str, Path]]] = None,
        company_assets: Optional[Dict[str, str]] = None,
    ):
        if logo_files is None:
            logo_files = {
                DEFAULT_ASSET: Config.LOGO_DIR / Config.DEFAULT_LOGO_FILE,
                POLARIS_ASSET: Config.LOGO_DIR / Config.POLARIS_LOGO_FILE,
            }
        self.logo_paths = {asset_id: Path(path) for asset_id, path in logo_files.items()}
        self.company_assets = {
            name.strip().lower(): asset_id for name, asset_id in (company_assets or {}).items()
        }
        self._images: Dict[str, Optional[ImageReader]] = {}
        for asset_id, path in self.logo_paths.items():
            self._images[asset_id] = self._load(asset_id, path)

    @staticmethod
    def _load(asset_id: str, path: Path) -> Optional[ImageReader]:
        try:
            image = ImageReader(str(path))
            image.getSize()
            return image
        except Exception as e:
            logger.warning("Could not load logo '%s' from %s: %s", asset_id, path, e)
            return None

    def resolve_asset_id(self, company) -> str:
        """Branding key first, then configured company names, then the legacy rule."""
        key = _company_branding_key(company)
        if key and key in self.logo_paths:
            return key
        if key:
            logger.warning("Unknown branding key '%s', falling back to name rules", key)

        name = _company_name(company)
        explicit = self.company_assets.get(name.strip().lower())
        if explicit and explicit in self.logo_paths:
            return explicit

        asset_id = legacy_asset_for(name)
        return asset_id if asset_id in self.logo_paths else DEFAULT_ASSET

    def logo_for(self, company) -> Optional[ImageReader]:
        return self._images.get(self.resolve_asset_id(company))

    def logo_path_for(self, company) -> Optional[Path]:
        return self.logo_paths.get(self.resolve_asset_id(company))


def add_header_logos(doc: Document, company, registry: BrandingRegistry) -> bool:
    """Draw the company logo in the top-right corner of the current page.

    Moves the cursor below the logo when one was drawn.

    Returns:
        True if a logo was placed on the page.
    """
    try:
        image = registry.logo_for(company)
        if image is None:
            return False
        asset_id = registry.resolve_asset_id(company)
        doc.draw_image(
            image,
            doc.page.width - LOGO_WIDTH - LOGO_RIGHT_SPACING,
            LOGO_TOP,
            LOGO_WIDTH,
            LOGO_HEIGHT,
            tag="logo",
            name=asset_id,
        )
        doc.cursor.y = LOGO_TOP + LOGO_HEIGHT + LOGO_BOTTOM_GAP
        return True
    except Exception as e:
        logger.warning("Could not render logos: %s", e)
        return False
