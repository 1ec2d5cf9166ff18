"""
Bank profile loading: identity, hint keywords and detector thresholds.
"""
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from pydantic import BaseModel, Field, ValidationError

from .errors import ProfileError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


class BankProfile(BaseModel):
    """Static description of one supported export format."""
    template_id: str
    bank: str
    short_token: str
    hint_keywords: List[str] = Field(default_factory=list)
    detection: Dict[str, Any] = Field(default_factory=dict)


# Used when the templates directory is not shipped alongside the package
BUILTIN_PROFILES = {
    "absa": BankProfile(template_id="absa", bank="ABSA", short_token="ABSA", hint_keywords=["ABSA"]),
    "fnb": BankProfile(template_id="fnb", bank="FNB", short_token="FNB",
                       hint_keywords=["FNB", "FIRST NATIONAL"]),
    "standard_bank": BankProfile(template_id="standard_bank", bank="Standard Bank",
                                 short_token="StandardBank", hint_keywords=["STANDARD"]),
    "generic": BankProfile(template_id="generic", bank="Generic CSV", short_token="Bank"),
}


class ProfileLoader:
    """Loads bank profiles from a directory of YAML files."""

    def __init__(self, templates_dir: Path = None):
        self.templates_dir = templates_dir or DEFAULT_TEMPLATES_DIR
        self.profiles = {}
        self._load_profiles()

    def _load_profiles(self):
        """Load all available profiles, falling back to the built-in set."""
        if not self.templates_dir.exists():
            logger.warning(f"Templates directory not found: {self.templates_dir}")
            self.profiles = dict(BUILTIN_PROFILES)
            return

        for yaml_file in sorted(self.templates_dir.glob("*.yaml")):
            try:
                with open(yaml_file, 'r', encoding='utf-8') as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ProfileError(f"Invalid YAML in profile {yaml_file.name}: {e}") from e

            try:
                profile = BankProfile(**data)
            except (ValidationError, TypeError) as e:
                raise ProfileError(f"Invalid profile {yaml_file.name}: {e}") from e

            self.profiles[profile.template_id] = profile
            logger.debug(f"Loaded profile: {profile.template_id}")

        for template_id, profile in BUILTIN_PROFILES.items():
            self.profiles.setdefault(template_id, profile)

    def get_profile(self, template_id: str) -> Optional[BankProfile]:
        """Get a profile by ID."""
        return self.profiles.get(template_id)

    def require(self, template_id: str) -> BankProfile:
        """Get a profile by ID or raise ProfileError."""
        profile = self.get_profile(template_id)
        if profile is None:
            raise ProfileError(f"Profile not found: {template_id}")
        return profile

    def list_profiles(self) -> List[str]:
        """List all available profile IDs."""
        return list(self.profiles.keys())
