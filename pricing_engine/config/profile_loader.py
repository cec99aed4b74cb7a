"""Profile loader for configurable pricing behavior."""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass

from ..models.pricing_context import PricingContext
from ..pipeline.discount_resolver import TIER_UNITS
from .settings import get_default_precision, get_default_profile_name


@dataclass
class PricingProfile:
    """Configuration profile for pricing behavior."""
    name: str
    description: str = ""
    precision: int = 2
    is_inter: bool = True
    tax_exemption: bool = False
    rounding_adjustment: bool = False
    is_before_tax: bool = False
    item_wise_shipping_tax: bool = False
    tier_unit: str = "units"  # "units" | "packs"

    def __post_init__(self):
        if self.tier_unit not in TIER_UNITS:
            raise ValueError(f"tier_unit must be one of {TIER_UNITS}, got '{self.tier_unit}'")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PricingProfile':
        """Create PricingProfile from dictionary."""
        return cls(
            name=data.get('name', 'default'),
            description=data.get('description', ''),
            precision=data.get('precision', get_default_precision()),
            is_inter=data.get('is_inter', True),
            tax_exemption=data.get('tax_exemption', False),
            rounding_adjustment=data.get('rounding_adjustment', False),
            is_before_tax=data.get('is_before_tax', False),
            item_wise_shipping_tax=data.get('item_wise_shipping_tax', False),
            tier_unit=data.get('tier_unit', 'units')
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'description': self.description,
            'precision': self.precision,
            'is_inter': self.is_inter,
            'tax_exemption': self.tax_exemption,
            'rounding_adjustment': self.rounding_adjustment,
            'is_before_tax': self.is_before_tax,
            'item_wise_shipping_tax': self.item_wise_shipping_tax,
            'tier_unit': self.tier_unit
        }

    def to_context(self, **overrides) -> PricingContext:
        """Build the PricingContext this profile describes.

        Raises:
            InvalidPrecisionError: If precision is negative or not an integer
        """
        settings = {
            'is_inter': self.is_inter,
            'precision': self.precision,
            'tax_exemption': self.tax_exemption,
            'rounding_adjustment': self.rounding_adjustment,
            'is_before_tax': self.is_before_tax,
            'item_wise_shipping_tax': self.item_wise_shipping_tax,
        }
        settings.update({k: v for k, v in overrides.items() if v is not None})
        return PricingContext(**settings)


def get_profiles_dir() -> Path:
    """Get directory containing profile YAML files.

    Returns:
        Path to profiles directory
    """
    # pricing_engine/config/profile_loader.py -> pricing_engine/config -> pricing_engine -> root
    project_root = Path(__file__).resolve().parent.parent.parent
    return project_root / "configs" / "profiles"


def load_profile(profile_name: str = "default") -> PricingProfile:
    """Load a pricing profile.

    Args:
        profile_name: Name of profile to load (without .yaml extension)

    Returns:
        PricingProfile object

    Raises:
        FileNotFoundError: If profile file doesn't exist
        ValueError: If profile file is invalid
    """
    profile_path = get_profiles_dir() / f"{profile_name}.yaml"

    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_name} (expected at {profile_path})")

    try:
        with open(profile_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in profile {profile_name}: {e}")

    if not data:
        raise ValueError(f"Profile file is empty: {profile_path}")
    if not isinstance(data, dict):
        raise ValueError(f"Profile {profile_name} must be a mapping, got {type(data).__name__}")

    return PricingProfile.from_dict(data)


def list_available_profiles() -> list:
    """List all available profile names.

    Returns:
        List of profile names (without .yaml extension)
    """
    profiles_dir = get_profiles_dir()

    if not profiles_dir.exists():
        return ["default"]

    profiles = [profile_file.stem for profile_file in profiles_dir.glob("*.yaml")]
    return sorted(profiles) if profiles else ["default"]


def get_default_profile() -> PricingProfile:
    """Get default profile (always available).

    Returns:
        Default PricingProfile
    """
    try:
        return load_profile("default")
    except FileNotFoundError:
        # Fallback: return minimal default config
        return PricingProfile(
            name="default",
            description="Default configuration",
            precision=get_default_precision()
        )


# Profiles already read this process, by name
_loaded_profiles: Dict[str, PricingProfile] = {}


def resolve_profile(profile_name: Optional[str] = None) -> PricingProfile:
    """Profile to price with: the named one, else PRICING_PROFILE, else default.

    Each profile file is read once per process. Only "default" may be
    missing from disk, in which case the minimal default profile is used.

    Raises:
        FileNotFoundError: If a named profile other than default doesn't exist
        ValueError: If the profile file is invalid
    """
    name = profile_name or get_default_profile_name()
    if name not in _loaded_profiles:
        _loaded_profiles[name] = get_default_profile() if name == "default" else load_profile(name)
    return _loaded_profiles[name]


def clear_profile_cache() -> None:
    """Forget loaded profiles so the next resolve_profile reads from disk."""
    _loaded_profiles.clear()
