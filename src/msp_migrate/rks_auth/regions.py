"""Region to base URL resolution. Pure, no I/O."""

from typing import NamedTuple
from typing import Optional
from typing import Union

from msp_migrate.enums import Region
from msp_migrate.errors import InvalidRegionError

DEFAULT_PLATFORM_DOMAIN = "ruckus.cloud"

# Host prefix per region; North America lives on the root domain
_REGION_PREFIXES = {
    Region.EUROPE: "eu.",
    Region.ASIA: "asia.",
    Region.NORTH_AMERICA: "",
}


class RegionEndpoints(NamedTuple):
    """Base URLs for one region."""

    auth_base: str
    api_base: str


def parse_region(region: Optional[Union[Region, str]]) -> Region:
    """
    Coerce a region value into the Region enum.

    Raises
    ------
    InvalidRegionError
        If the value is None, empty or outside the fixed enumeration
    """
    if isinstance(region, Region):
        return region
    try:
        return Region(region)
    except ValueError:
        raise InvalidRegionError(f"Invalid region selected: {region!r}") from None


def resolve_region(
    region: Optional[Union[Region, str]],
    domain: str = DEFAULT_PLATFORM_DOMAIN,
) -> RegionEndpoints:
    """
    Resolve a region to its (auth host, API host) base URLs.

    Parameters
    ----------
    region : Region or str
        One of Europe, Asia, North America
    domain : str
        Platform root domain

    Returns
    -------
    RegionEndpoints
        e.g. Europe -> ("https://eu.ruckus.cloud", "https://api.eu.ruckus.cloud")
    """
    prefix = _REGION_PREFIXES[parse_region(region)]
    return RegionEndpoints(
        auth_base=f"https://{prefix}{domain}",
        api_base=f"https://api.{prefix}{domain}",
    )
