"""Mapping from user intent (track, language) to a concrete template asset."""
from typing import Iterable
from urllib.parse import quote

from rwcli.scaffold.errors import AssetNotFound
from rwcli.scaffold.release import AssetDescriptor

DEFAULT_TRACK = "arapaho"
BIGHORN_TRACK = "bighorn"
TRACKS = (DEFAULT_TRACK, BIGHORN_TRACK)


def track_name(bighorn: bool = False) -> str:
    """Return the template lineage to scaffold from."""
    return BIGHORN_TRACK if bighorn else DEFAULT_TRACK


def template_asset_name(track: str, typescript: bool = True) -> str:
    """Compose the release asset name, e.g. ``arapaho_ts.zip``."""
    if track not in TRACKS:
        raise ValueError(f"Unknown template track '{track}' (expected one of: {', '.join(TRACKS)})")
    return f"{track}_{'ts' if typescript else 'js'}.zip"


def cache_key(release_tag: str, asset_name: str) -> str:
    """Tag-qualified cache key, e.g. ``v3.2.0_arapaho_ts.zip``.

    The tag is percent-encoded so tags like ``release/3.2.0`` map to a single
    file name without colliding with any other tag.
    """
    return f"{quote(release_tag, safe='')}_{asset_name}"


def select_asset(
    assets: Iterable[AssetDescriptor],
    asset_name: str,
    release_tag: str = "latest",
) -> AssetDescriptor:
    """Pick the asset whose name matches exactly (case-sensitive).

    Raises:
        AssetNotFound: No asset in the release carries ``asset_name``
    """
    assets = list(assets)
    for asset in assets:
        if asset.name == asset_name:
            return asset
    raise AssetNotFound(asset_name, release_tag, available=[a.name for a in assets])
