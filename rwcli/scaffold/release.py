"""Latest-release lookup and asset download against the GitHub releases API."""
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import requests

from rwcli.core.logger import get_logger
from rwcli.scaffold.errors import NoReleaseFound, RemoteUnavailable

logger = get_logger(__name__)

GITHUB_API = "https://api.github.com"
DOWNLOAD_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class AssetDescriptor:
    """A downloadable file attached to a release."""
    name: str
    id: int


@dataclass(frozen=True)
class ReleaseDescriptor:
    """One point-in-time view of a published release."""
    tag: str
    assets: Tuple[AssetDescriptor, ...] = ()

    @property
    def asset_names(self) -> Tuple[str, ...]:
        return tuple(asset.name for asset in self.assets)


def redact_token(token: Optional[str]) -> str:
    """Return a printable form of a token exposing only its last four characters."""
    if not token:
        return "<unset>"
    if len(token) <= 4:
        return "****"
    return f"****{token[-4:]}"


class ReleaseResolver:
    """Resolves the latest template release and streams its assets.

    Example:
        resolver = ReleaseResolver("redwoodjs", "rw-cli", token=os.environ.get("RW_GITHUB_TOKEN"))
        release = resolver.latest_release()
        chunks = resolver.download_asset(release.assets[0].id)
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.owner = owner
        self.repo = repo
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

        if token:
            logger.debug(f"GitHub token is set ({redact_token(token)})")

    def _headers(self, accept: str) -> dict:
        headers = {
            "Accept": accept,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @property
    def _repo_url(self) -> str:
        return f"{GITHUB_API}/repos/{self.owner}/{self.repo}"

    def latest_release(self) -> ReleaseDescriptor:
        """Fetch the latest published release and its asset list.

        Raises:
            NoReleaseFound: The repository has no published release
            RemoteUnavailable: Network or API failure
        """
        url = f"{self._repo_url}/releases/latest"
        logger.debug(f"Fetching latest release: {url}")

        try:
            response = self.session.get(
                url,
                headers=self._headers("application/vnd.github+json"),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RemoteUnavailable(f"Failed to reach {url}: {e}") from e

        if response.status_code == 404:
            raise NoReleaseFound(f"No published release found for {self.owner}/{self.repo}")

        try:
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise RemoteUnavailable(
                f"Failed to get latest release for {self.owner}/{self.repo}: {e}"
            ) from e
        except ValueError as e:
            raise RemoteUnavailable(f"Malformed release response from {url}: {e}") from e

        tag = payload.get("tag_name") if isinstance(payload, dict) else None
        if not tag:
            raise NoReleaseFound(f"Latest release of {self.owner}/{self.repo} has no tag")

        assets = tuple(
            AssetDescriptor(name=asset["name"], id=asset["id"])
            for asset in payload.get("assets") or []
            if "name" in asset and "id" in asset
        )
        logger.debug(f"Latest release {tag} with {len(assets)} assets")
        return ReleaseDescriptor(tag=tag, assets=assets)

    def download_asset(self, asset_id: int) -> Iterator[bytes]:
        """Stream the bytes of a release asset.

        The request is issued immediately; the returned iterator yields chunks.

        Raises:
            RemoteUnavailable: Network or API failure
        """
        url = f"{self._repo_url}/releases/assets/{asset_id}"
        logger.debug(f"Downloading release asset: {url}")

        try:
            response = self.session.get(
                url,
                headers=self._headers("application/octet-stream"),
                stream=True,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise RemoteUnavailable(f"Failed to download asset {asset_id}: {e}") from e

        return self._iter_chunks(response, asset_id)

    @staticmethod
    def _iter_chunks(response, asset_id: int) -> Iterator[bytes]:
        try:
            for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    yield chunk
        except requests.RequestException as e:
            raise RemoteUnavailable(f"Download of asset {asset_id} was interrupted: {e}") from e
        finally:
            response.close()
