"""Shared test fixtures for rw tests."""
import zipfile
from pathlib import Path

import pytest

from rwcli.core.config import RwConfig
from rwcli.scaffold.release import AssetDescriptor, ReleaseDescriptor


def write_zip(path: Path, entries: dict) -> Path:
    """Build a zip at ``path``.

    ``entries`` maps member names to bytes/str content, or to None for a
    directory entry. A ``(content, mode)`` tuple sets the file mode.
    """
    with zipfile.ZipFile(path, "w") as archive:
        for name, value in entries.items():
            if value is None:
                info = zipfile.ZipInfo(name if name.endswith("/") else name + "/")
                info.external_attr = (0o40755 << 16) | 0x10
                archive.writestr(info, b"")
                continue
            mode = 0o644
            if isinstance(value, tuple):
                value, mode = value
            info = zipfile.ZipInfo(name)
            info.external_attr = (0o100000 | mode) << 16
            archive.writestr(info, value)
    return path


class FakeResolver:
    """Stands in for ReleaseResolver without touching the network."""

    def __init__(self, release: ReleaseDescriptor, archives: dict):
        self.release = release
        self.archives = archives
        self.release_calls = 0
        self.downloads = []

    def latest_release(self):
        self.release_calls += 1
        return self.release

    def download_asset(self, asset_id):
        self.downloads.append(asset_id)
        data = self.archives[asset_id]
        return iter([data[:10], data[10:]])


@pytest.fixture
def rw_home(tmp_path, monkeypatch):
    """Point rw at a throwaway home directory."""
    home = tmp_path / "rw-home"
    monkeypatch.setenv("RW_HOME", str(home))
    monkeypatch.delenv("RW_GITHUB_TOKEN", raising=False)
    return home


@pytest.fixture
def config(rw_home):
    return RwConfig(home=rw_home)


@pytest.fixture
def template_zip(tmp_path):
    """A template archive wrapped in a single top-level folder."""
    return write_zip(tmp_path / "template.zip", {
        "redwood-app/": None,
        "redwood-app/package.json": '{"name": "redwood-app"}',
        "redwood-app/gitignore.template": "node_modules\n.env\n",
        "redwood-app/api/": None,
        "redwood-app/api/src/functions/graphql.ts": "export const handler = () => {}\n",
        "redwood-app/web/src/App.tsx": "export default App\n",
        "redwood-app/scripts/seed.ts": ("export default async () => {}\n", 0o755),
    })


@pytest.fixture
def fake_resolver(template_zip):
    release = ReleaseDescriptor(
        tag="v3.2.0",
        assets=(
            AssetDescriptor(name="arapaho_js.zip", id=11),
            AssetDescriptor(name="arapaho_ts.zip", id=12),
            AssetDescriptor(name="bighorn_ts.zip", id=13),
        ),
    )
    data = template_zip.read_bytes()
    return FakeResolver(release, {11: data, 12: data, 13: data})
