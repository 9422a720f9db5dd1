"""Project scaffolding pipeline.

target validation → release lookup → asset selection → template cache →
extraction → git init → dependency install
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from rwcli.core.config import RwConfig
from rwcli.core.logger import get_logger
from rwcli.scaffold.cache import TemplateCache
from rwcli.scaffold.errors import VersionControlInitFailed
from rwcli.scaffold.materializer import ArchiveMaterializer
from rwcli.scaffold.release import ReleaseResolver
from rwcli.scaffold.target import validate_target_directory
from rwcli.scaffold.variant import cache_key, select_asset, template_asset_name, track_name
from rwcli.services.git_manager import GitInitializer
from rwcli.services.toolchain import InstallResult, install_dependencies

logger = get_logger(__name__)

DEFAULT_TARGET = "./redwood-app"
DEFAULT_COMMIT_MESSAGE = "initial commit"


@dataclass
class CreateOptions:
    """Everything the user decided for one ``rw create`` run."""
    target: str = DEFAULT_TARGET
    overwrite: bool = False
    typescript: bool = True
    bighorn: bool = False
    git_init: bool = True
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    install: bool = False


@dataclass
class ScaffoldResult:
    """What a successful pipeline run produced."""
    target: Path
    release_tag: str
    asset_name: str
    cache_path: Path
    cached: bool
    files: List[Path] = field(default_factory=list)
    git_committed: bool = False
    warnings: List[str] = field(default_factory=list)
    install: Optional[InstallResult] = None


class ScaffoldPipeline:
    """Provisions a project skeleton from the latest published template."""

    def __init__(
        self,
        config: RwConfig,
        resolver: Optional[ReleaseResolver] = None,
        cache: Optional[TemplateCache] = None,
        materializer: Optional[ArchiveMaterializer] = None,
        git: Optional[GitInitializer] = None,
        installer=install_dependencies,
    ):
        self.config = config
        self.resolver = resolver or ReleaseResolver(
            config.owner,
            config.repo,
            token=config.github_token,
            timeout=config.request_timeout,
        )
        self.cache = cache or TemplateCache(config.templates_dir)
        self.materializer = materializer or ArchiveMaterializer()
        self.git = git or GitInitializer()
        self.installer = installer

    def run(self, options: CreateOptions) -> ScaffoldResult:
        """Run every stage in order; the first failing stage's error propagates.

        Git failures are the exception: they are recorded as warnings on the
        result because the project files exist regardless.
        """
        # Checked up front so a bad path fails before any network traffic
        target = validate_target_directory(options.target, options.overwrite)

        release = self.resolver.latest_release()
        logger.info(f"Latest version: {release.tag}")

        asset_name = template_asset_name(track_name(options.bighorn), options.typescript)
        asset = select_asset(release.assets, asset_name, release.tag)
        key = cache_key(release.tag, asset_name)

        self.cache.ensure_root()
        cache_path, cached = self.cache.fetch_or_get(
            key, lambda: self.resolver.download_asset(asset.id)
        )

        files = self.materializer.extract(cache_path, target)
        logger.info(f"✓ Created {len(files)} files in {target}")

        result = ScaffoldResult(
            target=target,
            release_tag=release.tag,
            asset_name=asset_name,
            cache_path=cache_path,
            cached=cached,
            files=files,
        )

        if options.git_init:
            try:
                result.git_committed = self.git.initialize(target, options.commit_message)
                if not result.git_committed:
                    result.warnings.append("Git repository already exists, skipping git init")
            except VersionControlInitFailed as e:
                logger.debug(f"Git setup failed: {e}")
                result.warnings.append(f"Git setup failed: {e}")

        if options.install:
            result.install = self.installer(target)

        return result
