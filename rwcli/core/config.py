"""rw runtime configuration and settings."""
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from rwcli.core.logger import get_logger

logger = get_logger(__name__)

RW_DIR_NAME = ".rw"
CONFIG_FILE_NAME = "config.yml"

GH_OWNER = "redwoodjs"
GH_REPO = "rw-cli"


def _default_home() -> Path:
    return Path.home() / RW_DIR_NAME


@dataclass
class RwConfig:
    """Runtime configuration for rw operations.

    Passed explicitly to every pipeline stage; there is no module-level
    instance.

    Attributes:
        home: The rw dot directory (default: ~/.rw)
        owner: GitHub owner publishing template releases
        repo: GitHub repository publishing template releases
        github_token: Optional bearer token for authenticated rate limits
        request_timeout: Seconds before an HTTP request gives up (default: none)
    """

    home: Path = field(default_factory=_default_home)
    owner: str = GH_OWNER
    repo: str = GH_REPO
    github_token: Optional[str] = None
    request_timeout: Optional[float] = None

    @property
    def templates_dir(self) -> Path:
        """Cache root holding downloaded template archives."""
        return self.home / "templates"

    @property
    def log_file(self) -> Path:
        return self.home / "debug.log"

    @property
    def config_file(self) -> Path:
        return self.home / CONFIG_FILE_NAME

    def ensure_home(self) -> Path:
        """Create the rw dot directory if missing."""
        self.home.mkdir(parents=True, exist_ok=True)
        return self.home

    @classmethod
    def from_env(cls, base: Optional["RwConfig"] = None) -> "RwConfig":
        """Create config from environment variables.

        Environment variables:
            RW_HOME: Location of the rw dot directory
            RW_GITHUB_OWNER: Owner of the template release repository
            RW_GITHUB_REPO: Name of the template release repository
            RW_GITHUB_TOKEN: Bearer token for GitHub API requests
            RW_REQUEST_TIMEOUT: HTTP timeout in seconds

        Args:
            base: Values to fall back on when a variable is unset

        Returns:
            RwConfig instance with values from environment or defaults
        """
        base = base or cls()
        timeout = os.getenv("RW_REQUEST_TIMEOUT")
        return cls(
            home=Path(os.getenv("RW_HOME", str(base.home))).expanduser(),
            owner=os.getenv("RW_GITHUB_OWNER", base.owner),
            repo=os.getenv("RW_GITHUB_REPO", base.repo),
            github_token=os.getenv("RW_GITHUB_TOKEN") or base.github_token,
            request_timeout=float(timeout) if timeout else base.request_timeout,
        )

    @classmethod
    def from_file(cls, path: Path, base: Optional["RwConfig"] = None) -> "RwConfig":
        """Layer values from a YAML config file over ``base``.

        Unknown keys are ignored with a warning. A missing file yields ``base``.
        """
        base = base or cls()
        if not path.exists():
            return base

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Invalid rw config file (expected a mapping): {path}")

        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {f.name: getattr(base, f.name) for f in fields(cls)}
        for key, value in data.items():
            if key not in known:
                logger.warning(f"Ignoring unknown config key '{key}' in {path}")
                continue
            values[key] = value

        values["home"] = Path(values["home"]).expanduser()
        if values["request_timeout"] is not None:
            values["request_timeout"] = float(values["request_timeout"])
        return cls(**values)

    @classmethod
    def load(cls) -> "RwConfig":
        """Resolve config: defaults, then ~/.rw/config.yml, then environment."""
        env_first = cls.from_env()
        from_file = cls.from_file(env_first.config_file, base=cls(home=env_first.home))
        return cls.from_env(base=from_file)
