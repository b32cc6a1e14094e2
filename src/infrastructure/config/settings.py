"""
Infrastructure: process configuration read from environment variables.

Settings.from_env() is called by the entry point after python-dotenv has loaded
any .env file, so values from .env and the real environment are treated alike.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from src.application.use_cases.forward_report import DEFAULT_MENTION

_REPO_ROOT = Path(__file__).resolve().parents[3]

DEFAULT_PORT = 10000
DEFAULT_BRANCH = "data/PUBLICAPI"

logger = logging.getLogger(__name__)


def _env(name: str) -> Optional[str]:
    """Read *name*, treating blank values as unset."""
    value = os.environ.get(name, "").strip()
    return value or None


def _port() -> int:
    """PORT as an int; malformed or out-of-range values fall back to DEFAULT_PORT."""
    raw = _env("PORT")
    if raw is None:
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        port = -1
    if not 0 < port < 65536:
        logger.warning("[CONFIG] Invalid PORT %r; using %d", raw, DEFAULT_PORT)
        return DEFAULT_PORT
    return port


@dataclass(frozen=True)
class Settings:
    dealer_key: Optional[str] = None
    data_file: Path = _REPO_ROOT / "data.json"
    github_token: Optional[str] = None
    github_repo: Optional[str] = None
    mirror_branch: str = DEFAULT_BRANCH
    mirror_repo_dir: Optional[Path] = None
    git_user_name: str = "render-bot"
    git_user_email: str = "render@example.com"
    report_webhook_url: Optional[str] = None
    report_mention: str = DEFAULT_MENTION
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @property
    def mirror_enabled(self) -> bool:
        return bool(self.github_token and self.github_repo)

    @property
    def repo_dir(self) -> Path:
        return self.mirror_repo_dir or self.data_file.parent

    @classmethod
    def from_env(cls) -> "Settings":
        data_file = Path(_env("DATA_FILE") or _REPO_ROOT / "data.json")
        repo_dir = _env("MIRROR_REPO_DIR")
        return cls(
            dealer_key=_env("DEALER_KEY"),
            data_file=data_file,
            github_token=_env("GITHUB_TOKEN"),
            github_repo=_env("GITHUB_REPO"),
            mirror_branch=_env("MIRROR_BRANCH") or DEFAULT_BRANCH,
            mirror_repo_dir=Path(repo_dir) if repo_dir else None,
            git_user_name=_env("GIT_USER_NAME") or "render-bot",
            git_user_email=_env("GIT_USER_EMAIL") or "render@example.com",
            report_webhook_url=_env("REPORT_WEBHOOK_URL"),
            report_mention=_env("REPORT_MENTION") or DEFAULT_MENTION,
            port=_port(),
            log_level=(_env("LOG_LEVEL") or "INFO").upper(),
        )
