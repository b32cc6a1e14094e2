"""
Infrastructure adapter: git CLI → ILedgerMirror.

Replicates the ledger file to a dedicated branch of a GitHub repository by
shelling out to ``git``. Only the mirror branch is ever pushed, always with
--force, so the remote history of that one ref is overwritten and nothing else
is touched.

sync() runs in FastAPI's threadpool after the response has been sent. Calls are
serialized with a lock because concurrent git commands in one working tree
fight over index.lock. Every failure is logged with the credential redacted and
then dropped.
"""

import logging
import subprocess
import threading
from pathlib import Path
from typing import Optional

from src.domain.ports.mirror_port import ILedgerMirror

logger = logging.getLogger(__name__)

COMMIT_MESSAGE = "chore: update stock data"
GIT_TIMEOUT_SEC = 60


class GitCommandError(RuntimeError):
    def __init__(self, args: list[str], returncode: int, output: str) -> None:
        super().__init__(f"git {' '.join(args)} exited {returncode}: {output}")
        self.returncode = returncode
        self.output = output


class GitBranchMirror(ILedgerMirror):
    """Commits the ledger file and force-pushes it to a single branch."""

    def __init__(
        self,
        repo_dir: Path,
        data_file: Path,
        token: str,
        repository: str,
        branch: str,
        user_name: str = "render-bot",
        user_email: str = "render@example.com",
    ) -> None:
        self._repo_dir = Path(repo_dir)
        self._data_file = Path(data_file)
        self._token = token
        self._branch = branch
        self._user_name = user_name
        self._user_email = user_email
        self._remote = f"https://{token}@github.com/{repository}.git"
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # ILedgerMirror interface
    # ------------------------------------------------------------------

    def prepare(self) -> None:
        """Set the commit identity and switch the working tree to the mirror branch."""
        with self._lock:
            try:
                self._git("config", "user.name", self._user_name)
                self._git("config", "user.email", self._user_email)
                # The branch may exist on the remote only
                self._git("fetch", check=False)
                self._checkout_branch()
                logger.info("[MIRROR] Ready on branch %s", self._branch)
            except (GitCommandError, OSError, subprocess.TimeoutExpired) as exc:
                logger.error("[MIRROR] Setup failed: %s", self._redact(str(exc)))

    def sync(self) -> None:
        with self._lock:
            try:
                self._checkout_branch()
                self._git("add", self._relative_data_file())
                self._commit()
                self._git("push", "--force", "--set-upstream", self._remote, self._branch)
                logger.info("[MIRROR] Pushed %s to %s", self._data_file.name, self._branch)
            except (GitCommandError, OSError, subprocess.TimeoutExpired) as exc:
                logger.error("[MIRROR] Push failed: %s", self._redact(str(exc)))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _checkout_branch(self) -> None:
        exists = self._git(
            "rev-parse", "--verify", "--quiet", f"refs/heads/{self._branch}", check=False
        )
        if exists.returncode == 0:
            self._git("checkout", self._branch)
        else:
            self._git("checkout", "-b", self._branch)

    def _commit(self) -> None:
        result = self._git("commit", "-m", COMMIT_MESSAGE, check=False)
        if result.returncode == 0:
            return
        output = f"{result.stdout}\n{result.stderr}"
        if "nothing to commit" in output.lower():
            logger.debug("[MIRROR] Nothing to commit")
            return
        raise GitCommandError(["commit"], result.returncode, output.strip())

    def _relative_data_file(self) -> str:
        try:
            return str(self._data_file.resolve().relative_to(self._repo_dir.resolve()))
        except ValueError:
            return str(self._data_file)

    def _git(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        result = subprocess.run(
            ["git", *args],
            cwd=self._repo_dir,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT_SEC,
        )
        if check and result.returncode != 0:
            raise GitCommandError(list(args), result.returncode, (result.stderr or result.stdout).strip())
        return result

    def _redact(self, text: str) -> str:
        return text.replace(self._token, "***") if self._token else text


class NullLedgerMirror(ILedgerMirror):
    """Used when no mirror credentials are configured."""

    def __init__(self, reason: Optional[str] = None) -> None:
        self._reason = reason

    def prepare(self) -> None:
        if self._reason:
            logger.info("[MIRROR] Disabled: %s", self._reason)

    def sync(self) -> None:
        return None
