"""
GitHub contents API adapter - the repository is the database.
Each blob is a file in the repo and its git blob SHA is the version token.
"""
import base64
from typing import Optional

import requests

from injurylog.adapters.base import StorageAdapter, StoredBlob, AdapterRegistry
from injurylog.errors import ConflictError, NotFoundError, StorageError
from injurylog.app_logging import get_logger

logger = get_logger(__name__)

RAW_MEDIA_TYPE = "application/vnd.github.raw+json"


class GitHubAdapter(StorageAdapter):
    """Read and write files through the GitHub contents API."""

    def __init__(
        self,
        token: Optional[str] = None,
        owner: Optional[str] = None,
        repo: Optional[str] = None,
        branch: Optional[str] = None,
        api_url: str = "https://api.github.com",
        timeout: int = 10,
        session: Optional[requests.Session] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        if not (token and owner and repo):
            raise ValueError("GitHub storage requires a token, an owner and a repository")
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.timeout = timeout
        self.base_url = f"{api_url.rstrip('/')}/repos/{owner}/{repo}/contents"
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        })

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(self, path: str) -> StoredBlob:
        params = {"ref": self.branch} if self.branch else None
        try:
            response = self.session.get(self._url(path), params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise StorageError(f"Error fetching {path} from GitHub: {e}") from e

        if response.status_code == 404:
            logger.info(f"{path} not found in {self.owner}/{self.repo}")
            raise NotFoundError(path)
        if not response.ok:
            raise StorageError(f"GitHub returned {response.status_code} for {path}: {response.text}")

        data = response.json()
        if isinstance(data, list):
            raise StorageError(f"{path} is a directory")

        if data.get("encoding") == "base64":
            content = base64.b64decode(data.get("content", "")).decode("utf-8")
        else:
            # Files over 1 MB come back without inline content
            content = self._get_raw(path, params)
        return StoredBlob(content, data["sha"])

    def _get_raw(self, path: str, params: Optional[dict]) -> str:
        try:
            response = self.session.get(
                self._url(path),
                params=params,
                headers={"Accept": RAW_MEDIA_TYPE},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise StorageError(f"Error fetching raw {path} from GitHub: {e}") from e
        return response.content.decode("utf-8")

    def put(self, path: str, content: str, expected_version: Optional[str], message: str = "") -> str:
        body = {
            "message": message or f"Update {path}",
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }
        if expected_version:
            body["sha"] = expected_version
        if self.branch:
            body["branch"] = self.branch

        try:
            response = self.session.put(self._url(path), json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise StorageError(f"Error writing {path} to GitHub: {e}") from e

        # 409: sha no longer matches; 422 naming the sha: missing for an existing file
        if response.status_code == 409 or (response.status_code == 422 and "sha" in response.text):
            logger.warning(f"GitHub rejected write to {path} at {expected_version}: {response.status_code}")
            raise ConflictError(path, expected_version)
        if not response.ok:
            raise StorageError(f"GitHub returned {response.status_code} writing {path}: {response.text}")

        version = response.json()["content"]["sha"]
        logger.info(f"Committed {path} to {self.owner}/{self.repo} at {version[:7]}")
        return version


AdapterRegistry.register("github", GitHubAdapter)
