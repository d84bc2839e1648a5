from __future__ import annotations

import logging

import requests

from ..models.config_models import GitHubConfig
from ..models.issue import ISSUE_STATE_CLOSED, IssueIdentity
from .issue_identity import parse_issue_url

"""GitHub issue state client.

One GET per fetch, no retries. Every failure (transport error, non-200
status, unreadable body) becomes None so the caller skips the row; the next
scheduled batch run will try again.
"""

__all__ = [
    "GitHubIssueClient",
]

logger = logging.getLogger(__name__)

USER_AGENT = "issue-sync/0.1"


class GitHubIssueClient:
    def __init__(self, config: GitHubConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session if session is not None else self._build_session(config)

    @staticmethod
    def _build_session(config: GitHubConfig) -> requests.Session:
        session = requests.Session()
        session.headers.update({"User-Agent": USER_AGENT})
        if config.token:
            session.headers["Authorization"] = f"Bearer {config.token}"
        return session

    def issue_api_url(self, identity: IssueIdentity) -> str:
        return f"{self.config.api_base_url}{identity.api_path}"

    def fetch_state(self, issue: IssueIdentity | str) -> str | None:
        """Return the issue state ("open"/"closed") or None.

        ``issue`` may be an IssueIdentity or an issue URL. A URL that is not a
        GitHub issue URL yields None; a None URL raises TypeError.
        """
        if isinstance(issue, IssueIdentity):
            identity = issue
        else:
            identity = parse_issue_url(issue)
            if identity is None:
                return None

        if self.config.enable_mock_answer:
            logger.debug("  -> using mock response (github.enable_mock_answer=true)")
            return ISSUE_STATE_CLOSED

        api_url = self.issue_api_url(identity)
        logger.debug(f"  -> fetching issue state from: {api_url}")
        try:
            response = self.session.get(
                api_url,
                headers={"Accept": "application/json"},
                timeout=self.config.timeout_sec,
            )
        except requests.RequestException as e:
            logger.debug(f"  -> error fetching issue state: {e}")
            return None

        if response.status_code != 200:
            logger.debug(f"  -> GitHub response: {response.status_code}")
            return None

        try:
            data = response.json()
        except ValueError as e:  # requests.JSONDecodeError is a ValueError
            logger.debug(f"  -> malformed GitHub response body: {e}")
            return None
        if not isinstance(data, dict):
            return None
        return data.get("state")

    def close(self) -> None:
        self.session.close()
