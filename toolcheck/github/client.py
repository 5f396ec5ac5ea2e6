"""httpx-based GitHub API client — only what the health report needs.

Methods return a Result instead of raising; the report turns an Err into
a warning.
"""

from __future__ import annotations

import logging
from datetime import datetime

import httpx
from pydantic import BaseModel

from ..core.result import Err, Ok, Result
from ..report import Reporter, ReportLevel

logger = logging.getLogger(__name__)


class GitHubError(Exception):
    """Raised when GitHub returns an error status."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"GitHub error {status_code}: {detail}")


# ── Models ───────────────────────────────────────────────────────────────────


class RateLimit(BaseModel):
    limit: int
    used: int
    remaining: int
    reset: int


class RateLimitResources(BaseModel):
    core: RateLimit


class RateLimitResponse(BaseModel):
    resources: RateLimitResources


# ── Client ───────────────────────────────────────────────────────────────────


class GitHubClient:
    """Async client for api.github.com."""

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        token: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._transport = transport

    @property
    def _headers(self) -> dict[str, str]:
        h = {"Accept": "application/vnd.github+json"}
        if self._token:
            h["Authorization"] = f"Bearer {self._token}"
        return h

    async def fetch_rate_limit(self) -> Result[RateLimitResponse]:
        """GET /rate_limit"""
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.get(f"{self._base_url}/rate_limit", headers=self._headers)
            if resp.status_code >= 400:
                detail = resp.text
                try:
                    detail = resp.json().get("message", resp.text)
                except Exception:
                    pass
                return Err(GitHubError(resp.status_code, str(detail)))
            return Ok(RateLimitResponse.model_validate(resp.json()))
        except Exception as e:
            logger.debug("Rate limit lookup failed: %s: %s", type(e).__name__, e)
            return Err(e)


# ── Report ───────────────────────────────────────────────────────────────────


def format_rate_limit(core: RateLimit) -> str:
    reset = datetime.fromtimestamp(core.reset).strftime("%c")
    return f"Used: {core.used}. Remaining: {core.remaining}. Limit: {core.limit}. Reset: {reset}."


def report_rate_limit(result: Result[RateLimitResponse], reporter: Reporter) -> None:
    """Report a fetched rate limit: error once it is exhausted, warn if unknown."""

    def _classify(rate_limit: RateLimitResponse) -> tuple[ReportLevel, str]:
        core = rate_limit.resources.core
        diagnostics = format_rate_limit(core)
        if core.remaining <= 0:
            return ReportLevel.ERROR, f"GitHub API rate limit exceeded. {diagnostics}"
        return ReportLevel.OK, f"GitHub API rate limit. {diagnostics}"

    # Reporter errors propagate; only a failed lookup becomes the warning.
    level, message = result.map(_classify).get_or_else(
        (ReportLevel.WARN, "Failed to check GitHub API rate limit status.")
    )
    reporter.report(level, message)
