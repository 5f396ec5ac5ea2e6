"""GitHub API — rate limit lookup for the health report."""

from .client import GitHubClient, GitHubError, RateLimitResponse, report_rate_limit
