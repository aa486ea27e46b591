from __future__ import annotations

from github import Github


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_pull_author(pr) -> str:
    """Return the login of the PR author, or an empty string for ghost users."""
    return pr.user.login if pr.user is not None else ""


def get_pull_text(pr) -> tuple[str, str]:
    """Return ``(title, body)``; PRs opened without a description have a None body."""
    return pr.title or "", pr.body or ""
