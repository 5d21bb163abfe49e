"""Shared utilities."""


def join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def workflow_path(slug: str) -> str:
    return f"/custom/{slug}"
