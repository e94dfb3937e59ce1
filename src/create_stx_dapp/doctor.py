"""Environment check: local tools and template repository reachability."""

import ssl
from typing import Iterable, Optional
from urllib.parse import urlsplit

import httpx
import truststore

from .config import HTTP_TIMEOUT, Settings
from .progress import StepTracker
from .requirements import ToolDetector, package_manager_candidates
from .templates import BUILT_IN_TEMPLATES, Template
from .utils import Logger


def _github_auth_headers(url: str, token: Optional[str]) -> dict:
    """Return Authorization header dict only for github.com with a non-empty token."""
    host = urlsplit(url).hostname or ""
    if token and (host == "github.com" or host.endswith(".github.com")):
        return {"Authorization": f"Bearer {token}"}
    return {}


def make_client() -> httpx.Client:
    ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    return httpx.Client(verify=ssl_context, timeout=HTTP_TIMEOUT, follow_redirects=True)


def check_template_reachable(client: httpx.Client, template: Template, token: Optional[str] = None) -> tuple[bool, str]:
    """Probe the repository over HTTP; returns (reachable, detail)."""
    scheme = urlsplit(template.repo_url).scheme.lower()
    if scheme not in ("http", "https"):
        return True, f"skipped ({scheme} URL)"
    try:
        response = client.head(template.repo_url, headers=_github_auth_headers(template.repo_url, token))
        if response.status_code == 405:
            response = client.get(template.repo_url, headers=_github_auth_headers(template.repo_url, token))
    except httpx.HTTPError as e:
        return False, str(e) or type(e).__name__
    if response.status_code >= 400:
        return False, f"HTTP {response.status_code}"
    return True, f"HTTP {response.status_code}"


def run_doctor(
    settings: Settings,
    logger: Logger,
    detector: ToolDetector,
    *,
    templates: Iterable[Template] = BUILT_IN_TEMPLATES,
    client: Optional[httpx.Client] = None,
) -> int:
    """Check every tool and template; return the exit code."""
    tracker = StepTracker("Check Environment")
    tools = [("node", "Node.js runtime"), ("git", "Git version control")]
    tools += [(pm.name, f"{pm.name} package manager") for pm in package_manager_candidates()]
    for key, label in tools:
        tracker.add(key, label)

    for key, _ in tools:
        probe = detector.probe(key)
        if probe.available:
            tracker.complete(key, probe.version or "available")
        else:
            tracker.error(key, "not found")

    templates = list(templates)
    own_client = client is None
    client = client or make_client()
    try:
        for index, template in enumerate(templates, start=1):
            key = f"template-{index}"
            tracker.add(key, template.name)
            reachable, detail = check_template_reachable(client, template, settings.github_token)
            (tracker.complete if reachable else tracker.error)(key, detail)
    finally:
        if own_client:
            client.close()

    logger.console.print(tracker.render())

    pm_ok = any(tracker.status_of(pm.name) == "done" for pm in package_manager_candidates())
    if tracker.status_of("node") == "done" and tracker.status_of("git") == "done" and pm_ok:
        logger.info("\n[bold green]Ready to create Stacks dapps![/bold green]")
        return 0

    logger.error("Some required tools are missing")
    if not pm_ok:
        logger.dim("Tip: install npm, yarn, pnpm, or bun")
    return 1
