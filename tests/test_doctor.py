import httpx
from conftest import FakeDetector, output_of

from create_stx_dapp.doctor import _github_auth_headers, check_template_reachable, run_doctor
from create_stx_dapp.templates import Template

GITHUB = Template("Hub", "On GitHub", "https://github.com/acme/starter.git")
LOCAL = Template("Local", "On disk", "file:///srv/templates/starter")


def client_for(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_auth_header_only_for_github_with_token():
    assert _github_auth_headers("https://github.com/a/b.git", "tok") == {"Authorization": "Bearer tok"}
    assert _github_auth_headers("https://api.github.com/x", "tok") == {"Authorization": "Bearer tok"}
    assert _github_auth_headers("https://gitlab.com/a/b.git", "tok") == {}
    assert _github_auth_headers("https://github.com/a/b.git", None) == {}


def test_reachable_template_sends_token():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200)

    reachable, detail = check_template_reachable(client_for(handler), GITHUB, "tok")

    assert reachable
    assert detail == "HTTP 200"
    assert requests[0].headers["Authorization"] == "Bearer tok"


def test_head_not_allowed_falls_back_to_get():
    methods = []

    def handler(request):
        methods.append(request.method)
        return httpx.Response(405 if request.method == "HEAD" else 200)

    assert check_template_reachable(client_for(handler), GITHUB)[0]
    assert methods == ["HEAD", "GET"]


def test_missing_repository_is_unreachable():
    reachable, detail = check_template_reachable(client_for(lambda request: httpx.Response(404)), GITHUB)
    assert not reachable
    assert detail == "HTTP 404"


def test_network_error_is_unreachable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    reachable, detail = check_template_reachable(client_for(handler), GITHUB)
    assert not reachable
    assert "connection refused" in detail


def test_non_http_urls_are_skipped():
    def handler(request):
        raise AssertionError("no request expected")

    assert check_template_reachable(client_for(handler), LOCAL) == (True, "skipped (file URL)")


def test_doctor_passes_with_tools_even_if_template_unreachable(settings, logger):
    detector = FakeDetector(available=("node", "git", "yarn"))
    code = run_doctor(
        settings, logger, detector, templates=[GITHUB], client=client_for(lambda request: httpx.Response(404))
    )

    output = output_of(logger)
    assert code == 0
    assert "yarn package manager" in output
    assert "Hub (HTTP 404)" in output
    assert detector.probed == ["node", "git", "bun", "pnpm", "yarn", "npm"]


def test_doctor_fails_without_package_manager(settings, logger):
    code = run_doctor(
        settings,
        logger,
        FakeDetector(available=("node", "git")),
        templates=[LOCAL],
        client=client_for(lambda request: httpx.Response(200)),
    )

    assert code == 1
    assert "Some required tools are missing" in output_of(logger)
    assert "install npm, yarn, pnpm, or bun" in output_of(logger)
