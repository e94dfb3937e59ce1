import pytest
from conftest import output_of

from create_stx_dapp.templates import BUILT_IN_TEMPLATES, Template, load_templates, render_catalog
from create_stx_dapp.utils import CLIError

GOOD = Template("Good", "A good template", "https://github.com/acme/good.git", tags=("react",))
ALSO_GOOD = Template("Also good", "Another one", "https://github.com/acme/also.git")
BAD = Template("Bad", "Broken URL", "not a url")


def test_built_in_registry_is_valid():
    templates = load_templates()
    assert templates == list(BUILT_IN_TEMPLATES)
    assert templates[0].repo_url.endswith("vite-stacks-dapp-template.git")


def test_invalid_entries_are_dropped_with_warning(logger):
    templates = load_templates([GOOD, BAD], logger)

    assert templates == [GOOD]
    assert 'Skipping invalid template "Bad"' in output_of(logger)


def test_declaration_order_is_kept():
    assert load_templates([ALSO_GOOD, BAD, GOOD]) == [ALSO_GOOD, GOOD]


def test_all_invalid_registry_raises():
    with pytest.raises(CLIError) as excinfo:
        load_templates([BAD, Template("", "", "")])
    assert excinfo.value.code == "NO_TEMPLATES"
    assert excinfo.value.exit_code == 1


def test_templates_are_immutable():
    with pytest.raises(AttributeError):
        GOOD.name = "changed"


def test_render_catalog_lists_name_description_and_tags(logger):
    render_catalog([GOOD, ALSO_GOOD], logger.console)
    output = output_of(logger)

    assert "1. Good" in output
    assert "2. Also good" in output
    assert "A good template" in output
    assert "Tags: react" in output


def test_render_catalog_prints_markup_like_text_literally(logger):
    render_catalog([Template("Starter [beta]", "Uses [bold]markup[/bold]", "https://example.com/x.git", tags=("[x]",))], logger.console)
    output = output_of(logger)

    assert "1. Starter [beta]" in output
    assert "Uses [bold]markup[/bold]" in output
    assert "Tags: [x]" in output
