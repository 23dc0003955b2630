import pytest
from jinja2 import TemplateNotFound

from testserver.errors import UnsafeTemplateName
from testserver.templates import TemplateResolver


@pytest.fixture
def resolver(site):
    return TemplateResolver(site / "views")


def test_resolve_existing(resolver):
    assert resolver.resolve("index") == "index.html"


def test_resolve_missing(resolver):
    with pytest.raises(TemplateNotFound) as exc_info:
        resolver.resolve("missing")
    assert not isinstance(exc_info.value, UnsafeTemplateName)
    assert exc_info.value.name == "missing.html"


@pytest.mark.parametrize(
    "name, reason",
    [
        ("", "empty"),
        ("../secret", "'/'"),
        ("a/b", "'/'"),
        ("..\\secret", "'\\\\'"),
        ("nul\x00byte", "'\\x00'"),
        ("..", "starts with '.'"),
        (".hidden", "starts with '.'"),
    ],
)
def test_unsafe_names(resolver, name, reason):
    with pytest.raises(UnsafeTemplateName) as exc_info:
        resolver.resolve(name)
    assert reason in exc_info.value.reason


def test_unsafe_name_is_template_not_found(resolver):
    """Rejected names fail the same way missing templates do."""
    with pytest.raises(TemplateNotFound):
        resolver.resolve("../index")


def test_dotted_names_inside_segment_allowed(site):
    (site / "views" / "v1.2.html").write_text("ok", encoding="utf-8")
    resolver = TemplateResolver(site / "views")
    assert resolver.resolve("v1.2") == "v1.2.html"


def test_custom_suffix(site):
    (site / "views" / "plain.txt").write_text("plain", encoding="utf-8")
    resolver = TemplateResolver(site / "views", suffix=".txt")
    assert resolver.resolve("plain") == "plain.txt"
    with pytest.raises(TemplateNotFound):
        resolver.resolve("index")


def test_missing_views_dir(tmp_path):
    resolver = TemplateResolver(tmp_path / "nowhere")
    with pytest.raises(TemplateNotFound):
        resolver.resolve("index")
