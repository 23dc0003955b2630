import pytest
from starlette.testclient import TestClient

from testserver.app import create_app
from testserver.config import ServerConfig


@pytest.fixture
def site(tmp_path):
    """A views directory and a webapp root with js/ and css/."""
    views = tmp_path / "views"
    views.mkdir()
    (views / "index.html").write_text("<h1>Index {{ page }}</h1>", encoding="utf-8")
    (views / "base.html").write_text("<main>{% block body %}{% endblock %}</main>", encoding="utf-8")
    (views / "child.html").write_text(
        '{% extends "base.html" %}{% block body %}<p>child</p>{% endblock %}', encoding="utf-8"
    )

    webapp = tmp_path / "webapp"
    (webapp / "js").mkdir(parents=True)
    (webapp / "css").mkdir()
    (webapp / "js" / "app.js").write_bytes(b"console.log('app');\n")
    (webapp / "css" / "app.css").write_text("body { color: red; }", encoding="utf-8")
    return tmp_path


@pytest.fixture
def config(site):
    return ServerConfig(views_dir=site / "views", static_root=site / "webapp")


@pytest.fixture
def client(config):
    return TestClient(create_app(config), raise_server_exceptions=False)
