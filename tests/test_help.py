import pytest

from vcheck.help import auth_help


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
    monkeypatch.delenv("CI", raising=False)


def test_github_actions(clean_env, monkeypatch):
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    monkeypatch.setenv("CI", "true")
    text = auth_help()
    assert text.startswith("vulncheck: To use VulnCheck CLI in a GitHub Actions workflow")
    assert "    VC_TOKEN: ${{ secrets.VC_TOKEN }}" in text.splitlines()
    assert text.endswith("\n")


def test_generic_ci(clean_env, monkeypatch):
    monkeypatch.setenv("CI", "1")
    text = auth_help()
    assert text.startswith("vulncheck: To use VulnCheck CLI in automation")
    assert "GitHub Actions" not in text
    assert len(text.splitlines()) == 1


def test_github_actions_flag_must_be_true(clean_env, monkeypatch):
    monkeypatch.setenv("GITHUB_ACTIONS", "false")
    text = auth_help()
    assert text.startswith("To get started with VulnCheck CLI, please run: vulncheck auth login")


def test_interactive(clean_env):
    text = auth_help()
    assert text.startswith("To get started with VulnCheck CLI")
    assert "VC_TOKEN" in text
    assert text.endswith("\n")