import pytest

from folio.rules.loader import load_rules


def test_repo_rules_load(rules):
    assert rules.uploads.max_bytes == 5 * 1024 * 1024
    assert "image/webp" in rules.uploads.allowed_types
    assert rules.admin.login_route == "/admin/login"
    assert rules.content_defaults["hero_cta_secondary_text"] == "View Portfolio"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("backend: [unclosed", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(path)


def test_unknown_section_rejected(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("bogus:\n  x: 1\n", encoding="utf-8")

    with pytest.raises(ValueError, match="validation failed"):
        load_rules(path)


def test_quality_bounds_enforced(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("uploads:\n  quality: 1.5\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_rules(path)


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("", encoding="utf-8")

    rules = load_rules(path)

    assert rules.tables.site_settings == "site_settings"
    assert rules.content_defaults == {}
