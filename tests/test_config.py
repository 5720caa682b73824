import pytest

from folio.config import DEFAULT_CONFIG, ConfigError, load_config, validate_page_size


def test_defaults_without_config_file(tmp_path):
    config = load_config(tmp_path)
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG
    config["exclude"].append("x.md")
    assert DEFAULT_CONFIG["exclude"] == ["README.md"]


def test_config_file_overrides_defaults(tmp_path):
    (tmp_path / "folio.yaml").write_text(
        "title: bulv.cc\npage_size: 5\nsitemap:\n  hostname: https://bulv.cc\nexclude: drafts.md\n",
        encoding="utf-8",
    )
    config = load_config(tmp_path)
    assert config["title"] == "bulv.cc"
    assert config["page_size"] == 5
    assert config["sitemap"] == {"hostname": "https://bulv.cc"}
    assert config["exclude"] == ["drafts.md"]
    assert config["posts_dir"] == "posts"


def test_non_mapping_config_is_ignored(tmp_path):
    (tmp_path / "folio.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    assert load_config(tmp_path)["page_size"] == 10


def test_sitemap_shorthand(tmp_path):
    (tmp_path / "folio.yaml").write_text("sitemap: https://bulv.cc\n", encoding="utf-8")
    assert load_config(tmp_path)["sitemap"] == {"hostname": "https://bulv.cc"}


@pytest.mark.parametrize("body", ["page_size: 0\n", "page_size: ten\n", "page_size: true\n", "title: [oops\n"])
def test_invalid_config_raises(tmp_path, body):
    (tmp_path / "folio.yaml").write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_validate_page_size():
    assert validate_page_size(3) == 3
    with pytest.raises(ConfigError):
        validate_page_size(-1)
