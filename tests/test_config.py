import json

from import_optimizer import config as config_module
from import_optimizer.config import read_rule_config
from import_optimizer.rules import RuleConfiguration


def test_read_rule_config_from_toml(tmp_path):
    toml = tmp_path / "pyproject.toml"
    toml.write_text("[tool.import-optimizer]\nsort = false\nrelative-imports = \"last\"\n")
    config = read_rule_config(str(tmp_path))
    assert config == RuleConfiguration(sort=False, relative_imports="last")


def test_read_rule_config_from_package_json(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({"name": "app", "importOptimizer": {"merge": False}}))
    sub = tmp_path / "src" / "components"
    sub.mkdir(parents=True)
    config = read_rule_config(str(sub))
    assert config == RuleConfiguration(merge=False)


def test_pyproject_without_section_falls_through_to_package_json(tmp_path):
    (tmp_path / "pyproject.toml").write_text("[tool.black]\nline-length = 88\n")
    (tmp_path / "package.json").write_text(json.dumps({"importOptimizer": {"case_sensitive": False}}))
    assert read_rule_config(str(tmp_path)) == RuleConfiguration(case_sensitive=False)


def test_invalid_options_fall_back_to_defaults(tmp_path, caplog):
    (tmp_path / "package.json").write_text(json.dumps({"importOptimizer": {"sort": "sometimes", "colour": "red"}}))
    assert read_rule_config(str(tmp_path)) == RuleConfiguration()
    assert "unknown option 'colour'" in caplog.text
    assert "'sort' must be a boolean" in caplog.text


def test_unreadable_package_json_is_ignored(tmp_path, caplog):
    (tmp_path / "package.json").write_text("{not json")
    assert read_rule_config(str(tmp_path)) == RuleConfiguration()
    assert "Could not read" in caplog.text


def test_config_module_documents_its_sources():
    assert "pyproject.toml" in config_module.__doc__
    assert "package.json" in config_module.__doc__
