from pathlib import Path

import pytest

from omnix.action import ReplaceAction
from omnix.config import OmConfigError, OmConfigTree
from omnix.fs import find_paths
from omnix.template import (
    FlakeTemplate,
    NixTemplate,
    Template,
    TemplateError,
    templates_from_config,
)


def _template_dict(src, **extra):
    data = {
        "template": {"path": str(src), "description": "A demo", "welcomeText": "Hi"},
        "params": [
            {"name": "name", "description": "Name", "placeholder": "foo"},
            {"name": "extra", "description": "Extra?", "paths": ["foo-extra"]},
        ],
    }
    data.update(extra)
    return data


def _make_src(tmp_path: Path) -> Path:
    src = tmp_path / "src"
    (src / "foo-extra").mkdir(parents=True)
    (src / "foo-extra" / "x.txt").write_text("x")
    (src / "foo.nix").write_text("name = foo;")
    return src


def test_nix_template_from_dict():
    nix = NixTemplate.from_dict({"path": "/t", "welcomeText": "Hello"})
    assert nix == NixTemplate(path=Path("/t"), description=None, welcome_text="Hello")


def test_nix_template_requires_path():
    with pytest.raises(ValueError):
        NixTemplate.from_dict({"description": "x"})


def test_template_tests_sorted(tmp_path):
    tests = {"zeta": {"params": {}, "asserts": {}}, "alpha": {"params": {}, "asserts": {}}}
    template = Template.from_dict(_template_dict(tmp_path, tests=tests))
    assert list(template.tests) == ["alpha", "zeta"]


def test_set_param_values(tmp_path):
    template = Template.from_dict(_template_dict(tmp_path))
    template.set_param_values({"name": "bar", "unknown": 1})
    assert template.params[0].action == ReplaceAction("foo", "bar")
    assert not template.params[1].action.has_value()


def test_scaffold_prunes_before_replacing(tmp_path):
    src = _make_src(tmp_path)
    template = Template.from_dict(_template_dict(src))
    template.set_param_values({"name": "bar", "extra": False})
    out = tmp_path / "out"
    result = template.scaffold_at(out)
    assert result == out.resolve()
    assert find_paths(out) == [Path("bar.nix")]
    assert (out / "bar.nix").read_text() == "name = bar;"
    assert (src / "foo.nix").read_text() == "name = foo;"


def test_scaffold_missing_source(tmp_path):
    template = Template.from_dict(_template_dict(tmp_path / "missing"))
    with pytest.raises(TemplateError):
        template.scaffold_at(tmp_path / "out")


def test_apply_actions_wraps_errors(tmp_path):
    src = _make_src(tmp_path)
    template = Template.from_dict(_template_dict(src))
    template.set_param_values({"extra": False})
    (tmp_path / "empty").mkdir()
    with pytest.raises(TemplateError, match="Unable to apply param extra"):
        template.apply_actions(tmp_path / "empty")


def test_templates_from_config(tmp_path):
    tree = OmConfigTree(
        {"templates": {"zz": _template_dict(tmp_path), "aa": _template_dict(tmp_path)}}
    )
    templates = templates_from_config(tree, "github:example/flake")
    assert [t.template_name for t in templates] == ["aa", "zz"]
    assert all(t.flake == "github:example/flake" for t in templates)


def test_templates_from_config_missing():
    with pytest.raises(TemplateError):
        templates_from_config(OmConfigTree(), ".")


def test_templates_from_config_invalid_entry():
    with pytest.raises(OmConfigError):
        templates_from_config(OmConfigTree({"templates": {"x": {"params": []}}}), ".")


def test_flake_template_display(tmp_path):
    template = Template.from_dict(_template_dict(tmp_path))
    text = str(FlakeTemplate(flake="github:example/flake", template_name="demo", template=template))
    assert text.startswith("demo ")
    assert "[github:example/flake]" in text
    assert text.endswith("A demo")