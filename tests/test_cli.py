from unittest.mock import patch

import pytest

from omnix.cli import main, parse_params

OM_YAML = """\
templates:
  default:
    template:
      path: tpl
      description: A demo
    params:
      - name: project
        description: Project name
        placeholder: my-project
"""


@pytest.fixture
def flake_dir(tmp_path):
    root = tmp_path / "flake"
    tpl = root / "tpl"
    tpl.mkdir(parents=True)
    (tpl / "README.md").write_text("my-project")
    (tpl / "my-project.txt").write_text("data")
    (root / "om.yaml").write_text(OM_YAML)
    return root


def test_parse_params_object():
    assert parse_params('{"project": "hello", "docs": false}') == {
        "project": "hello",
        "docs": False,
    }


def test_parse_params_rejects_non_object():
    with pytest.raises(ValueError):
        parse_params("[1, 2]")


def test_parse_params_rejects_bad_json():
    with pytest.raises(ValueError):
        parse_params("{not json")


def test_output_required_without_test():
    with pytest.raises(SystemExit) as exc:
        main(["init", "./flake"])
    assert exc.value.code == 2


def test_test_requires_flake():
    with pytest.raises(SystemExit) as exc:
        main(["init", "--test"])
    assert exc.value.code == 2


def test_test_conflicts_with_output():
    with pytest.raises(SystemExit) as exc:
        main(["init", "./flake", "--test", "-o", "out"])
    assert exc.value.code == 2


def test_nix_missing_fails(tmp_path):
    with patch("omnix.check.shutil.which", return_value=None):
        assert main(["init", "./flake", "-o", str(tmp_path / "out")]) == 1


def test_existing_output_dir_fails(tmp_path, flake_dir, capsys):
    out = tmp_path / "exists"
    out.mkdir()
    with patch("omnix.check.shutil.which", return_value="/usr/bin/nix"):
        code = main(["init", str(flake_dir), "-o", str(out)])
    assert code == 1
    assert "Output directory already exists" in capsys.readouterr().err


def test_init_scaffolds_local_template(tmp_path, flake_dir):
    out = tmp_path / "out"
    argv = [
        "init", str(flake_dir), "-o", str(out),
        "--non-interactive", "--params", '{"project": "hello"}',
    ]
    with patch("omnix.check.shutil.which", return_value="/usr/bin/nix"):
        assert main(argv) == 0
    assert (out / "README.md").read_text() == "hello"
    assert (out / "hello.txt").read_text() == "data"


def test_init_missing_param_non_interactive(tmp_path, flake_dir, capsys):
    out = tmp_path / "out"
    with patch("omnix.check.shutil.which", return_value="/usr/bin/nix"):
        code = main(["init", str(flake_dir), "-o", str(out), "--non-interactive"])
    assert code == 1
    assert "project is missing" in capsys.readouterr().err


def test_init_unknown_template_attr(tmp_path, flake_dir, capsys):
    out = tmp_path / "out"
    with patch("omnix.check.shutil.which", return_value="/usr/bin/nix"):
        code = main(["init", f"{flake_dir}#nope", "-o", str(out), "--non-interactive"])
    assert code == 1
    assert "Template not found" in capsys.readouterr().err