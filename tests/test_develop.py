import pytest

from omnix.config import MissingConfigAttribute, OmConfig, OmConfigError, load_config_tree
from omnix.develop import DEFAULT_README, DevelopConfig, Readme


def _om(text, reference=()):
    return OmConfig(flake_url=".", reference=list(reference), config=load_config_tree(text))


def test_default_readme():
    assert Readme().get_markdown() == DEFAULT_README
    assert DevelopConfig().readme.get_markdown().startswith("🍾 Welcome to the project")


def test_from_dict_reads_readme():
    cfg = DevelopConfig.from_dict({"readme": "Run it", "extra": 1})
    assert cfg.readme.get_markdown() == "Run it"


def test_from_dict_requires_readme():
    with pytest.raises(ValueError):
        DevelopConfig.from_dict({})


def test_from_dict_rejects_non_string():
    with pytest.raises(ValueError):
        DevelopConfig.from_dict({"readme": 3})


def test_from_om_config_default_entry():
    cfg = DevelopConfig.from_om_config(_om("develop:\n  default:\n    readme: Hi there\n"))
    assert cfg.readme.get_markdown() == "Hi there"


def test_from_om_config_missing_section_gives_default():
    cfg = DevelopConfig.from_om_config(_om("health:\n  default: {}\n"))
    assert cfg.readme.get_markdown() == DEFAULT_README


def test_from_om_config_reference():
    text = "develop:\n  default:\n    readme: A\n  other:\n    readme: B\n"
    assert DevelopConfig.from_om_config(_om(text, ["other"])).readme.get_markdown() == "B"


def test_from_om_config_missing_reference():
    with pytest.raises(MissingConfigAttribute):
        DevelopConfig.from_om_config(_om("develop:\n  default:\n    readme: A\n", ["nope"]))


def test_from_om_config_invalid_entry():
    with pytest.raises(OmConfigError):
        DevelopConfig.from_om_config(_om("develop:\n  default:\n    other: A\n"))