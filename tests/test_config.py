import sys
import os
import importlib.util
from pathlib import Path

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from battle_notation.config import NotationConfig, config
from battle_notation.core.knowledge import KnowledgeBase

SCRIPTS = Path(__file__).parent.parent / "scripts"


def load_script(name):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_defaults():
    assert config.strict is False
    assert config.default_gen == 8
    assert config.default_level == 100
    assert config.generations.is_valid(1)
    assert not config.generations.is_valid(9)


def test_save_and_load(tmp_path):
    custom = NotationConfig(strict=True)
    custom.generations.default_level = 50
    custom.data.database_url = "sqlite:///kb.db"

    path = tmp_path / "config.json"
    custom.save(path)
    loaded = NotationConfig.load(path)

    assert loaded.strict is True
    assert loaded.default_level == 50
    assert loaded.data.database_url == "sqlite:///kb.db"
    assert loaded.to_dict() == custom.to_dict()


def test_build_knowledge_base_script(tmp_path):
    script = load_script("build_knowledge_base")
    output = tmp_path / "kb.db"
    dex = Path(config.data.dex_path)

    assert script.build(dex, output) == 0
    assert output.exists()
    # Refuses to overwrite without force
    assert script.build(dex, output) == 1
    assert script.build(dex, output, force=True) == 0

    kb = KnowledgeBase(database_url=f"sqlite:///{output}")
    assert kb.get(4).get_species("Garchomp") is not None


def test_build_with_missing_dex(tmp_path):
    script = load_script("build_knowledge_base")
    assert script.build(tmp_path / "missing.json", tmp_path / "kb.db") == 1
