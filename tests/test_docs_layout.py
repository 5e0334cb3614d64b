import importlib
import re
from pathlib import Path

import pytest

DOCS = Path(__file__).resolve().parent.parent / "docs"


def test_index_links_the_api_page():
    index = (DOCS / "index.md").read_text()
    assert "{toctree}" in index
    assert re.search(r"^api$", index, flags=re.MULTILINE)
    assert (DOCS / "api.md").is_file()


@pytest.mark.parametrize("module", re.findall(r"automodule:: (\S+)", (DOCS / "api.md").read_text()))
def test_api_page_modules_import(module):
    assert importlib.import_module(module).__name__ == module


def test_conf_points_at_src():
    conf = (DOCS / "conf.py").read_text()
    assert 'os.path.join("..", "src")' in conf
    assert 'root_doc = "index"' in conf
