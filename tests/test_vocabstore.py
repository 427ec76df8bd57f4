import json
import os

import pytest

from triebpe.errors import StorageError
from triebpe.vocabstore import load_vocabulary, save_vocabulary


def test_missing_file_loads_as_none(tmp_path):
    assert load_vocabulary(str(tmp_path / "absent.json")) is None


def test_save_and_load(tmp_path):
    path = str(tmp_path / "nested" / "vocab.json")
    vocab = {"th": 1, "the": 2, "é漢": 3}

    save_vocabulary(path, vocab)

    assert os.path.exists(path)
    assert load_vocabulary(path) == vocab


def test_save_overwrites(tmp_path):
    path = str(tmp_path / "vocab.json")
    save_vocabulary(path, {"ab": 1, "cd": 2})
    save_vocabulary(path, {"xy": 1})

    assert load_vocabulary(path) == {"xy": 1}


@pytest.mark.parametrize("content", [
    "{broken",
    json.dumps(["ab", "cd"]),
    json.dumps({"ab": "1"}),
    json.dumps({"ab": {"nested": 1}}),
])
def test_bad_content_raises(tmp_path, content):
    path = tmp_path / "vocab.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(StorageError):
        load_vocabulary(str(path))


def test_unwritable_location_raises(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(StorageError):
        save_vocabulary(str(blocker / "vocab.json"), {"ab": 1})
