import json

from trainengine import BPEConfig, CorpusHandler, run


def test_config_json_round_trip(tmp_path):
    path = str(tmp_path / "configs" / "bpe.json")
    config = BPEConfig(model_name="m.json", corpus_path="c.txt", merges=42, save=False, verbose=True)

    config.to_json(path)
    loaded = BPEConfig.from_json(path)

    assert loaded.__dict__ == config.__dict__


def test_config_defaults():
    config = BPEConfig()
    assert config.model_name == "vocab.json"
    assert config.merges == 500
    assert config.save


def test_corpus_handler_reads_text_file(tmp_path):
    corpus = tmp_path / "corpus.txt"
    corpus.write_text("line one\nline two\n", encoding="utf-8")

    handler = CorpusHandler(BPEConfig(corpus_path=str(corpus)))

    assert handler.load_corpus() == "line one\nline two\n"


def test_run_trains_and_persists(tmp_path):
    corpus = tmp_path / "out.txt"
    corpus.write_text("aaa", encoding="utf-8")
    model = tmp_path / "vocab.json"

    vocab = run(BPEConfig(model_name=str(model), corpus_path=str(corpus), merges=1))

    assert vocab == {"aa": 1}
    with open(model, encoding="utf-8") as f:
        assert json.load(f) == {"aa": 1}


def test_run_without_save(tmp_path):
    corpus = tmp_path / "out.txt"
    corpus.write_text("aaaa", encoding="utf-8")
    model = tmp_path / "vocab.json"

    vocab = run(BPEConfig(model_name=str(model), corpus_path=str(corpus), save=False))

    assert vocab == {"aa": 1}
    assert not model.exists()
