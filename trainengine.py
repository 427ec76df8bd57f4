"""
Tokenizer Training Workflow

1. CONFIGURATION
   - Vocabulary location, corpus location and merge budget live in BPEConfig
   - Configs can be stored and reloaded as JSON

2. CORPUS LOADING
   - Plain text files are read as a single string
   - JSON/JSONL files or dataset names go through HuggingFace datasets,
     joining the text column with newlines

3. TRAINING
   - The engine loads an existing vocabulary if one is stored, otherwise starts empty
   - Up to `merges` pair merges are learned and optionally written back
   - Elapsed wall-clock time is logged
"""

import os
import json
import time
import logging
from typing import Dict

from datasets import load_dataset

from triebpe.tokenizerBPE import BPEEngine


class BPEConfig:
    """Configuration class for a tokenizer training run."""

    def __init__(
        self,
        model_name: str = "vocab.json",
        corpus_path: str = "out.txt",
        dataset_split: str = "train",
        text_column: str = "text",
        merges: int = 500,
        save: bool = True,
        verbose: bool = False
    ):
        self.model_name = model_name
        self.corpus_path = corpus_path
        self.dataset_split = dataset_split
        self.text_column = text_column
        self.merges = merges
        self.save = save
        self.verbose = verbose

    @classmethod
    def from_json(cls, json_path: str) -> 'BPEConfig':
        """Load configuration from a JSON file."""
        with open(json_path, 'r') as f:
            config_dict = json.load(f)
        return cls(**config_dict)

    def to_json(self, json_path: str) -> None:
        """Save configuration to a JSON file."""
        directory = os.path.dirname(json_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(json_path, 'w') as f:
            json.dump(self.__dict__, f, indent=2)


class CorpusHandler:
    """Supplies the training corpus as one in-memory string."""

    def __init__(self, config: BPEConfig):
        self.config = config

    def load_corpus(self) -> str:
        path = self.config.corpus_path
        if path.endswith('.txt'):
            return self._load_text_file(path)
        if path.endswith('.json') or path.endswith('.jsonl'):
            dataset = load_dataset('json', data_files=path, split=self.config.dataset_split)
        else:
            dataset = load_dataset(path, split=self.config.dataset_split)
        return "\n".join(dataset[self.config.text_column])

    def _load_text_file(self, file_path: str) -> str:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()


def run(config: BPEConfig) -> Dict[str, int]:
    """Load the corpus, train once and report how long training took."""
    corpus = CorpusHandler(config).load_corpus()
    logging.info(f"Corpus of {len(corpus)} characters loaded from {config.corpus_path}")

    bpe = BPEEngine(config.model_name, verbose=config.verbose)
    if bpe.trained:
        logging.info(f"Continuing from {len(bpe)} stored tokens")

    start = time.perf_counter()
    vocab = bpe.train(corpus, save=config.save, k=config.merges)
    seconds = time.perf_counter() - start

    logging.info(f"BPE: {seconds:.3f} seconds")
    return vocab
