import os
import logging
from typing import Dict, Iterator, List, Optional, Union

import numpy as np
import regex as re
from tqdm import tqdm

from triebpe.errors import InvalidInputError, StorageError
from triebpe.maxheap import MaxHeap
from triebpe.trie import PrefixTrie
from triebpe.vocabstore import load_vocabulary, save_vocabulary

# Reserved marker character, stripped from the corpus and from merged tokens.
SENTINEL = "%"
SENTINEL_PATTERN = re.compile(re.escape(SENTINEL))

# Vocabulary ids start at 1, so 0 is free for unknown tokens and padding.
UNK_ID = 0
UNK_TOKEN = "<unk>"


class BaseTokenizer:
    """Base class holding the token <-> id maps and the id-level helpers."""

    def __init__(self):
        self.token_to_id: Dict[str, int] = {}
        self.id_to_token: Dict[int, str] = {}

    def tokenize(self, text: str) -> Iterator[str]:
        """Split text into token strings."""
        raise NotImplementedError("Subclasses must implement this method")

    def encode(self, text: str) -> List[int]:
        """Convert text to a list of token IDs. Tokens outside the vocabulary map to UNK_ID."""
        return [self.token_to_id.get(token, UNK_ID) for token in self.tokenize(text)]

    def decode(self, ids: List[int], attention_mask: Optional[List[int]] = None) -> str:
        """
        Convert a list of token IDs back to text.

        Padding shares UNK_ID, so pass the attention mask from
        `prepare_for_model` to drop padded positions instead of rendering them
        as UNK_TOKEN.
        """
        if attention_mask is not None:
            ids = [idx for idx, keep in zip(ids, attention_mask) if keep]
        return "".join(self.id_to_token.get(idx, UNK_TOKEN) for idx in ids)

    def batch_encode(self, texts: List[str], max_length: Optional[int] = None,
                     padding: bool = False, truncation: bool = False) -> List[List[int]]:
        """Encode a batch of texts."""
        batch_ids = []

        for text in texts:
            ids = self.encode(text)
            if truncation and max_length and len(ids) > max_length:
                ids = ids[:max_length]
            batch_ids.append(ids)

        if padding and max_length:
            for i in range(len(batch_ids)):
                if len(batch_ids[i]) < max_length:
                    batch_ids[i] = batch_ids[i] + [UNK_ID] * (max_length - len(batch_ids[i]))

        return batch_ids

    def prepare_for_model(self, texts: Union[str, List[str]], max_length: Optional[int] = None,
                          padding: bool = True, truncation: bool = True) -> Dict[str, np.ndarray]:
        """Encode texts into `input_ids` and `attention_mask` arrays."""
        if isinstance(texts, str):
            texts = [texts]

        encoded_texts = [self.encode(text) for text in texts]

        if truncation and max_length:
            encoded_texts = [ids[:max_length] for ids in encoded_texts]

        # 1 for tokens, 0 for padding
        attention_mask = [[1] * len(ids) for ids in encoded_texts]

        if padding:
            target = max_length or max((len(ids) for ids in encoded_texts), default=0)
            for i in range(len(encoded_texts)):
                padding_length = target - len(encoded_texts[i])
                if padding_length > 0:
                    encoded_texts[i] = encoded_texts[i] + [UNK_ID] * padding_length
                    attention_mask[i] = attention_mask[i] + [0] * padding_length

        return {
            "input_ids": np.array(encoded_texts, dtype=np.int64),
            "attention_mask": np.array(attention_mask, dtype=np.int64),
        }

    def __len__(self) -> int:
        """Return the vocabulary size."""
        return len(self.token_to_id)


class BPEEngine(BaseTokenizer):
    """
    Pair-encoding tokenizer backed by a prefix trie.

    Training repeatedly merges adjacent pairs of tokens, scheduled through a
    lazy max-heap keyed by negated pair counts. Tokenization is greedy
    longest-prefix matching against the learned vocabulary.
    """

    def __init__(self, model_name: str, verbose: bool = False):
        super().__init__()
        self.model_name = model_name
        self.verbose = verbose
        self.trained = False
        self.trie = PrefixTrie()

        vocab = load_vocabulary(model_name)
        if vocab is not None:
            self.trained = True
            for token, idx in vocab.items():
                self._register(token, idx)

    @classmethod
    def load(cls, path: str, verbose: bool = False) -> 'BPEEngine':
        """Build an engine from a stored vocabulary. The file must exist."""
        if not os.path.exists(path):
            raise StorageError(f"No vocabulary found at {path}")
        return cls(path, verbose=verbose)

    def save(self, path: Optional[str] = None) -> None:
        save_vocabulary(path or self.model_name, self.token_to_id)

    def _register(self, token: str, idx: int) -> None:
        self.token_to_id[token] = idx
        self.id_to_token[idx] = token
        self.trie.insert(token, idx)

    def add_token(self, token: str) -> int:
        """Append `token` with the next sequential id. An existing token keeps its id."""
        if token in self.token_to_id:
            logging.debug(f"{token!r} already in vocabulary, keeping id {self.token_to_id[token]}")
            return self.token_to_id[token]
        idx = len(self.token_to_id) + 1
        if idx in self.id_to_token:
            logging.warning(
                f"Id {idx} already belongs to {self.id_to_token[idx]!r}; "
                f"vocabulary ids are not contiguous, {token!r} reuses it"
            )
        self._register(token, idx)
        return idx

    @staticmethod
    def count_pairs(tokens: List[str]) -> Dict[str, int]:
        """Frequency of every adjacent pair, keyed by the concatenated text, in first-seen order."""
        pair_freqs: Dict[str, int] = {}
        for left, right in zip(tokens, tokens[1:]):
            pair = left + right
            pair_freqs[pair] = pair_freqs.get(pair, 0) + 1
        return pair_freqs

    @staticmethod
    def _bump(pair: str, pair_freqs: Dict[str, int], heap: MaxHeap) -> None:
        pair_freqs[pair] = pair_freqs.get(pair, 0) + 1
        heap.insert((-pair_freqs[pair], pair))

    def merge_pass(self, tokens: List[str], new_token: str,
                   pair_freqs: Dict[str, int], heap: MaxHeap) -> List[str]:
        """
        Fuse every adjacent pair whose text equals `new_token`, left to right.

        For each fusion the pairs formed with the left and right neighbours are
        counted once more and pushed to `heap` as fresh entries with negated counts.
        """
        merged: List[str] = []
        n = len(tokens)
        i = 0
        while i < n:
            if i < n - 1 and tokens[i] + tokens[i + 1] == new_token:
                if merged:
                    self._bump(merged[-1] + new_token, pair_freqs, heap)
                if i + 2 < n:
                    self._bump(new_token + tokens[i + 2], pair_freqs, heap)
                merged.append(new_token)
                i += 2
            else:
                merged.append(tokens[i])
                i += 1
        return merged

    def train(self, corpus: str, save: bool = False, k: int = 500) -> Dict[str, int]:
        """Learn up to `k` merges from `corpus` and return the vocabulary."""
        if not isinstance(corpus, str):
            raise InvalidInputError("Cannot train nonstring")

        logging.info("1 - Splitting corpus into characters")
        tokens = list(SENTINEL_PATTERN.sub("", corpus))

        logging.info(f"2 - Counting pairs over {len(tokens)} characters")
        pair_freqs = self.count_pairs(tokens)
        heap = MaxHeap()
        for pair, freq in pair_freqs.items():
            heap.insert((-freq, pair))

        logging.info(f"3 - Training BPE with up to {k} merges ({len(pair_freqs)} distinct pairs)")
        start_size = len(self.token_to_id)
        for _ in tqdm(range(k), disable=not self.verbose):
            if heap.is_empty():
                break

            neg_freq, best = heap.extract_max()
            freq = -neg_freq
            if freq == 1:
                break

            new_token = SENTINEL_PATTERN.sub("", best)
            idx = self.add_token(new_token)
            logging.debug(f"Merged {new_token!r} (freq {freq}) -> id {idx}")

            tokens = self.merge_pass(tokens, new_token, pair_freqs, heap)

        self.trained = True
        logging.info(
            f"BPE training complete. {len(self.token_to_id) - start_size} new tokens, "
            f"vocabulary size: {len(self.token_to_id)}, sequence length: {len(tokens)}"
        )

        if save:
            self.save()

        return self.token_to_id

    def tokenize(self, text: str) -> Iterator[str]:
        """Greedy longest-prefix segmentation. Unmatched characters come out one at a time."""
        i = 0
        while i < len(text):
            match = self.trie.longest_prefix_match(text, i)
            if match:
                yield match
                i += len(match)
            else:
                yield text[i]
                i += 1
