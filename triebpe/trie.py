from typing import Dict, Optional


class TrieNode:
    """A single node of the prefix trie."""

    def __init__(self):
        self.children: Dict[str, "TrieNode"] = {}
        self.is_end_of_word = False
        self.value: Optional[int] = None


class PrefixTrie:
    """Character trie mapping token text to token id, used for longest-prefix lookup."""

    def __init__(self):
        self.root = TrieNode()
        self._size = 0

    def insert(self, word: str, value: int) -> None:
        """Insert `word` with `value`. Re-inserting a word overwrites its value."""
        node = self.root
        for char in word:
            child = node.children.get(char)
            if child is None:
                child = TrieNode()
                node.children[char] = child
            node = child
        if not node.is_end_of_word:
            self._size += 1
        node.is_end_of_word = True
        node.value = value

    def longest_prefix_match(self, text: str, start: int = 0) -> Optional[str]:
        """
        Return the longest vocabulary entry that is a prefix of text[start:],
        or None if no entry matches.
        """
        node = self.root
        last_end = -1
        i = start
        while i < len(text):
            node = node.children.get(text[i])
            if node is None:
                break
            i += 1
            if node.is_end_of_word:
                last_end = i
        if last_end < 0:
            return None
        return text[start:last_end]

    def get(self, word: str) -> Optional[int]:
        node = self.root
        for char in word:
            node = node.children.get(char)
            if node is None:
                return None
        return node.value if node.is_end_of_word else None

    def __contains__(self, word: str) -> bool:
        return self.get(word) is not None

    def __len__(self) -> int:
        return self._size
