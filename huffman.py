from collections import Counter
from typing import Dict, Iterable, List, Optional

ALPHABET_SIZE = 256
MAX_COUNT = 2 ** 64 - 1 # counters are stored as unsigned 64-bit header fields


class FrequencyTable: # per-file byte counts, index = byte value
    def __init__(self, counts: Optional[Iterable[int]] = None):
        if counts is None:
            self.counts = [0] * ALPHABET_SIZE
            return
        self.counts = [int(c) for c in counts]
        if len(self.counts) != ALPHABET_SIZE:
            raise ValueError(f"frequency table needs {ALPHABET_SIZE} entries, got {len(self.counts)}")
        for value, c in enumerate(self.counts):
            if c < 0 or c > MAX_COUNT:
                raise ValueError(f"frequency for byte {value} out of range: {c}")

    def update(self, data: bytes) -> None: # add one chunk of input
        for value, c in Counter(data).items():
            self.counts[value] += c

    @property
    def total(self) -> int:
        return sum(self.counts)

    def symbols(self) -> List[int]: # nonzero byte values, ascending
        return [value for value in range(ALPHABET_SIZE) if self.counts[value]]

    def __getitem__(self, value: int) -> int:
        return self.counts[value]

    def __iter__(self):
        return iter(self.counts)

    def __len__(self) -> int:
        return ALPHABET_SIZE

    def __eq__(self, other) -> bool:
        if not isinstance(other, FrequencyTable):
            return NotImplemented
        return self.counts == other.counts

    def __repr__(self) -> str:
        present = {value: self.counts[value] for value in self.symbols()}
        return f"FrequencyTable({present})"


def count_frequencies(data: bytes) -> FrequencyTable:
    table = FrequencyTable()
    table.update(data)
    return table


class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol, frequency, left=None, right=None):
        self.symbol = symbol    # byte or None
        self.frequency = frequency
        self.left = left
        self.right = right

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self) -> str:
        if self.is_leaf():
            return f"HuffmanNode(symbol={self.symbol}, frequency={self.frequency})"
        return f"HuffmanNode(frequency={self.frequency})"


class MinHeap:
    """
    Binary min-heap of HuffmanNodes keyed on frequency only.

    There is no secondary tie-break: equal weights are ordered purely by the
    sift rules below, so the encoder and decoder get the same tree only when
    they insert the same nodes in the same order.
    """

    def __init__(self):
        self._data: List[HuffmanNode] = []

    def __len__(self) -> int:
        return len(self._data)

    def insert(self, node: HuffmanNode) -> None:
        data = self._data
        data.append(node)
        idx = len(data) - 1
        while idx > 0:
            parent = (idx - 1) // 2
            if data[parent].frequency <= data[idx].frequency:
                break
            data[parent], data[idx] = data[idx], data[parent]
            idx = parent

    def extract_min(self) -> Optional[HuffmanNode]:
        data = self._data
        if not data:
            return None
        last = data.pop()
        if not data:
            return last
        smallest_node = data[0]
        data[0] = last
        self._sift_down(0)
        return smallest_node

    def _sift_down(self, idx: int) -> None:
        data = self._data
        size = len(data)
        while True:
            left = idx * 2 + 1
            right = idx * 2 + 2
            smallest = idx
            if left < size and data[left].frequency < data[smallest].frequency:
                smallest = left
            if right < size and data[right].frequency < data[smallest].frequency:
                smallest = right
            if smallest == idx:
                return
            data[idx], data[smallest] = data[smallest], data[idx]
            idx = smallest


def build_huffman_tree(frequency_table: FrequencyTable) -> Optional[HuffmanNode]:
    priority_queue = MinHeap()
    for symbol in frequency_table.symbols(): # ascending byte order seeds the heap
        priority_queue.insert(HuffmanNode(symbol, frequency_table[symbol]))

    if len(priority_queue) == 0:
        return None
    if len(priority_queue) == 1:
        return priority_queue.extract_min() # degenerate single-symbol tree

    # Build the tree
    while len(priority_queue) > 1:
        left = priority_queue.extract_min()
        right = priority_queue.extract_min()
        merged_node = HuffmanNode(None, left.frequency + right.frequency, left, right)
        priority_queue.insert(merged_node)

    return priority_queue.extract_min() # root of the tree


def tree_shape(root: Optional[HuffmanNode]):
    """
    Nested-tuple view of a tree: ``(symbol, frequency)`` for leaves and
    ``(frequency, left_shape, right_shape)`` for internal nodes. Two trees
    compare equal exactly when they have the same structure and weights.
    """
    if root is None:
        return None
    if root.is_leaf():
        return (root.symbol, root.frequency)
    return (root.frequency, tree_shape(root.left), tree_shape(root.right))


def generate_huffman_codes(root: Optional[HuffmanNode]) -> Dict[int, str]:
    codes: Dict[int, str] = {}
    if root is None:
        return codes
    if root.is_leaf(): # single symbol still needs one bit per occurrence
        codes[root.symbol] = '0'
        return codes

    # depth is at most 255 (one merge per extra symbol), well inside the recursion limit
    def generate_codes_helper(node, current_code):
        if node.is_leaf():
            codes[node.symbol] = current_code
            return
        generate_codes_helper(node.left, current_code + '0')
        generate_codes_helper(node.right, current_code + '1')

    generate_codes_helper(root, '')
    return codes


def format_code_table(code_map: Dict[int, str]) -> List[str]:
    lines = []
    for value in sorted(code_map):
        if 32 <= value <= 126:
            lines.append(f"'{chr(value)}' (ASCII {value}) : {code_map[value]}")
        else:
            lines.append(f"0x{value:02X} (ASCII {value}) : {code_map[value]}")
    return lines
