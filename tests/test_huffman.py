from fractions import Fraction

import pytest

from huffman import (
    FrequencyTable,
    HuffmanNode,
    MinHeap,
    build_huffman_tree,
    count_frequencies,
    format_code_table,
    generate_huffman_codes,
    tree_shape,
)


def kraft_sum(code_map):
    return sum(Fraction(1, 2 ** len(code)) for code in code_map.values())


def is_prefix_free(code_map):
    codes = sorted(code_map.values())
    return all(not b.startswith(a) for a, b in zip(codes, codes[1:]))


def test_count_frequencies_abracadabra(abracadabra):
    ft = count_frequencies(abracadabra)
    assert ft[ord('a')] == 5
    assert ft[ord('b')] == 2
    assert ft[ord('r')] == 2
    assert ft[ord('c')] == 1
    assert ft[ord('d')] == 1
    assert ft.total == 11
    assert ft.symbols() == [ord('a'), ord('b'), ord('c'), ord('d'), ord('r')]


def test_count_frequencies_empty():
    ft = count_frequencies(b"")
    assert ft.total == 0
    assert list(ft) == [0] * 256
    assert ft.symbols() == []


def test_update_in_chunks_matches_single_pass(abracadabra):
    ft = FrequencyTable()
    ft.update(abracadabra[:4])
    ft.update(abracadabra[4:])
    assert ft == count_frequencies(abracadabra)


@pytest.mark.parametrize("counts", [
    [0] * 255,
    [0] * 257,
    [-1] + [0] * 255,
    [2 ** 64] + [0] * 255,
])
def test_frequency_table_rejects_bad_counts(counts):
    with pytest.raises(ValueError):
        FrequencyTable(counts)


def test_min_heap_empty_returns_none():
    h = MinHeap()
    assert h.extract_min() is None
    assert len(h) == 0


def test_min_heap_extracts_in_weight_order():
    weights = [7, 3, 9, 1, 4, 4, 8, 2, 6, 5]
    h = MinHeap()
    for i, w in enumerate(weights):
        h.insert(HuffmanNode(i, w))
    out = []
    while len(h):
        out.append(h.extract_min().frequency)
    assert out == sorted(weights)


def test_min_heap_ties_follow_sift_order():
    # equal weights are not reordered by symbol or insertion time
    h = MinHeap()
    for symbol in (ord('A'), ord('B'), ord('C')):
        h.insert(HuffmanNode(symbol, 1))
    assert [h.extract_min().symbol for _ in range(3)] == [ord('A'), ord('C'), ord('B')]


def test_build_tree_empty_table():
    assert build_huffman_tree(FrequencyTable()) is None
    assert generate_huffman_codes(None) == {}


def test_build_tree_single_symbol_is_leaf():
    root = build_huffman_tree(count_frequencies(b"AAAA"))
    assert root.is_leaf()
    assert root.symbol == ord('A')
    assert root.frequency == 4
    assert generate_huffman_codes(root) == {ord('A'): '0'}


def test_abracadabra_tree_and_codes(abracadabra):
    root = build_huffman_tree(count_frequencies(abracadabra))
    a, b, c, d, r = (ord(ch) for ch in "abcdr")
    assert tree_shape(root) == (11, (a, 5), (6, (b, 2), (4, (r, 2), (2, (c, 1), (d, 1)))))
    assert generate_huffman_codes(root) == {a: '0', b: '10', r: '110', c: '1110', d: '1111'}


def test_build_is_reproducible_from_table(skewed_full_alphabet):
    ft = count_frequencies(skewed_full_alphabet)
    first = build_huffman_tree(ft)
    second = build_huffman_tree(FrequencyTable(list(ft)))
    assert first is not second
    assert tree_shape(first) == tree_shape(second)
    assert generate_huffman_codes(first) == generate_huffman_codes(second)


def test_full_alphabet_codes_satisfy_kraft_equality(skewed_full_alphabet):
    ft = count_frequencies(skewed_full_alphabet)
    root = build_huffman_tree(ft)
    code_map = generate_huffman_codes(root)
    assert sorted(code_map) == list(range(256))
    assert root.frequency == ft.total
    assert is_prefix_free(code_map)
    assert kraft_sum(code_map) == 1
    assert max(len(code) for code in code_map.values()) <= 255


def test_frequent_symbols_get_shorter_codes(skewed_full_alphabet):
    code_map = generate_huffman_codes(build_huffman_tree(count_frequencies(skewed_full_alphabet)))
    assert len(code_map[0]) <= len(code_map[255])


def test_format_code_table():
    lines = format_code_table({ord('a'): '0', 10: '11'})
    assert lines == [
        "0x0A (ASCII 10) : 11",
        "'a' (ASCII 97) : 0",
    ]
