# tests/test_qm_minimize.py
from itertools import product

import numpy as np
import pytest

from truth_table import Table, Value
from qm_minimize import (Implicant, iter_generations, merge_pass, minimize,
                         minimize_report, prime_implicants, try_merge)

def strs(implicants):
    return [str(i) for i in implicants]

def random_tables(seed: int, count: int, widths=(2, 3, 4, 5)):
    rng = np.random.default_rng(seed)
    for _ in range(count):
        n = int(rng.choice(widths))
        draws = rng.choice(3, size=1 << n, p=[0.4, 0.45, 0.15])
        yield Table(n, (["0", "1", "-"][int(d)] for d in draws))

def union_covered(implicants, table):
    out = set()
    for imp in implicants:
        out |= imp.constituents
    return out & table.minterms()


# ---------- implicant ----------
def test_from_index_and_text_form():
    imp = Implicant.from_index(1, 3, is_minterm=True)
    assert imp.values == (Value.ONE, Value.ZERO, Value.ZERO)
    assert str(imp) == "001"
    assert imp.constituents == {1}
    assert Implicant.from_index(6, 3, is_minterm=False).constituents == frozenset()
    assert Implicant.from_string("1-0").values == (Value.ZERO, Value.DONT_CARE, Value.ONE)
    with pytest.raises(ValueError):
        Implicant.from_index(8, 3, True)

def test_identity_ignores_constituents():
    a = Implicant.from_string("1-0", {4, 6})
    b = Implicant.from_string("1-0")
    assert a == b and hash(a) == hash(b)
    assert len({a, b}) == 1
    assert Implicant.from_string("1-0") != Implicant.from_string("1-1")

def test_order_by_constituent_count():
    small = Implicant.from_string("11", {3})
    big = Implicant.from_string("-1", {1, 3})
    assert small < big
    assert sorted([big, small]) == [small, big]

def test_covers():
    imp = Implicant.from_string("1-0")
    assert [i for i in range(8) if imp.covers(i)] == [4, 6]

def test_merge_complementary_pair():
    a = Implicant.from_string("010", {2})
    b = Implicant.from_string("011", {3})
    m = try_merge(a, b)
    assert str(m) == "01-"
    assert m.constituents == {2, 3}
    assert a.try_merge(b) == m

def test_merge_rejections():
    cases = [
        ("01-", "0-1"),   # two differences, both involving '-'
        ("01-", "011"),   # single difference but '-' vs '1'
        ("010", "010"),   # identical
        ("10", "01"),     # two 0/1 differences
    ]
    for x, y in cases:
        assert try_merge(Implicant.from_string(x), Implicant.from_string(y)) is None, (x, y)
    with pytest.raises(ValueError):
        try_merge(Implicant.from_string("01"), Implicant.from_string("011"))

def test_merge_rule_exhaustive_width2():
    alphabet = "01-"
    for x in map("".join, product(alphabet, repeat=2)):
        for y in map("".join, product(alphabet, repeat=2)):
            diffs = [k for k in range(2) if x[k] != y[k]]
            ok = len(diffs) == 1 and {x[diffs[0]], y[diffs[0]]} == {"0", "1"}
            m = try_merge(Implicant.from_string(x, {1}), Implicant.from_string(y, {2}))
            assert (m is not None) == ok, (x, y)
            if ok:
                expect = list(x)
                expect[diffs[0]] = "-"
                assert str(m) == "".join(expect)
                assert m.constituents == {1, 2}


# ---------- prime implicant generation ----------
def test_duplicate_merges_union_constituents():
    # "--" is reached by two paths with disjoint constituent sets
    gen = [Implicant.from_string("0-", {0}), Implicant.from_string("1-", {3}),
           Implicant.from_string("-0", {2}), Implicant.from_string("-1", {1})]
    nxt, merged = merge_pass(gen)
    assert strs(nxt) == ["--"]
    assert nxt[0].constituents == {0, 1, 2, 3}
    assert merged == [True, True, True, True]

def all_pairs_pass(gen):
    merged = [False] * len(gen)
    out = {}
    for i in range(len(gen)):
        for j in range(i + 1, len(gen)):
            c = try_merge(gen[i], gen[j])
            if c is not None:
                merged[i] = merged[j] = True
                out[c.values] = out.get(c.values, frozenset()) | c.constituents
    return out, merged

def test_bucketed_pass_matches_all_pairs():
    for t in random_tables(seed=5, count=25):
        for g in iter_generations(t):
            nxt, merged = merge_pass(g.implicants)
            expect, expect_merged = all_pairs_pass(g.implicants)
            assert {i.values: i.constituents for i in nxt} == expect
            assert merged == expect_merged

def test_eight_variable_table():
    out = prime_implicants(Table(8, "1" * 256))
    assert strs(out) == ["--------"]
    assert out[0].constituents == set(range(256))

def test_primes_of_cyclic_table():
    t = Table.from_string("11100111")
    assert sorted(strs(prime_implicants(t))) == sorted(["00-", "0-0", "-01", "-10", "1-1", "11-"])

def test_generations_terminate_and_grow_free_coordinates():
    t = Table(4, "1" * 16)
    gens = list(iter_generations(t))
    assert [g.level for g in gens] == [0, 1, 2, 3, 4]
    assert [len(g.implicants) for g in gens] == [16, 32, 24, 8, 1]
    for g in gens:
        assert all(imp.free_count() == g.level for imp in g.implicants)
    assert strs(gens[-1].primes) == ["----"]
    assert gens[-1].primes[0].constituents == set(range(16))

def test_primality_and_constituent_invariant():
    for t in random_tables(seed=7, count=40):
        for g in iter_generations(t):
            for p in g.primes:
                for q in g.implicants:
                    assert try_merge(p, q) is None, (t, str(p), str(q))
            for imp in g.implicants:
                assert all(imp.covers(i) for i in imp.constituents)
                # constituents are exactly the minterms inside the cube
                assert imp.constituents == {i for i in t.minterms() if imp.covers(i)}

def test_no_zero_inside_a_prime():
    for t in random_tables(seed=11, count=20):
        for p in prime_implicants(t):
            assert not any(p.covers(i) and t.output(i) is Value.ZERO for i in range(len(t)))


# ---------- minimize ----------
def test_cyclic_table_minimum_cover():
    t = Table.from_string("11100111")
    exact = minimize(t)
    assert len(exact) == 3
    assert union_covered(exact, t) == t.minterms()
    greedy = minimize(t, strategy="greedy")
    assert len(greedy) >= 3
    assert union_covered(greedy, t) == t.minterms()

def test_all_zero_is_empty():
    for strategy in ("exact", "greedy"):
        assert minimize(Table(3, "0" * 8), strategy) == []

def test_all_dont_care_is_empty():
    for strategy in ("exact", "greedy"):
        assert minimize(Table(3, "-" * 8), strategy) == []

def test_all_one_is_single_free_cube():
    for strategy in ("exact", "greedy"):
        assert strs(minimize(Table(3, "1" * 8), strategy)) == ["---"]

def test_single_minterm_with_dont_cares_merges_fully():
    t = Table(4, "1" + "-" * 15)
    for strategy in ("exact", "greedy"):
        out = minimize(t, strategy)
        assert strs(out) == ["----"]
        assert out[0].constituents == {0}

def test_seven_segment_a():
    t = Table(4, [1, 0, 1, 1, 0, 1, 1, 1, 1, 1] + ["-"] * 6)
    out = minimize(t)
    assert sorted(strs(out)) == sorted(["1---", "-1-1", "-0-0", "--1-"])

def test_greedy_never_beats_exact():
    for t in random_tables(seed=3, count=40, widths=(3, 4, 5, 6)):
        exact = minimize_report(t, "exact")
        greedy = minimize_report(t, "greedy")
        assert not exact.fell_back
        assert union_covered(exact.implicants, t) == t.minterms()
        assert union_covered(greedy.implicants, t) == t.minterms()
        assert len(greedy.implicants) >= len(exact.implicants)
        assert all(imp.constituents for imp in exact.implicants + greedy.implicants)
