# ashstudio/earley/runtime.py
"""Earley parser runtime (ambiguity aware).

- Takes a ``BNF`` and a token list and returns **every** parse tree of the
  input, up to a cap: zero trees means no match, several trees mean the input
  is ambiguous under the grammar.
- Nullable nonterminals are handled the Aycock-Horspool way (the predictor
  also advances over a nullable symbol), so ε-productions from ``?``/``*``
  lowering need no special casing.
- The predictor only adds productions whose FIRST set contains the lookahead
  (or that can derive ε), which keeps the charts small for DSL-sized inputs.
- When the chart stops advancing before the end of the input, a
  ``ParseError`` is raised with the expected terminals at that point.

Tree order is deterministic: for every split the longer left part comes
first, so the greedy reading of a statement is tree 0; productions of the same
nonterminal are tried in declaration order.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Set, Tuple
import logging

from ..errors import ParseError, caret_snippet
from ..grammar.transform import BNF, HELPER_PREFIX
from ..lex import LexTok
from .first_follow import FirstSets, compute_nullable_first
from .tree import Child, ParseTree

logger = logging.getLogger(__name__)

DEFAULT_MAX_TREES = 16

_Item = Tuple[int, int, int]   # (production index, dot, origin)


class _Chart:
    def __init__(self, n: int):
        self.sets: List[List[_Item]] = [[] for _ in range(n + 1)]
        self._seen: List[Set[_Item]] = [set() for _ in range(n + 1)]
        # waiting[i][B] -> items in set i whose dot is before nonterminal B
        self.waiting: List[Dict[str, List[_Item]]] = [{} for _ in range(n + 1)]

    def add(self, i: int, item: _Item, next_sym: Optional[str]) -> None:
        if item in self._seen[i]:
            return
        self._seen[i].add(item)
        self.sets[i].append(item)
        if next_sym is not None:
            self.waiting[i].setdefault(next_sym, []).append(item)


class _Recognition:
    """Completed spans collected while filling the chart."""
    def __init__(self) -> None:
        # (A, i, j) -> production indices of A that derive tokens[i:j]
        self.done: Dict[Tuple[str, int, int], Set[int]] = {}
        # (A, i) -> end positions j with A =>* tokens[i:j]
        self.ends: Dict[Tuple[str, int], Set[int]] = {}

    def complete(self, lhs: str, prod_idx: int, i: int, j: int) -> None:
        self.done.setdefault((lhs, i, j), set()).add(prod_idx)
        self.ends.setdefault((lhs, i), set()).add(j)


class EarleyParser:
    """Earley recognizer plus capped parse-forest enumeration.

    Parameters
    ----------
    bnf : BNF
        Lowered grammar (``grammar.transform.to_bnf``).
    max_trees : int
        Upper bound on the number of trees enumerated per call. Ambiguity can
        be exponential in the input length, so callers get the first
        ``max_trees`` trees in preference order.
    """

    def __init__(self, bnf: BNF, *, max_trees: int = DEFAULT_MAX_TREES):
        if max_trees < 1:
            raise ValueError("max_trees must be >= 1")
        self.bnf = bnf
        self.max_trees = max_trees
        self.sets: FirstSets = compute_nullable_first(bnf)
        self._nonterms: Set[str] = set(bnf.nonterms)

    # ---- public ----
    def parse_tokens(self,
                     tokens: Sequence[LexTok],
                     text: str = "",
                     *,
                     start: Optional[str] = None,
                     max_trees: Optional[int] = None) -> List[ParseTree]:
        """All parse trees of ``tokens`` (at most ``max_trees``).

        Raises
        ------
        ParseError
            When some token cannot continue any partial parse.
        """
        start = start or self.bnf.start
        if start not in self._nonterms:
            raise ValueError(f"Unknown start symbol {start!r}")
        toks = list(tokens)
        n = len(toks)
        rec = self._recognize(toks, text, start)
        if n not in rec.ends.get((start, 0), ()):
            logger.debug("no complete parse of %r over %d tokens", start, n)
            return []
        limit = max_trees or self.max_trees
        forest = _Forest(self.bnf, self._nonterms, toks, rec, limit)
        trees = forest.trees(start, 0, n)
        logger.debug("%d parse tree(s) for %r over %d tokens", len(trees), start, n)
        return trees[:limit]

    def recognize(self, tokens: Sequence[LexTok], text: str = "", *, start: Optional[str] = None) -> bool:
        start = start or self.bnf.start
        toks = list(tokens)
        return len(toks) in self._recognize(toks, text, start).ends.get((start, 0), ())

    # ---- chart ----
    def _next_sym(self, prod_idx: int, dot: int) -> Optional[str]:
        rhs = self.bnf.prods[prod_idx].rhs
        if dot < len(rhs) and rhs[dot] in self._nonterms:
            return rhs[dot]
        return None

    def _predictable(self, prod_idx: int, toks: List[LexTok], i: int) -> bool:
        lookahead = toks[i].type if i < len(toks) else ""
        return self.sets.can_start(prod_idx, lookahead)

    def _recognize(self, toks: List[LexTok], text: str, start: str) -> _Recognition:
        prods = self.bnf.prods
        nullable = self.sets.nullable
        n = len(toks)
        chart = _Chart(n)
        rec = _Recognition()

        for pi in self.bnf.prods_for(start):
            if self._predictable(pi, toks, 0):
                chart.add(0, (pi, 0, 0), self._next_sym(pi, 0))

        for i in range(n + 1):
            items = chart.sets[i]
            k = 0
            while k < len(items):
                pi, dot, origin = items[k]
                k += 1
                rhs = prods[pi].rhs
                if dot < len(rhs):
                    sym = rhs[dot]
                    if sym in self._nonterms:
                        # predict
                        for qi in self.bnf.prods_for(sym):
                            if self._predictable(qi, toks, i):
                                chart.add(i, (qi, 0, i), self._next_sym(qi, 0))
                        if sym in nullable:
                            chart.add(i, (pi, dot + 1, origin), self._next_sym(pi, dot + 1))
                    elif i < n and toks[i].type == sym:
                        # scan
                        chart.add(i + 1, (pi, dot + 1, origin), self._next_sym(pi, dot + 1))
                else:
                    # complete
                    lhs = prods[pi].lhs
                    rec.complete(lhs, pi, origin, i)
                    for (pj, dj, oj) in list(chart.waiting[origin].get(lhs, ())):
                        chart.add(i, (pj, dj + 1, oj), self._next_sym(pj, dj + 1))

            if i < n and not chart.sets[i + 1]:
                raise self._error(toks, i, chart.sets[i], text, start)

        return rec

    def _error(self, toks: List[LexTok], i: int, items: List[_Item], text: str, start: str) -> ParseError:
        expected: Set[str] = set()
        for (pi, dot, _origin) in items:
            rhs = self.bnf.prods[pi].rhs
            if dot < len(rhs):
                # a nonterminal stands for the terminals that can start it
                expected |= self.sets.first.get(rhs[dot], {rhs[dot]})
        if not items:
            expected = set(self.sets.first.get(start, ()))
        look = toks[i]
        expected_sorted = ", ".join(sorted(expected))
        return ParseError(
            f"Parse error at {look.line}:{look.col}: unexpected {look.type!r} ({look.text!r}), "
            f"expected one of {{{expected_sorted}}}",
            token=look.text,
            line=look.line,
            column=look.col,
            position=look.pos,
            expected=sorted(expected),
            snippet=caret_snippet(text, look.pos) if text else "",
        )


class _Forest:
    """Enumerates derivations from the completed spans, memoized per span."""

    def __init__(self, bnf: BNF, nonterms: Set[str], toks: List[LexTok], rec: _Recognition, limit: int):
        self._prods = bnf.prods
        self._nonterms = nonterms
        self._toks = toks
        self._rec = rec
        self._limit = limit
        self._memo: Dict[Tuple[str, int, int], List[ParseTree]] = {}
        self._seq_memo: Dict[Tuple[int, int, int, int], List[List[Child]]] = {}
        self._active: Set[Tuple[str, int, int]] = set()
        # A -> ... A  (the lowered `*` / `+` helpers)
        self._tail_recursive: Set[str] = {p.lhs for p in bnf.prods if p.rhs and p.rhs[-1] == p.lhs}
        # (A, j) -> lowest i whose spans A[i:j] were filled from the right
        self._filled_from: Dict[Tuple[str, int], int] = {}

    def trees(self, sym: str, i: int, j: int) -> List[ParseTree]:
        key = (sym, i, j)
        hit = self._memo.get(key)
        if hit is not None:
            return hit
        if key in self._active:
            return []
        if sym in self._tail_recursive:
            self._fill_from_right(sym, i, j)
            hit = self._memo.get(key)
            if hit is not None:
                return hit
        return self._build(sym, i, j)

    def _fill_from_right(self, sym: str, i: int, j: int) -> None:
        """Memoize the shorter suffix spans of a tail-recursive symbol first.

        Each suffix then finds its tail already built, so the stack depth
        stays bounded by nesting instead of growing with the list length.
        """
        lowest = self._filled_from.get((sym, j), j + 1)
        for m in range(lowest - 1, i, -1):
            key = (sym, m, j)
            if j in self._rec.ends.get((sym, m), ()) and key not in self._memo and key not in self._active:
                self._build(sym, m, j)
            self._filled_from[(sym, j)] = m

    def _build(self, sym: str, i: int, j: int) -> List[ParseTree]:
        key = (sym, i, j)
        self._active.add(key)
        out: List[ParseTree] = []
        for pi in sorted(self._rec.done.get(key, ())):
            for kids in self._seq(pi, 0, i, j):
                out.append(ParseTree(sym, kids))
                if len(out) >= self._limit:
                    break
            if len(out) >= self._limit:
                break
        self._active.discard(key)
        self._memo[key] = out
        return out

    def _seq(self, pi: int, idx: int, k: int, end: int) -> List[List[Child]]:
        """Child lists for ``rhs[idx:]`` of production ``pi`` spanning tokens[k:end]."""
        key = (pi, idx, k, end)
        hit = self._seq_memo.get(key)
        if hit is not None:
            return hit
        rhs = self._prods[pi].rhs
        out: List[List[Child]] = []
        if idx == len(rhs):
            if k == end:
                out.append([])
        else:
            sym = rhs[idx]
            if sym not in self._nonterms:
                if k < end and self._toks[k].type == sym:
                    for rest in self._seq(pi, idx + 1, k + 1, end):
                        out.append([self._toks[k]] + rest)
            else:
                splice = sym.startswith(HELPER_PREFIX)
                ends = self._rec.ends.get((sym, k), ())
                if idx == len(rhs) - 1:
                    # last symbol must reach the end of the span
                    ends = (end,) if end in ends else ()
                for m in sorted(ends, reverse=True):
                    if m > end or len(out) >= self._limit:
                        continue
                    rests = self._seq(pi, idx + 1, m, end)
                    if not rests:
                        continue
                    for sub in self.trees(sym, k, m):
                        head: List[Child] = list(sub.children) if splice else [sub]
                        for rest in rests:
                            out.append(head + rest)
                            if len(out) >= self._limit:
                                break
                        if len(out) >= self._limit:
                            break
        out = out[:self._limit]
        self._seq_memo[key] = out
        return out


def parse_string(text: str, parser: EarleyParser, lexer, *, start: Optional[str] = None) -> List[ParseTree]:
    """Tokenize ``text`` with ``lexer`` and return its parse trees."""
    return parser.parse_tokens(lexer.tokenize(text), text, start=start)
