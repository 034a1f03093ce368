# ashstudio/earley/first_follow.py
from __future__ import annotations
from typing import Dict, Set, List, Tuple
from dataclasses import dataclass
from ..grammar.transform import BNF


@dataclass
class FirstSets:
    """
    FirstSets
    =========
    NULLABLE/FIRST results, all keyed by symbol name.

    - nullable: nonterminals that derive ε
    - first: symbol -> set of terminals that can start it
      * terminal a: FIRST(a) = { a }
      * nonterminal A: union of FIRST(α) over A -> α
    - prod_first / prod_nullable: the same, per production index, for the
      Earley predictor (a production is only predicted when the lookahead can
      start it, or when it can derive ε)
    """
    nullable: Set[str]
    first: Dict[str, Set[str]]
    prod_first: List[Set[str]]
    prod_nullable: List[bool]

    def can_start(self, prod_idx: int, lookahead: str) -> bool:
        return self.prod_nullable[prod_idx] or lookahead in self.prod_first[prod_idx]


def compute_nullable_first(bnf: BNF) -> FirstSets:
    """
    compute_nullable_first
    ======================
    Fixed-point computation of NULLABLE and FIRST over a BNF grammar.

    1) NULLABLE
       - A -> ε makes A nullable
       - A -> X1 .. Xn with every Xi nullable makes A nullable
    2) FIRST
       - FIRST(α): scan α left to right, add FIRST(X) and stop at the first
         non-nullable symbol; ε is not stored, ``nullable`` stands for it
    """
    terms = set(bnf.terms)
    nonterms = set(bnf.nonterms)

    nullable: Set[str] = set()
    first: Dict[str, Set[str]] = {t: {t} for t in terms}
    for A in nonterms:
        first[A] = set()

    # ---------- 1) NULLABLE ----------
    changed = True
    while changed:
        changed = False
        for p in bnf.prods:
            if p.lhs in nullable:
                continue
            if all(X in nullable for X in p.rhs):
                nullable.add(p.lhs)
                changed = True

    # ---------- 2) FIRST ----------
    def first_of_sequence(seq: List[str]) -> Tuple[Set[str], bool]:
        out: Set[str] = set()
        for X in seq:
            out |= first[X]
            if X not in nullable:
                return out, False
        return out, True

    changed = True
    while changed:
        changed = False
        for p in bnf.prods:
            f_alpha, _ = first_of_sequence(p.rhs)
            before = len(first[p.lhs])
            first[p.lhs] |= f_alpha
            if len(first[p.lhs]) != before:
                changed = True

    prod_first: List[Set[str]] = []
    prod_nullable: List[bool] = []
    for p in bnf.prods:
        f_alpha, is_null = first_of_sequence(p.rhs)
        prod_first.append(f_alpha)
        prod_nullable.append(is_null)

    return FirstSets(nullable=nullable, first=first,
                     prod_first=prod_first, prod_nullable=prod_nullable)
