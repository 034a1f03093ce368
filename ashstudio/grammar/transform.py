# ashstudio/grammar/transform.py
"""Lower EBNF (?, *, +, groups) to plain BNF productions.

Helper nonterminals are named ``__grpN``, ``__repN`` and ``__optN``; parse
trees splice them back into their parent, so they never show up to callers.
"""

from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import Dict, List, Set

from .ast           import Atom, Expr, Grammar, Group, Lit, Name, Suffix

HELPER_PREFIX = "__"


@dataclass
class Production:
    """One BNF production; ``rhs == []`` is epsilon."""
    lhs: str
    rhs: List[str]

    def __str__(self) -> str:
        return f"{self.lhs} -> {' '.join(self.rhs) if self.rhs else 'ε'}"


@dataclass
class BNF:
    start: str
    prods: List[Production]
    terms: List[str]
    nonterms: List[str]
    _by_lhs: Dict[str, List[int]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        # built once here; parsers only read it
        for i, p in enumerate(self.prods):
            self._by_lhs.setdefault(p.lhs, []).append(i)

    def prods_for(self, lhs: str) -> List[int]:
        """Production indices of ``lhs`` in declaration order."""
        return self._by_lhs.get(lhs, [])

    def is_helper(self, sym: str) -> bool:
        return sym.startswith(HELPER_PREFIX)


class _Lowering:
    def __init__(self, g: Grammar):
        self.g = g
        self.prods: List[Production] = []
        self.terms: Set[str] = set()
        self.nonterms: Set[str] = set()
        self._grp_id = 0
        self._rep_id = 0
        self._opt_id = 0
        self.token_terms: Set[str] = set(g.token_names())
        self.keyword_terms: Set[str] = g.keywords()
        self.rule_names: Set[str] = {r.name for r in g.rules}
        self.terms |= self.keyword_terms

    # fresh helper nonterminals
    def _new_grp(self) -> str:
        self._grp_id += 1
        name = f"{HELPER_PREFIX}grp{self._grp_id}"
        self.nonterms.add(name)
        return name

    def _new_rep(self) -> str:
        self._rep_id += 1
        name = f"{HELPER_PREFIX}rep{self._rep_id}"
        self.nonterms.add(name)
        return name

    def _new_opt(self) -> str:
        self._opt_id += 1
        name = f"{HELPER_PREFIX}opt{self._opt_id}"
        self.nonterms.add(name)
        return name

    def _where(self, atom: Atom) -> str:
        sp = atom.node.span or atom.span
        return f" at {sp.line}:{sp.col}" if sp else ""

    def _sym_from_name(self, atom: Atom, ident: str) -> str:
        if ident in self.token_terms:
            self.terms.add(ident)
            return ident
        if ident not in self.rule_names:
            raise SyntaxError(f"Undefined symbol '{ident}'{self._where(atom)}: "
                              f"neither a %token nor a rule")
        self.nonterms.add(ident)
        return ident

    def _syms_from_atom_base(self, atom: Atom) -> List[str]:
        node = atom.node
        if isinstance(node, Name):
            return [self._sym_from_name(atom, node.ident)]
        if isinstance(node, Lit):
            if node.text not in self.keyword_terms:
                raise SyntaxError(f'Literal "{node.text}"{self._where(atom)} is not declared; '
                                  f'add "{node.text}" : "{node.text}"; or list it in %keywords')
            return [node.text]
        if isinstance(node, Group):
            grp_name = self._new_grp()
            self._lower_expr_into(grp_name, node.expr)
            return [grp_name]
        raise TypeError("unknown Atom.node")

    def _lower_seq_atoms(self, atoms: List[Atom]) -> List[str]:
        rhs: List[str] = []
        for a in atoms:
            base_syms = self._syms_from_atom_base(a)
            if a.suffix == Suffix.NONE:
                rhs.extend(base_syms)
            elif a.suffix == Suffix.OPT:
                # opt -> ε | base
                opt = self._new_opt()
                self.prods.append(Production(opt, []))
                self.prods.append(Production(opt, base_syms.copy()))
                rhs.append(opt)
            elif a.suffix == Suffix.STAR:
                # rep -> ε | base rep   (right recursive)
                rep = self._new_rep()
                self.prods.append(Production(rep, []))
                self.prods.append(Production(rep, base_syms + [rep]))
                rhs.append(rep)
            elif a.suffix == Suffix.PLUS:
                # base rep, rep -> ε | base rep
                rep = self._new_rep()
                self.prods.append(Production(rep, []))
                self.prods.append(Production(rep, base_syms + [rep]))
                rhs.extend(base_syms)
                rhs.append(rep)
            else:
                raise ValueError(f"unknown suffix: {a.suffix}")
        return rhs

    def _lower_expr_into(self, lhs: str, expr: Expr) -> None:
        self.nonterms.add(lhs)
        for seq in expr.alts:
            self.prods.append(Production(lhs, self._lower_seq_atoms(seq.items)))

    def lower(self) -> BNF:
        if not self.g.rules:
            raise SyntaxError("Grammar has no rules")
        start = self.g.start or self.g.rules[0].name
        if start not in self.rule_names:
            raise SyntaxError(f"%start names an unknown rule '{start}'")
        for r in self.g.rules:
            self._lower_expr_into(r.name, r.expr)
        self.terms |= self.token_terms
        return BNF(
            start=start,
            prods=self.prods,
            terms=sorted(self.terms),
            nonterms=sorted(self.nonterms),
        )


def to_bnf(g: Grammar) -> BNF:
    """Grammar (AST) -> BNF (productions, terminal and nonterminal sets)."""
    return _Lowering(g).lower()
