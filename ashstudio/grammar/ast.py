# ashstudio/grammar/ast.py
"""Grammar AST
- TokenDecl: %token NAME /regex/
- IgnoreDecl: %ignore /regex/
- KeywordDecl: "lit" : "lit"  or  %keywords "a" "b" ...
- Expr/Seq/Atom: EBNF kept as written (?, *, + included)
"""

from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import Dict, List, Optional, Set, Union


@dataclass
class Span:
    start: int
    end: int
    line: int
    col: int


@dataclass
class TokenDecl:
    name: str
    pattern: str    # regex source, without slashes
    flags: str = ""
    span: Optional[Span] = None


@dataclass
class IgnoreDecl:
    pattern: str
    flags: str = ""
    span: Optional[Span] = None


@dataclass
class KeywordDecl:
    lexeme: str
    span: Optional[Span] = None


class Suffix:
    NONE = "none"
    OPT  = "opt"
    STAR = "star"
    PLUS = "plus"


@dataclass
class Name:
    ident: str
    span: Optional[Span] = None


@dataclass
class Lit:
    text: str
    span: Optional[Span] = None


@dataclass
class Group:
    expr: "Expr"
    span: Optional[Span] = None


AtomKind = Union[Name, Lit, Group]


@dataclass
class Atom:
    node: AtomKind
    suffix: str = Suffix.NONE
    span: Optional[Span] = None


@dataclass
class Seq:
    """One alternative: a sequence of atoms (possibly empty)."""
    items: List[Atom]


@dataclass
class Expr:
    alts: List[Seq]


@dataclass
class Rule:
    name: str
    expr: Expr
    span: Optional[Span] = None


@dataclass
class Grammar:
    decl_tokens: List[TokenDecl] = field(default_factory=list)
    decl_ignores: List[IgnoreDecl] = field(default_factory=list)
    decl_keywords: List[KeywordDecl] = field(default_factory=list)

    rules: List[Rule] = field(default_factory=list)
    start: Optional[str] = None

    options: Dict[str, str] = field(default_factory=dict)

    def token_names(self) -> List[str]:
        return [t.name for t in self.decl_tokens]

    def keywords(self) -> Set[str]:
        return {k.lexeme for k in self.decl_keywords}

    def rule(self, name: str) -> Optional[Rule]:
        for r in self.rules:
            if r.name == name:
                return r
        return None
