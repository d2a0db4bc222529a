"""
Defines the abstract syntax tree (AST) for the Kaleidoscope expression language.

Classes:
    ExprAST:
        Base class for every expression node.
    NumberExpr, VariableExpr, BinaryExpr, CallExpr:
        The four expression variants produced by the parser.
    PrototypeAST:
        A function name with its ordered parameter names.
    FunctionAST:
        A prototype paired with a body expression. Top-level expressions are wrapped
        in a FunctionAST with an anonymous prototype.
    ASTDict:
        TypedDict describing the serialized form returned by `to_dict()`.

All nodes are immutable. Each compound node holds its children directly, the tree has
no back-references, and call arguments and parameters are stored as tuples in source
order. Every node remembers the line/col of the token that started it; positions are
ignored by equality so trees can be compared structurally.

Example:
    BinaryExpr("+", NumberExpr(1.0), BinaryExpr("*", NumberExpr(2.0), NumberExpr(3.0)))
"""

from dataclasses import dataclass, field
from typing import Any, TypedDict


class ASTDict(TypedDict, total=False):
    """
    Serialized form of an AST node, suitable for JSON output or debugging.

    Fields:
        kind (str): Node discriminator ("number", "variable", "binary", "call",
            "prototype", "function").
        line (int): Source line of the first token of the node.
        col (int): Source column of the first token of the node.
    """

    kind: str
    line: int
    col: int
    value: float
    name: str
    op: str
    lhs: "ASTDict"
    rhs: "ASTDict"
    callee: str
    args: list["ASTDict"]
    params: list[str]
    prototype: "ASTDict"
    body: "ASTDict"


def _position() -> Any:
    return field(default=0, compare=False, repr=False)


@dataclass(frozen=True)
class ExprAST:
    """Base class for all expression nodes."""

    def to_dict(self) -> ASTDict:  # pragma: no cover
        raise NotImplementedError(f"{type(self).__name__} does not serialize")


@dataclass(frozen=True)
class NumberExpr(ExprAST):
    """Numeric literal such as `1.0`."""

    value: float
    line: int = _position()
    col: int = _position()

    def to_dict(self) -> ASTDict:
        return {"kind": "number", "value": self.value, "line": self.line, "col": self.col}


@dataclass(frozen=True)
class VariableExpr(ExprAST):
    """Reference to a variable, like `a`."""

    name: str
    line: int = _position()
    col: int = _position()

    def to_dict(self) -> ASTDict:
        return {"kind": "variable", "name": self.name, "line": self.line, "col": self.col}


@dataclass(frozen=True)
class BinaryExpr(ExprAST):
    """Binary operator applied to two sub-expressions."""

    op: str
    lhs: ExprAST
    rhs: ExprAST
    line: int = _position()
    col: int = _position()

    def to_dict(self) -> ASTDict:
        return {
            "kind": "binary",
            "op": self.op,
            "lhs": self.lhs.to_dict(),
            "rhs": self.rhs.to_dict(),
            "line": self.line,
            "col": self.col,
        }


@dataclass(frozen=True)
class CallExpr(ExprAST):
    """Function call; `args` keep source order."""

    callee: str
    args: tuple[ExprAST, ...] = ()
    line: int = _position()
    col: int = _position()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    def to_dict(self) -> ASTDict:
        return {
            "kind": "call",
            "callee": self.callee,
            "args": [a.to_dict() for a in self.args],
            "line": self.line,
            "col": self.col,
        }


@dataclass(frozen=True)
class PrototypeAST:
    """
    The "prototype" of a function: its name and its parameter names, which
    implicitly fix the number of arguments it takes.

    Duplicate parameter names are kept as written.
    """

    name: str
    params: tuple[str, ...] = ()
    line: int = _position()
    col: int = _position()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(self.params))

    @property
    def is_anonymous(self) -> bool:
        return self.name == "" and not self.params

    def to_dict(self) -> ASTDict:
        return {
            "kind": "prototype",
            "name": self.name,
            "params": list(self.params),
            "line": self.line,
            "col": self.col,
        }


@dataclass(frozen=True)
class FunctionAST:
    """A function definition: prototype plus body expression."""

    prototype: PrototypeAST
    body: ExprAST
    line: int = _position()
    col: int = _position()

    @classmethod
    def anonymous(cls, body: ExprAST) -> "FunctionAST":
        """Wraps a bare top-level expression in a nameless, parameterless function."""
        line = getattr(body, "line", 0)
        col = getattr(body, "col", 0)
        return cls(PrototypeAST("", (), line=line, col=col), body, line=line, col=col)

    def to_dict(self) -> ASTDict:
        return {
            "kind": "function",
            "prototype": self.prototype.to_dict(),
            "body": self.body.to_dict(),
            "line": self.line,
            "col": self.col,
        }


__all__ = [
    "ASTDict",
    "BinaryExpr",
    "CallExpr",
    "ExprAST",
    "FunctionAST",
    "NumberExpr",
    "PrototypeAST",
    "VariableExpr",
]
