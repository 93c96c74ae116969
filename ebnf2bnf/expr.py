"""
Expression trees of EBNF rule right-hand sides.

Each node is a dataclass so trees compare structurally, by content. A tree is
owned by exactly one rule; rewriting replaces operands in place and never
shares nodes between rules.
"""
from dataclasses import dataclass, field
from typing import ClassVar, List

from ebnf2bnf.trees import expr_iterator, visitor

LITERAL_TAG = "'"


class Node:
    """
    Base class of expression nodes.

    Class attributes:
    tag(str): Operator tag used in the tree dump.
    composite(bool): True for operator nodes (seq, alt, diff, opt, star, plus)
        which the BNF normalization splits into separate rules.
    terminal(bool): True for literal text, character ranges and hex
        character references.
    """
    tag: ClassVar[str] = ''
    composite: ClassVar[bool] = False
    terminal: ClassVar[bool] = False

    def operands(self):
        return []

    def set_operand(self, idx, node):
        raise IndexError(f'{self.__class__.__name__} has no operands.')

    def to_struct(self):
        return to_struct(self)


@dataclass
class ListNode(Node):
    children: List[Node] = field(default_factory=list)
    composite: ClassVar[bool] = True

    def operands(self):
        return list(self.children)

    def set_operand(self, idx, node):
        self.children[idx] = node


@dataclass
class Sequence(ListNode):
    tag: ClassVar[str] = 'seq'


@dataclass
class Alternation(ListNode):
    tag: ClassVar[str] = 'alt'


@dataclass
class Difference(Node):
    left: Node
    right: Node
    tag: ClassVar[str] = 'diff'
    composite: ClassVar[bool] = True

    def operands(self):
        return [self.left, self.right]

    def set_operand(self, idx, node):
        if idx == 0:
            self.left = node
        elif idx == 1:
            self.right = node
        else:
            raise IndexError(idx)


@dataclass
class UnaryNode(Node):
    child: Node
    composite: ClassVar[bool] = True

    def operands(self):
        return [self.child]

    def set_operand(self, idx, node):
        if idx != 0:
            raise IndexError(idx)
        self.child = node


@dataclass
class Optional(UnaryNode):
    tag: ClassVar[str] = 'opt'


@dataclass
class ZeroOrMore(UnaryNode):
    tag: ClassVar[str] = 'star'


@dataclass
class OneOrMore(UnaryNode):
    tag: ClassVar[str] = 'plus'


@dataclass
class Literal(Node):
    text: str
    tag: ClassVar[str] = LITERAL_TAG
    terminal: ClassVar[bool] = True


@dataclass
class CharRange(Node):
    """Character class, `spec` is the text between the brackets."""
    spec: str
    tag: ClassVar[str] = 'range'
    terminal: ClassVar[bool] = True


@dataclass
class HexCharRef(Node):
    """Code point reference, `spec` includes the `#x` prefix."""
    spec: str
    tag: ClassVar[str] = 'hex'
    terminal: ClassVar[bool] = True


@dataclass
class SymbolRef(Node):
    name: str


QUANTIFIERS = {
    '?': Optional,
    '*': ZeroOrMore,
    '+': OneOrMore,
}


def to_struct(root):
    """
    Returns nested tuples for the given tree, e.g.
    `('seq', ("'", 'a'), ('opt', 'b'))`. Symbol references become plain
    names, everything else a tuple starting with the node tag.
    """
    def visit(node, subresults):
        if isinstance(node, SymbolRef):
            return node.name
        if isinstance(node, Literal):
            return (node.tag, node.text)
        if isinstance(node, (CharRange, HexCharRef)):
            return (node.tag, node.spec)
        return (node.tag,) + tuple(subresults)
    return visitor(root, expr_iterator, visit)


def symbol_refs(root):
    "Returns names of all symbols referenced anywhere in the tree."
    def visit(node, subresults):
        names = [name for names in subresults for name in names]
        if isinstance(node, SymbolRef):
            names.append(node.name)
        return names
    return visitor(root, expr_iterator, visit)


def is_flat(root):
    """
    Tells if the tree is a valid BNF right-hand side: operator nodes
    contain only symbol references and terminal values.
    """
    if not root.composite:
        return True
    if root.tag not in ('seq', 'alt', 'diff'):
        return False
    return all(not op.composite for op in root.operands())
