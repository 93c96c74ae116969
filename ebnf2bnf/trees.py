def expr_iterator(node):
    """
    Iterator over the direct operands of an expression node. Used in visitors.
    """
    return iter(node.operands())


def visitor(root, iterator, visit):
    """Generic iterative depth-first visitor.

    Accepts the start of the structure to visit (root), iterator callable which
    gets called to get the next elements to visit and `visit` function which
    is called with the element and sub-results of the iterated child elements.
    Should return the result for the given node.

    Expression trees are owned by a single rule and never share nodes, so no
    memoization or cycle detection is done. Deeply nested groups don't
    consume Python stack.
    """
    stack = [(root, iterator(root), [])]
    result = None
    while stack:
        node, it, results = stack[-1]
        try:
            next_elem = next(it)
        except StopIteration:
            stack.pop()
            result = visit(node, results)
            if stack:
                stack[-1][-1].append(result)
            continue
        stack.append((next_elem, iterator(next_elem), []))

    return result
