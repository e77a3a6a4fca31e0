from itertools import pairwise

from lxml import etree


def assert_nodes_are_in_document_order(*nodes: etree._Element):
    # this avoids the path expressions that are under test
    if len(nodes) <= 1:
        raise ValueError
    if len(nodes) > 2:
        for node_pair in pairwise(nodes):
            assert_nodes_are_in_document_order(*node_pair)
        return

    lhn, rhn = nodes
    assert lhn is not rhn

    for lhn_index, rhn_index in zip(index_path(lhn), index_path(rhn)):
        if lhn_index < rhn_index:
            return
        if lhn_index == rhn_index:
            continue
        raise AssertionError

    # a node precedes its descendants
    assert len(index_path(lhn)) < len(index_path(rhn))


def index_path(node: etree._Element) -> list[int]:
    result = []
    while (parent := node.getparent()) is not None:
        result.append(parent.index(node))
        node = parent
    result.reverse()
    return result


def serialize(node: etree._Element) -> str:
    return etree.tostring(node, encoding="unicode", with_tail=False)
