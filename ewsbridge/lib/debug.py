from lxml import etree


def xmlstring(root):
    if isinstance(root, str):
        return root
    ## an EwsBuilder carries its envelope as .doc
    if hasattr(root, "doc") and root.doc is not None:
        root = root.doc
    try:
        return etree.tostring(root, pretty_print=True).decode("utf-8")
    except TypeError:
        return repr(root)
