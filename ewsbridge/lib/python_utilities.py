def to_wire(text):
    if text is None:
        return None
    if isinstance(text, str):
        text = bytes(text, "utf-8")
    return text


def to_normal_str(text):
    """
    Make sure we return a normal string, no matter if we got bytes
    from the wire or a str from the application.
    """
    if text is None:
        return text
    if not isinstance(text, str):
        text = text.decode("utf-8")
    text = text.replace("\r\n", "\n")
    return text


def to_xml_text(value) -> str:
    """
    Stringify a payload value for use as element text or attribute value.
    Booleans follow the xs:boolean lexical form.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)
