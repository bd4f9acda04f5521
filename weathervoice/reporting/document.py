"""XML voice document: one Say element per spoken line."""

import xml.etree.ElementTree as ET

RETURN_EVENT = "FlowEvent=return"


def redirect_target(callback_url: str) -> str:
    separator = "&" if "?" in callback_url else "?"
    return f"{callback_url}{separator}{RETURN_EVENT}"


def render_document(lines: list[str], callback_url: str | None = None) -> str:
    root = ET.Element("Response")
    for line in lines:
        ET.SubElement(root, "Say").text = line
    if callback_url:
        redirect = ET.SubElement(root, "Redirect", method="POST")
        redirect.text = redirect_target(callback_url)
    ET.indent(root)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True).decode("utf-8")
