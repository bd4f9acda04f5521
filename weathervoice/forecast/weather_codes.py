"""WMO weather interpretation codes, as used by Open-Meteo, in Spanish."""

WMO_DESCRIPTIONS: dict[int, str] = {
    0: "Despejado",
    1: "Mayormente despejado",
    2: "Parcialmente nublado",
    3: "Nublado",
    45: "Niebla",
    48: "Niebla con escarcha",
    51: "Llovizna débil",
    53: "Llovizna moderada",
    55: "Llovizna intensa",
    56: "Llovizna helada débil",
    57: "Llovizna helada intensa",
    61: "Lluvia débil",
    63: "Lluvia moderada",
    65: "Lluvia intensa",
    66: "Lluvia helada débil",
    67: "Lluvia helada intensa",
    71: "Nevada débil",
    73: "Nevada moderada",
    75: "Nevada intensa",
    77: "Granos de nieve",
    80: "Chaparrones débiles",
    81: "Chaparrones moderados",
    82: "Chaparrones fuertes",
    85: "Chaparrones de nieve débiles",
    86: "Chaparrones de nieve fuertes",
    95: "Tormenta",
    96: "Tormenta con granizo débil",
    99: "Tormenta con granizo fuerte",
}


def describe_code(code: int | None) -> str:
    """Spanish description for a code; empty string when unmapped."""
    if code is None:
        return ""
    return WMO_DESCRIPTIONS.get(int(code), "")
