from collections.abc import Mapping

QUOTES = ('"', "'")


def trim_quote_and_space(x: str, /) -> str:
    """Removes one layer of matching quotes, or surrounding whitespace if the value is not quoted."""

    if len(x) >= 2 and x[0] in QUOTES and x[0] == x[-1]:
        return x[1:-1]
    return x.strip()


def keys_string(m: Mapping[str, str], /) -> str:
    """Joins a mapping into `key=value` pairs separated by commas.

    Pairs come out in the mapping's iteration order, callers should not rely on it.
    """

    return ",".join(f"{k}={v}" for k, v in m.items())
