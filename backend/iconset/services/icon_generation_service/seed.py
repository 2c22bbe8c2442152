"""Deterministic seed derivation for reproducible icon sets."""

UINT32_MASK = 0xFFFFFFFF


def _to_int32(value: int) -> int:
    value &= UINT32_MASK
    return value - 2**32 if value >= 2**31 else value


def derive_seed(prompt: str, style: int) -> int:
    """
    Hash `"{prompt}-{style}"` into a non-negative base seed.

    Polynomial rolling hash (`h = h * 31 + code`) over UTF-16 code units,
    wrapped to signed 32-bit after every step, absolute value returned.
    Unpaired surrogates hash as their own code unit.
    Identical inputs give identical seeds on every platform and process;
    distinct prompts may collide.
    """
    text = f"{prompt}-{style}"
    data = text.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = _to_int32(h * 31 + code)
    return abs(h)
