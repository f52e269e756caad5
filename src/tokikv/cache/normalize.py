"""
TokiKV — Key Normalization

Maps caller-supplied keys onto keys every backend accepts. Characters that
are unsafe in file names or meaningful to redis tooling are replaced with "-".
No escaping is done, so "a/b" and "a-b" share the same normalized key.
"""

DISALLOWED_KEY_CHARS = '/\\:*?"<>|.@_'

_TRANSLATION = str.maketrans({ch: "-" for ch in DISALLOWED_KEY_CHARS})


def normalize_key(key: str, prefix: str = "") -> str:
    """
    Normalize a cache key and apply the namespace prefix.

    The prefix is prepended as-is, after substitution.

    Args:
        key: Caller-supplied key
        prefix: Namespace prepended to the normalized key

    Returns:
        Backend-safe key
    """
    return f"{prefix}{key.translate(_TRANSLATION)}"
