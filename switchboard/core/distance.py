"""Damerau-Levenshtein edit distance used for command suggestions."""


def damerau_levenshtein(a: str, b: str) -> int:
    """Compute the optimal string alignment distance between two strings.

    Insertions, deletions, substitutions and transpositions of two adjacent
    characters each cost 1.

    Examples:
        >>> damerau_levenshtein("ping", "pnig")
        1
        >>> damerau_levenshtein("help", "help")
        0
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    rows, cols = len(a) + 1, len(b) + 1
    d = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        d[i][0] = i
    for j in range(cols):
        d[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            d[i][j] = min(
                d[i - 1][j] + 1,  # deletion
                d[i][j - 1] + 1,  # insertion
                d[i - 1][j - 1] + cost,  # substitution
            )
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                d[i][j] = min(d[i][j], d[i - 2][j - 2] + 1)

    return d[-1][-1]
