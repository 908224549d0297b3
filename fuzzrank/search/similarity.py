from fuzzrank.constants import EXACT_MATCH_SCORE, SUBSTRING_MATCH_SCORE


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance between two strings with unit insert/delete/substitute costs.

    Fills a (len(b) + 1) x (len(a) + 1) matrix row by row; row 0 and column 0
    hold the distances to the empty prefix.
    """
    if not a:
        return len(b)
    if not b:
        return len(a)

    matrix = [[i] + [0] * len(a) for i in range(len(b) + 1)]
    matrix[0] = list(range(len(a) + 1))

    for i in range(1, len(b) + 1):
        for j in range(1, len(a) + 1):
            cost = 0 if a[j - 1] == b[i - 1] else 1
            matrix[i][j] = min(
                matrix[i - 1][j] + 1,  # deletion
                matrix[i][j - 1] + 1,  # insertion
                matrix[i - 1][j - 1] + cost,  # substitution
            )

    return matrix[len(b)][len(a)]


def similarity(a: str, b: str) -> float:
    """Case-insensitive similarity in [0, 1].

    Empty input scores 0, equal strings 1.0, containment 0.9, and anything
    else 1 - distance / longest length.
    """
    if not a or not b:
        return 0.0

    a_lower = a.lower()
    b_lower = b.lower()

    if a_lower == b_lower:
        return EXACT_MATCH_SCORE

    if b_lower in a_lower or a_lower in b_lower:
        return SUBSTRING_MATCH_SCORE

    distance = levenshtein_distance(a_lower, b_lower)
    return 1 - distance / max(len(a_lower), len(b_lower))
