"""Feature classification activity.

Partitions a feature sequence by geometry type and counts the features of
each type.  Types that do not occur are absent from the result, so an
empty document yields an empty summary.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kml_viewer.models.feature import Feature


def summarise_features(features: Iterable[Feature]) -> dict[str, int]:
    """Count features per geometry type label.

    Args:
        features: Features of one collection.  Every feature must carry a
            geometry (guaranteed by the loader).

    Returns:
        Mapping of type label to count, in order of first appearance.
        The counts sum to the number of input features.
    """
    counts: Counter[str] = Counter(feature.kind.label for feature in features)
    return dict(counts)
