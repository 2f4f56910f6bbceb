"""Filtering, sorting and paging over inspection results.

Every function here is pure: inputs are never modified and a new
sequence is returned.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Sequence, Tuple, Union

from ..config import DEFAULT_PAGE_SIZE
from ..models.inspection import ImageResult, InspectionReport

ResultSource = Union[InspectionReport, Sequence[ImageResult]]


class FilterType(Enum):
    """Result buckets; compatible, incompatible and errors never overlap."""
    ALL = "all"
    COMPATIBLE = "compatible"
    INCOMPATIBLE = "incompatible"
    ERRORS = "errors"


class SortKey(Enum):
    """Sortable result columns."""
    IMAGE = "image"
    RESOURCE_NAME = "resourceName"
    NAMESPACE = "namespace"
    RESOURCE_KIND = "resourceType"
    IS_ARM_COMPATIBLE = "isArmCompatible"


class SortDirection(Enum):
    """Sort direction."""
    ASC = "asc"
    DESC = "desc"


def _results_of(source: ResultSource) -> Sequence[ImageResult]:
    if isinstance(source, InspectionReport):
        return source.results
    return source


def _matches_filter(result: ImageResult, filter_type: FilterType) -> bool:
    if filter_type == FilterType.COMPATIBLE:
        return result.is_arm_compatible
    if filter_type == FilterType.INCOMPATIBLE:
        return not result.is_arm_compatible and not result.has_error
    if filter_type == FilterType.ERRORS:
        return result.has_error
    return True


def _matches_search(result: ImageResult, needle: str) -> bool:
    haystack = (
        result.image,
        result.resource_name,
        result.namespace,
        result.resource_kind.value,
    )
    return any(needle in value.lower() for value in haystack)


def filter_results(
    source: ResultSource,
    filter_type: FilterType = FilterType.ALL,
    search_text: str = "",
) -> List[ImageResult]:
    """
    Keep the results in a bucket, then those matching the search text.

    Args:
        source: Report or result sequence
        filter_type: Bucket to keep
        search_text: Case-insensitive substring of image, resource name,
            namespace or kind (ignored when empty)

    Returns:
        Matching results in their original order
    """
    needle = search_text.lower()
    return [
        result for result in _results_of(source)
        if _matches_filter(result, filter_type)
        and (not needle or _matches_search(result, needle))
    ]


def _sort_value(result: ImageResult, key: SortKey) -> Any:
    if key == SortKey.IS_ARM_COMPATIBLE:
        return int(result.is_arm_compatible)
    if key == SortKey.IMAGE:
        return result.image.lower()
    if key == SortKey.RESOURCE_NAME:
        return result.resource_name.lower()
    if key == SortKey.NAMESPACE:
        return result.namespace.lower()
    if key == SortKey.RESOURCE_KIND:
        return result.resource_kind.value.lower()
    raise NotImplementedError(f"No sort value for key {key.value}")


def sort_results(
    results: Sequence[ImageResult],
    key: SortKey = SortKey.IMAGE,
    direction: SortDirection = SortDirection.ASC,
) -> List[ImageResult]:
    """
    Sort results by one column.

    Strings compare case-insensitively and booleans as 0/1. The sort is
    stable in both directions: ties keep their original order.
    """
    return sorted(
        results,
        key=lambda result: _sort_value(result, key),
        reverse=direction == SortDirection.DESC,
    )


def paginate(
    results: Sequence[ImageResult],
    page_index: int,
    page_size: int,
) -> List[ImageResult]:
    """
    Return the zero-based page of results.

    Pages past the end (or a negative index) are empty.

    Raises:
        ValueError: If page_size is not positive
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if page_index < 0:
        return []
    start = page_index * page_size
    return list(results[start:start + page_size])


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for total results."""
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return (total + page_size - 1) // page_size


@dataclass(frozen=True)
class ReportView:
    """A filter/sort/page selection applied to a report."""
    filter_type: FilterType = FilterType.ALL
    search_text: str = ""
    sort_key: SortKey = SortKey.IMAGE
    direction: SortDirection = SortDirection.ASC
    page_index: int = 0
    page_size: int = DEFAULT_PAGE_SIZE

    def select(self, source: ResultSource) -> List[ImageResult]:
        """Filtered and sorted results, without paging."""
        filtered = filter_results(source, self.filter_type, self.search_text)
        return sort_results(filtered, self.sort_key, self.direction)

    def apply(self, source: ResultSource) -> Tuple[List[ImageResult], int]:
        """
        Apply filter, sort and page.

        Returns:
            The page of results and the size of the filtered set
        """
        selected = self.select(source)
        return paginate(selected, self.page_index, self.page_size), len(selected)
