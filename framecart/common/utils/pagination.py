from typing import Optional, Tuple


def normalize_paging(limit: Optional[int], offset: Optional[int], max_limit: int = 1000) -> Tuple[Optional[int], int]:
    lim = limit if limit and limit > 0 else None
    if lim is not None:
        lim = min(lim, max_limit)
    off = offset if offset and offset > 0 else 0
    return lim, off
