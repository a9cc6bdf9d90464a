"""友情链接：网址规范化、按 Referer 置顶、展示数量截断、重复提交检测。"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, TypeVar

DISPLAY_LIMIT = 8

T = TypeVar("T")


def normalize_url(url: Optional[str]) -> str:
    """去掉 https:// / http:// / // 前缀和末尾的 /，再转小写。"""
    u = (url or "").strip()
    for prefix in ("https://", "http://", "//"):
        if u.startswith(prefix):
            u = u[len(prefix):]
    if u.endswith("/"):
        u = u[:-1]
    return u.lower()


def find_referer_match(links: Sequence[T], referer: Optional[str], *, url_of=lambda link: link.url) -> int:
    """返回第一个“规范化网址是规范化 Referer 前缀”的链接下标，没有命中返回 -1。"""
    if not referer:
        return -1
    norm_ref = normalize_url(referer)
    for idx, link in enumerate(links):
        if norm_ref.startswith(normalize_url(url_of(link))):
            return idx
    return -1


def rank_friend_links(
    links: Sequence[T],
    referer: Optional[str],
    *,
    show_all: bool = False,
    limit: int = DISPLAY_LIMIT,
    url_of=lambda link: link.url,
) -> List[T]:
    """把 Referer 命中的链接挪到第一位，其余保持原顺序；非 show_all 时截断到 limit 条。"""
    ranked = list(links)
    idx = find_referer_match(ranked, referer, url_of=url_of)
    if idx > 0:
        ranked.insert(0, ranked.pop(idx))
    if not show_all and len(ranked) > limit:
        ranked = ranked[:limit]
    return ranked


def is_duplicate_url(url: str, existing_urls: Iterable[Optional[str]]) -> bool:
    target = normalize_url(url)
    return any(normalize_url(u) == target for u in existing_urls)
