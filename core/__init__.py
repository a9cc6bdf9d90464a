"""核心业务模块

包含：
- HotTermTracker: 热搜词归类与计分
- ViewGrowthEstimator: 浏览量随机增长
- rank_friend_links: 友链按 Referer 置顶
- CatalogService: 目录查询门面
- SoulaPlugin / PluginRegistry: 插件与注册表
"""

from .catalog import CatalogService
from .friend_links import DISPLAY_LIMIT, normalize_url, rank_friend_links
from .hot_terms import HotTermTracker, pick_majority, tally_categories
from .pagination import page_count
from .registry import CatalogPlugin, Once, PluginRegistry
from .view_growth import ViewGrowthEstimator, compute_increment

__all__ = [
    "CatalogService",
    "DISPLAY_LIMIT",
    "normalize_url",
    "rank_friend_links",
    "HotTermTracker",
    "pick_majority",
    "tally_categories",
    "page_count",
    "CatalogPlugin",
    "Once",
    "PluginRegistry",
    "ViewGrowthEstimator",
    "compute_increment",
]
