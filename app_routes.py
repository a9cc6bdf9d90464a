"""路由层（Blueprint）全集（为了减少文件数量集中在一个模块里）。

阅读提示（可读性优先）：
1) 这个文件只做“薄路由”：取参数 -> 校验/鉴权 -> 调用 `core/catalog.py` -> 返回统一信封。
2) 从上到下按“用户访问路径”排序：
   - 公共 API：搜索（/api/search）、健康检查（/api/health）
   - 目录 API（需 X-Token）：分类、资源列表、随机、详情、热门、友链
3) 所有 CatalogError 统一由 `handle_catalog_error`（在 app.py 注册）转成 {code, message, data} + HTTP 状态。
"""

from __future__ import annotations

from flask import Blueprint, current_app, request

import app_services as svc
from core import pagination
from core.catalog import (
    DEFAULT_CATEGORY_PAGE_SIZE,
    DEFAULT_HOT_LIMIT,
    DEFAULT_ITEM_LIMIT,
    DEFAULT_PER_PAGE,
    DEFAULT_RANDOM_SIZE,
)
from core.errors import CatalogError
from core.plugin import get_plugin
from core.schemas import FriendLinkUpsert, SearchRequest, SearchResponse

# 对外只暴露 2 个 Blueprint，`app.py` 和插件会负责注册。
__all__ = ["search_bp", "catalog_bp", "handle_catalog_error"]


search_bp = Blueprint("search", __name__, url_prefix="/api")
catalog_bp = Blueprint("catalog", __name__, url_prefix="/api")

MAX_PAGE_SIZE = 100


def handle_catalog_error(exc: CatalogError):
    extra = {"error_code": exc.error_code} if exc.error_code else {}
    return svc.api_error(exc.message, http_status=exc.http_status, code=exc.code, **extra)


# ============================================================
# 1) 公共 API：搜索 / 健康检查
# ============================================================


@search_bp.route("/search", methods=["GET", "POST"])
def search():
    """关键词搜索；响应组装完成后把热搜统计提交到后台线程池。"""
    if request.method == "POST":
        body = request.get_json(silent=True)
    else:
        body = {"kw": request.args.get("kw", "")}
    req = svc.parse_body(SearchRequest, body)

    plugin = get_plugin(current_app)
    results = plugin.search(req.kw, req.ext)
    response = svc.api_ok(SearchResponse(total=len(results), results=results))

    plugin.record_search(req.kw, results)
    return response


@search_bp.get("/health")
def health():
    registry = current_app.extensions["plugin_registry"]
    names = registry.names()
    return {
        "status": "ok",
        "plugins_enabled": bool(names),
        "plugin_count": len(names),
        "plugins": names,
    }


# ============================================================
# 2) 目录 API（共享口令）
# ============================================================


@catalog_bp.before_request
def require_shared_token():
    """X-Token 必须与配置的 SOULA_TOKEN 一致；预检请求交给 CORS 处理。"""
    if request.method == "OPTIONS":
        return None
    svc.check_shared_token(request.headers.get(svc.TOKEN_HEADER), current_app.config.get("SOULA_TOKEN", ""))
    return None


@catalog_bp.get("/categories")
def categories():
    """分类分页 + 每个分类的热搜词 + 今日（或关键词）计数。"""
    catalog = get_plugin(current_app).catalog
    page = pagination.positive_or_default(request.args.get("page"), 1)
    page_size = pagination.positive_or_default(request.args.get("pageSize"), DEFAULT_CATEGORY_PAGE_SIZE)
    item_limit = pagination.positive_or_default(request.args.get("limit"), DEFAULT_ITEM_LIMIT)

    result = catalog.list_categories(
        page=page,
        page_size=page_size,
        item_limit=item_limit,
        today_start=request.args.get("todayStart"),
        keyword=request.args.get("keyword", ""),
    )
    return svc.api_ok(result)


@catalog_bp.get("/collected-resources")
def resources():
    """资源列表：分类/关键词过滤 + latest/hot 排序 + 分页 + 今日新增总数。"""
    catalog = get_plugin(current_app).catalog
    page = pagination.positive_or_default(request.args.get("page"), 1)
    per_page = pagination.positive_or_default(request.args.get("perPage"), DEFAULT_PER_PAGE)

    result = catalog.list_resources(
        page=page,
        per_page=per_page,
        today_start=request.args.get("todayStart"),
        category=request.args.get("category", ""),
        keyword=request.args.get("keyword", ""),
        sort=(request.args.get("sort") or "latest").strip().lower(),
    )
    return svc.api_ok(result)


@catalog_bp.get("/collected-resources/random")
def resources_random():
    """随机推荐；可选 startTime（Unix 秒）只取之后创建的资源。"""
    catalog = get_plugin(current_app).catalog
    page_size = pagination.positive_or_default(request.args.get("pageSize"), DEFAULT_RANDOM_SIZE)
    page_size = svc.clamp_int(page_size, lo=1, hi=MAX_PAGE_SIZE)
    return svc.api_ok(catalog.random_sample(page_size=page_size, since=request.args.get("startTime")))


@catalog_bp.get("/collected-resources/hot")
def resources_hot():
    """浏览量最高的资源。"""
    catalog = get_plugin(current_app).catalog
    limit = pagination.positive_or_default(request.args.get("limit"), DEFAULT_HOT_LIMIT)
    limit = svc.clamp_int(limit, lo=1, hi=MAX_PAGE_SIZE)
    return svc.api_ok(catalog.hot_resources(limit=limit))


@catalog_bp.get("/resource/<unique_id>")
def resource_detail(unique_id: str):
    """资源详情（顺带给浏览量加随机增量）。"""
    catalog = get_plugin(current_app).catalog
    return svc.api_ok(catalog.resource_detail(unique_id))


@catalog_bp.get("/friend-links")
def friend_links():
    """启用的友链；来源站点（Referer）命中的置顶，all=true 时不截断。"""
    plugin = get_plugin(current_app)
    result = plugin.catalog.friend_links(
        referer=request.referrer,
        show_all=svc.parse_bool(request.args.get("all")),
        limit=plugin.friend_link_limit,
    )
    return svc.api_ok(result)


@catalog_bp.post("/friend-links")
def upsert_friend_link():
    """新增或更新友链；新增前按规范化网址查重。"""
    payload = svc.parse_body(FriendLinkUpsert, request.get_json(silent=True))
    link = get_plugin(current_app).catalog.upsert_friend_link(payload)
    return svc.api_ok(link)
