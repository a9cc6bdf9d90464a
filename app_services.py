"""路由层共用的小工具（为了减少文件数量集中在一个模块里）。

阅读提示：
1) 这里只放“可复用”的函数：统一响应、参数清洗、口令校验。
2) 路由层（`app_routes.py`）只做 request/response/鉴权，业务组合在 `core/catalog.py`。
3) 算法本身（热搜归类、浏览量增长、友链排序、分页）都在 `core/` 下。
"""

from __future__ import annotations

import hmac

from flask import jsonify
from pydantic import BaseModel, ValidationError as PydanticValidationError

from core.errors import Unauthorized, ValidationError

TOKEN_HEADER = "X-Token"

# ============================================================
# 1) 统一响应：{code, message, data}
# ============================================================


def api_ok(data=None, *, message: str = "success"):
    """成功返回：code=0；pydantic 模型按 JSON 模式展开。"""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    return jsonify({"code": 0, "message": message, "data": data})


def api_error(message: str, *, http_status: int = 400, code: int | None = None, **extra):
    """失败返回：({code,message,data:null,...}, http_status)，code 默认与 HTTP 状态一致。"""
    return jsonify({"code": code if code is not None else http_status, "message": message, "data": None, **extra}), http_status


# ============================================================
# 2) 参数清洗
# ============================================================


def clamp_int(value: int, *, lo: int, hi: int) -> int:
    """把整数夹在 [lo, hi] 之间（防止前端乱传参数）。"""
    return max(lo, min(int(value), hi))


def parse_bool(value, default: bool = False) -> bool:
    if value is None:
        return default
    s = str(value).strip().lower()
    if s in {"1", "true", "yes", "on"}:
        return True
    if s in {"0", "false", "no", "off"}:
        return False
    return default


def parse_body(model: type[BaseModel], payload):
    """用 pydantic 校验请求体；失败转成 ValidationError（400）。"""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid parameters: JSON object body required")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "body" for err in exc.errors())
        raise ValidationError(f"Invalid parameters: {fields}") from exc


# ============================================================
# 3) 共享口令
# ============================================================


def check_shared_token(presented: str | None, expected: str) -> None:
    """资源管理接口组的共享口令校验，不通过抛 Unauthorized。"""
    if not presented:
        raise Unauthorized("Unauthorized: missing Soula Token", error_code="SOULA_TOKEN_MISSING")
    if not expected or not hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8")):
        raise Unauthorized("Unauthorized: Invalid or missing Soula Token", error_code="SOULA_TOKEN_INVALID")
