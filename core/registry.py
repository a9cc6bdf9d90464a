"""插件注册表：启动时显式构建，每个插件的初始化只执行一次。"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class Once:
    """一次性闸门：并发调用者里只有一个真正执行，其余等待并拿到同样的结果。"""

    def __init__(self):
        self._lock = threading.Lock()
        self._done = False
        self._error: Optional[BaseException] = None

    @property
    def done(self) -> bool:
        return self._done

    def do(self, fn) -> None:
        if self._done:
            if self._error is not None:
                raise self._error
            return
        with self._lock:
            if not self._done:
                try:
                    fn()
                except Exception as exc:
                    self._error = exc
                    raise
                finally:
                    self._done = True
            elif self._error is not None:
                raise self._error


class CatalogPlugin:
    """目录插件的能力接口：search / initialize，可选 register_routes。"""

    name = "base"

    def __init__(self):
        self._init_once = Once()

    @property
    def initialized(self) -> bool:
        return self._init_once.done

    def ensure_initialized(self) -> None:
        self._init_once.do(self.initialize)

    def initialize(self) -> None:
        """子类覆盖：建表、写种子数据等。"""

    def search(self, keyword: str, ext: Optional[Dict[str, Any]] = None) -> list:
        raise NotImplementedError

    def register_routes(self, app) -> None:
        """可选：插件自带的 HTTP 路由。"""


class PluginRegistry:
    def __init__(self):
        self._plugins: Dict[str, CatalogPlugin] = {}

    def register(self, plugin: CatalogPlugin) -> CatalogPlugin:
        if plugin.name in self._plugins:
            raise ValueError(f"plugin {plugin.name!r} already registered")
        self._plugins[plugin.name] = plugin
        return plugin

    def get(self, name: str) -> Optional[CatalogPlugin]:
        return self._plugins.get(name)

    def names(self) -> List[str]:
        return list(self._plugins)

    def initialize_all(self) -> None:
        for plugin in self._plugins.values():
            plugin.ensure_initialized()
            logger.info("Plugin %s initialized", plugin.name)

    def register_routes(self, app) -> None:
        for plugin in self._plugins.values():
            plugin.register_routes(app)
