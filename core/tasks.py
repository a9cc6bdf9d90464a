"""后台任务：有界线程池，用于热搜统计这类“发出去就不管”的副作用。

每个任务在独立的 app context 里运行，结束后释放数据库 session；异常只记日志。
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class BackgroundTasks:
    def __init__(self, app=None, *, max_workers: int = 2, synchronous: bool = False):
        self.app = None
        self.max_workers = max_workers
        self.synchronous = synchronous
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        self.app = app
        self.max_workers = max(1, int(app.config.get("HOT_TERM_WORKERS", self.max_workers)))
        self.synchronous = bool(app.config.get("HOT_TERM_SYNC", self.synchronous))
        app.extensions["background_tasks"] = self

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="soula-bg")
            return self._executor

    def submit(self, fn: Callable[..., Any], *args, **kwargs) -> Optional[Future]:
        """提交任务；同步模式下直接在当前线程执行（测试用）。"""
        if self.synchronous:
            self._run(fn, args, kwargs)
            return None
        return self._get_executor().submit(self._run, fn, args, kwargs)

    def _run(self, fn, args, kwargs) -> None:
        from models import db

        with self.app.app_context():
            try:
                fn(*args, **kwargs)
            except Exception:
                logger.exception("Background task %s failed", getattr(fn, "__name__", fn))
            finally:
                db.session.remove()

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)