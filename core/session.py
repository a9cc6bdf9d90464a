"""数据库 session 的小工具。"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError


def commit_or_rollback(session) -> None:
    """提交事务；失败时先回滚，再把原异常抛给调用方决定怎么处理。"""
    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise
