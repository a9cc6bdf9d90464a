import os


def _mysql_uri_from_env() -> str:
    user = os.getenv("DB_USER", "root")
    password = os.getenv("DB_PASS", "root")
    host = os.getenv("DB_HOST", "127.0.0.1")
    port = os.getenv("DB_PORT", "3306")
    name = os.getenv("DB_NAME", "soula")
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}?charset=utf8mb4"


class Config:
    """Flask configuration: static defaults, overridable from the environment."""

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL") or _mysql_uri_from_env()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True, "pool_recycle": 3600}
    JSON_AS_ASCII = False

    # 资源管理接口组的共享口令（请求头 X-Token）
    SOULA_TOKEN = os.getenv("SOULA_TOKEN") or "soula-token-2026"

    # 热搜统计后台线程池大小；测试环境下改为同步执行
    HOT_TERM_WORKERS = int(os.getenv("HOT_TERM_WORKERS", "2"))
    HOT_TERM_SYNC = False

    FRIEND_LINK_DISPLAY_LIMIT = 8
    SEARCH_RESULT_LIMIT = 50


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SOULA_TOKEN = "test-token"
    HOT_TERM_SYNC = True
