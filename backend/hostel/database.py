"""
数据库配置 - SQLite 持久化层
数据库仅作为快照存储：整个数据集序列化后保存为一条记录
"""
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base

from hostel.config import settings

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False}
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None):
    """初始化数据库表"""
    from hostel.models import storage  # noqa
    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    # 文件型 SQLite 启用 WAL 模式
    if bind.dialect.name == "sqlite" and bind.url.database not in (None, "", ":memory:"):
        with bind.connect() as conn:
            conn.execute(text("PRAGMA journal_mode=WAL"))
            conn.execute(text("PRAGMA synchronous=NORMAL"))
            conn.commit()
