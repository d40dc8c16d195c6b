"""初始化数据库表并写入预置 IBDP 量规。"""
import sys
from pathlib import Path

# 添加项目根目录到 path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ibdp_coach.config import get_settings
from ibdp_coach.db import Base, SessionLocal, engine, ensure_sqlite_directory
from ibdp_coach.migrations import run_migrations
from ibdp_coach.models import Rubric
from ibdp_coach.services.rubrics import seed_preset_rubrics


def seed():
    print("=" * 50)
    print("初始化预置量规")
    print("=" * 50)

    ensure_sqlite_directory(get_settings().database_url)
    Base.metadata.create_all(bind=engine)
    applied = run_migrations(engine)
    if applied:
        print(f"  已应用迁移: {', '.join(applied)}")

    with SessionLocal() as db:
        created = seed_preset_rubrics(db)
        total = db.query(Rubric).count()

    if created:
        print(f"  ✓ 新增 {created} 个量规")
    else:
        print("  量规已存在，跳过")
    print(f"  当前量规总数: {total}")


if __name__ == "__main__":
    seed()
