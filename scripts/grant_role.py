"""为已注册用户授予或撤销角色。

用法::

    python scripts/grant_role.py <username> <student|teacher|admin> [--revoke]
"""
import argparse
import sys
from pathlib import Path

# 添加项目根目录到 path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ibdp_coach.db import session_scope
from ibdp_coach.models import AppRole
from ibdp_coach.services.users import get_user_by_username, grant_role, revoke_role


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Grant or revoke a user role")
    parser.add_argument("username")
    parser.add_argument("role", choices=[role.value for role in AppRole])
    parser.add_argument("--revoke", action="store_true", help="revoke instead of grant")
    args = parser.parse_args(argv)

    role = AppRole(args.role)
    with session_scope() as db:
        user = get_user_by_username(db, args.username)
        if user is None:
            print(f"用户不存在: {args.username}")
            return 1
        changed = revoke_role(db, user, role) if args.revoke else grant_role(db, user, role)
        print(f"{'已更新' if changed else '无变化'}: {user.username} -> {user.role_names}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
