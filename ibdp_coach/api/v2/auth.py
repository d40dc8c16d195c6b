"""用户认证API - HMAC 签名 Token（无外部JWT依赖）。"""

import base64
import hashlib
import hmac
import json
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Header, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ibdp_coach.config import get_settings
from ibdp_coach.db import get_db
from ibdp_coach.models import AppRole, User
from ibdp_coach.services.users import get_user_by_username, grant_role

logger = logging.getLogger(__name__)

router = APIRouter()

PASSWORD_ITERATIONS = 120_000


# === Schemas ===

class Token(BaseModel):
    access_token: str
    token_type: str


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6)
    full_name: Optional[str] = None
    school_name: Optional[str] = None
    consent_given: bool = False
    role: AppRole = AppRole.STUDENT


class UserResponse(BaseModel):
    id: int
    username: str
    full_name: Optional[str]
    school_name: Optional[str]
    consent_given: bool
    roles: List[str]


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        full_name=user.full_name,
        school_name=user.school_name,
        consent_given=user.consent_given,
        roles=user.role_names,
    )


# === Token 工具函数 ===

def hash_password(password: str, salt: Optional[str] = None) -> str:
    """PBKDF2-SHA256，存储格式 ``salt$hex``。"""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), PASSWORD_ITERATIONS
    ).hex()
    return f"{salt}${digest}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    salt, _, _ = hashed_password.partition("$")
    return hmac.compare_digest(hash_password(plain_password, salt), hashed_password)


def _sign(payload_b64: str) -> str:
    secret = get_settings().secret_key
    return hmac.new(secret.encode(), payload_b64.encode(), hashlib.sha256).hexdigest()


def create_token(user_id: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(hours=get_settings().token_expire_hours)
    payload = {"sub": user_id, "exp": expire.isoformat()}
    payload_b64 = base64.urlsafe_b64encode(json.dumps(payload).encode()).decode()
    return f"{payload_b64}.{_sign(payload_b64)}"


def decode_token(token: str) -> Optional[dict]:
    """校验签名与过期时间，失败返回 None。"""
    parts = token.split(".")
    if len(parts) != 2:
        return None
    payload_b64, signature = parts
    try:
        if not hmac.compare_digest(signature.encode(), _sign(payload_b64).encode()):
            return None
        payload = json.loads(base64.urlsafe_b64decode(payload_b64).decode())
        exp = datetime.fromisoformat(payload["exp"])
    except (ValueError, KeyError, TypeError):
        return None
    if datetime.now(timezone.utc) > exp:
        return None
    return payload


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> User:
    """从Token获取当前用户。"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not authorization or not authorization.startswith("Bearer "):
        raise credentials_exception

    payload = decode_token(authorization[7:])
    if not payload or payload.get("sub") is None:
        logger.debug("Rejected bearer token")
        raise credentials_exception

    user = db.get(User, payload["sub"])
    if user is None:
        raise credentials_exception
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """要求 admin 角色。"""
    if not current_user.has_role(AppRole.ADMIN):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return current_user


def require_teacher_or_admin(current_user: User = Depends(get_current_user)) -> User:
    """要求教师或管理员角色。"""
    if not (current_user.has_role(AppRole.TEACHER) or current_user.has_role(AppRole.ADMIN)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Teacher or admin role required"
        )
    return current_user


# === API 端点 ===

@router.post("/register", response_model=UserResponse)
async def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """用户注册。admin 角色只能通过配置或脚本授予。"""
    if user_data.role == AppRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Admin role cannot be self-assigned"
        )
    if get_user_by_username(db, user_data.username):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")

    user = User(
        username=user_data.username,
        password_hash=hash_password(user_data.password),
        full_name=user_data.full_name,
        school_name=user_data.school_name,
        consent_given=user_data.consent_given,
    )
    db.add(user)
    grant_role(db, user, user_data.role)
    if user_data.username in get_settings().admin_usernames:
        grant_role(db, user, AppRole.ADMIN)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s with roles %s", user.username, user.role_names)
    return to_user_response(user)


@router.post("/login", response_model=Token)
async def login(
    username: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    """用户登录，返回Token。"""
    user = get_user_by_username(db, username)
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
        )
    return {"access_token": create_token(user.id), "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """获取当前登录用户信息。"""
    return to_user_response(current_user)
