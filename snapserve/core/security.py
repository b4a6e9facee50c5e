from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from snapserve.db.session import get_db
from snapserve.models.user import User, UserRole, role_at_least
from snapserve.models.restaurant import Restaurant
from snapserve.core.config import settings

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def create_access_token(data: dict, expires_delta: timedelta | None = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    if isinstance(data.get("role"), UserRole):
        to_encode["role"] = data["role"].value
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str):
    """
    Decode and verify a JWT token without database lookup.
    Raises JWTError if token is invalid or expired.
    Returns the decoded payload.
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise JWTError("Invalid or expired token")


def verify_token(token: str, db: Session) -> User:
    credentials_error = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
    except JWTError:
        raise credentials_error

    user_id = payload.get("sub")
    if user_id is None:
        raise credentials_error

    user = db.query(User).filter(User.id == int(user_id)).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is not active")
    return user


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    return verify_token(token, db)


def require_role(minimum: UserRole):
    """
    Factory for a dependency that admits users at or above ``minimum``.

    Usage:
        require_manager = require_role(UserRole.manager)

        @router.get("/reports")
        def reports(current_user: User = Depends(require_manager)):
            ...
    """
    def role_checker(current_user: User = Depends(get_current_user)):
        if not role_at_least(current_user.role, minimum):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {minimum.value} or higher",
            )
        return current_user
    return role_checker


require_admin = require_role(UserRole.admin)
require_manager = require_role(UserRole.manager)
require_staff = require_role(UserRole.staff)


def get_current_restaurant(
    current_user: User = Depends(require_admin), db: Session = Depends(get_db)
) -> Restaurant:
    """Restaurant owned by the authenticated admin."""
    restaurant = (
        db.query(Restaurant)
        .filter(Restaurant.owner_id == current_user.id)
        .order_by(Restaurant.id)
        .first()
    )
    if not restaurant:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No restaurant found for this admin",
        )
    return restaurant
