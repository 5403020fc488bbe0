from datetime import datetime, timezone, timedelta
from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from ballot.config import Settings

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/token", auto_error=False)


def create_access_token(identity: str, settings: Settings, expires_delta=None):
    to_encode = {"sub": identity}
    if expires_delta:
        to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    else:
        to_encode.update({"exp": datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def get_caller(request: Request, token: str = Depends(oauth2_scheme)) -> str:
    """Identity of the caller, taken from the bearer token's subject."""
    if not token:
        raise HTTPException(status_code=401, detail="Missing token")
    settings: Settings = request.app.state.settings
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    identity = payload.get("sub")
    if not identity:
        raise HTTPException(status_code=401, detail="Invalid token")
    return identity
