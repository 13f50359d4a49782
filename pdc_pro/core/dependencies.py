from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pdc_pro.adapters.image_host_adapter_interface import ImageHostAdapterInterface
from pdc_pro.core.security import decode_access_token
from pdc_pro.models.user import User
from pdc_pro.repositories.user_repository import UserRepository

# OAuth2 scheme for token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


async def get_current_user(
    token: str = Depends(oauth2_scheme)
) -> User:
    """
    Dependency to get the current authenticated user.

    Usage in routes:
        current_user: User = Depends(get_current_user)
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    # Decode token
    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception

    user_id = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    user = await UserRepository().get_by_id(user_id)
    if user is None:
        raise credentials_exception

    return user


def get_image_uploader() -> ImageHostAdapterInterface:
    """
    Dependency returning the configured image host adapter.
    Tests override it with app.dependency_overrides.
    """
    from pdc_pro.services.image_upload_service import image_upload_service
    return image_upload_service
