from dependency_injector import providers
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hive.database.database import get_session, get_session_with_transaction
from hive.main.container.container import Container


def get_container(session: AsyncSession = Depends(get_session)) -> Container:
    """Container whose services commit on their own."""
    return Container(session=providers.Object(session))


def get_container_with_transaction(
    session: AsyncSession = Depends(get_session_with_transaction),
) -> Container:
    """Container whose session commits once the request handler returns."""
    return Container(session=providers.Object(session))
