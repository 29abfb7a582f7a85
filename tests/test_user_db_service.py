from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from core.errors import ErrorKind, StorageError, classify_db_error, user_message
from models.user import UserForm
from services.user_db_service import UserDBService


def form(name="Ana Silva", email="ana@x.com", phone="11987654321", birthdate="1990-05-01"):
    return UserForm(name=name, email=email, phone=phone, birthdate=birthdate)


@pytest.mark.asyncio
async def test_insert_get_update_delete(session):
    db = UserDBService(session)
    async with session.begin():
        user_id = await db.insert_user(form(name="  Ana Silva  ", phone="", birthdate=""))

    async with session.begin():
        user = await db.get_user(user_id)
    assert user == {"id": user_id, "name": "Ana Silva", "email": "ana@x.com", "phone": None, "birthdate": None}

    async with session.begin():
        matched = await db.update_user(user_id, form(name="Ana Souza", phone="1134567890"))
    assert matched == 1

    async with session.begin():
        user = await db.get_user(user_id)
    assert user["name"] == "Ana Souza"
    assert user["phone"] == "1134567890"
    assert user["birthdate"] == date(1990, 5, 1)

    async with session.begin():
        assert await db.delete_user(user_id) == 1
        assert await db.get_user(user_id) is None


@pytest.mark.asyncio
async def test_update_missing_row_matches_nothing(session):
    async with session.begin():
        assert await UserDBService(session).update_user(999, form()) == 0


@pytest.mark.asyncio
async def test_list_is_newest_first(session):
    db = UserDBService(session)
    async with session.begin():
        first = await db.insert_user(form(email="a@b.com"))
        second = await db.insert_user(form(email="c@d.com"))
    async with session.begin():
        users = await db.list_users()
    assert [u["id"] for u in users] == [second, first]


@pytest.mark.asyncio
async def test_unique_index_rejects_duplicate_email(session):
    db = UserDBService(session)
    async with session.begin():
        await db.insert_user(form())
    with pytest.raises(IntegrityError) as excinfo:
        async with session.begin():
            await db.insert_user(form(name="Outra"))
    assert classify_db_error(excinfo.value) is ErrorKind.CONFLICT


def test_classify_db_error():
    orig = Exception("driver detail")
    assert classify_db_error(IntegrityError("INSERT", {}, orig)) is ErrorKind.CONFLICT
    assert classify_db_error(OperationalError("SELECT", {}, orig)) is ErrorKind.UNAVAILABLE
    assert classify_db_error(ProgrammingError("SELECT", {}, orig)) is ErrorKind.UNKNOWN
    assert classify_db_error(StorageError(ErrorKind.UNAVAILABLE)) is ErrorKind.UNAVAILABLE


def test_user_message_never_contains_detail():
    msg = user_message(ErrorKind.UNAVAILABLE, "Erro ao cadastrar usuário")
    assert msg.startswith("Erro ao cadastrar usuário: ")
    assert "driver" not in msg
