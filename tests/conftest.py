import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# ---- テスト用DBパス: db.py の import より前に設定する ----
_TMP_DIR = Path(tempfile.mkdtemp(prefix="assetverse_"))
os.environ["APP_DB_PATH"] = str(_TMP_DIR / "test_assets.db")


def hr_headers(email="hr@acme.test", user_id="hr-1"):
    return {"X-User-Id": user_id, "X-User-Email": email, "X-User-Role": "hr"}


def employee_headers(email, user_id=None):
    return {"X-User-Id": user_id or email, "X-User-Email": email, "X-User-Role": "employee"}


@pytest.fixture(scope="session")
def app_module():
    import main

    return main


@pytest.fixture()
def client(app_module):
    with TestClient(app_module.app) as c:
        yield c


@pytest.fixture()
def db_session(app_module):
    db = app_module.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_db(app_module, db_session):
    # packages は起動時シードのまま残す
    from sqlalchemy import delete
    from orm import AssetORM, AssetRequestORM, UserORM

    db_session.execute(delete(AssetRequestORM))
    db_session.execute(delete(AssetORM))
    db_session.execute(delete(UserORM))
    db_session.commit()
    yield


@pytest.fixture()
def acme(db_session):
    """An HR user for Acme plus two employees."""
    import crud

    crud.upsert_user(
        db_session,
        email="hr@acme.test",
        name="Hana HR",
        role="hr",
        company_name="Acme",
        subscription="basic",
        package_limit=5,
    )
    crud.upsert_user(db_session, email="emma@acme.test", name="Emma", role="employee", position="Engineer")
    crud.upsert_user(db_session, email="finn@acme.test", name="Finn", role="employee", position="Designer")
    return "Acme"
