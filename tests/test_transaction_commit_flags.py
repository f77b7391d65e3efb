import pytest

import crud
from models import AssetIn


def _asset(db_session, quantity=2, commit=True):
    body = AssetIn(name="Tablet", image="img", asset_type="Returnable", total_quantity=quantity)
    return crud.create_asset(db_session, body, hr_email="hr@acme.test", company_name="Acme", commit=commit)


def test_create_asset_commit_false_requires_manual_commit(db_session):
    created = _asset(db_session, commit=False)

    db_session.commit()
    db_session.expire_all()

    loaded = crud.get_asset(db_session, created.id)
    assert loaded is not None
    assert loaded.available_quantity == 2


def test_create_asset_commit_false_rollback_discards_change(db_session):
    created = _asset(db_session, commit=False)

    db_session.rollback()
    db_session.expire_all()

    assert crud.get_asset(db_session, created.id) is None


def test_adjust_available_guards(db_session):
    asset = _asset(db_session, quantity=1)

    # already full
    assert crud.adjust_available(db_session, asset.id, +1) is False

    assert crud.adjust_available(db_session, asset.id, -1) is True
    assert crud.get_asset(db_session, asset.id).available_quantity == 0

    # never below zero
    assert crud.adjust_available(db_session, asset.id, -1) is False
    assert crud.get_asset(db_session, asset.id).available_quantity == 0

    assert crud.adjust_available(db_session, asset.id, +1) is True
    assert crud.get_asset(db_session, asset.id).available_quantity == 1

    assert crud.adjust_available(db_session, "missing", -1) is False

    with pytest.raises(ValueError):
        crud.adjust_available(db_session, asset.id, 2)


def test_adjust_available_commit_false_rollback_discards_change(db_session):
    asset = _asset(db_session, quantity=2)

    assert crud.adjust_available(db_session, asset.id, -1, commit=False) is True
    assert crud.get_asset(db_session, asset.id).available_quantity == 1

    db_session.rollback()
    db_session.expire_all()

    assert crud.get_asset(db_session, asset.id).available_quantity == 2


def test_set_request_status_is_compare_and_set(db_session):
    asset = _asset(db_session)
    req = crud.create_request(
        db_session,
        asset=asset,
        requester_email="emma@acme.test",
        requester_name="Emma",
        note=None,
    )
    assert req.status == "pending"
    assert req.note == ""

    assert crud.set_request_status(
        db_session,
        req.id,
        expected="pending",
        new="approved",
        fields={"approval_date": crud.utcnow(), "processed_by": "hr@acme.test"},
    ) is True
    approved = crud.get_request(db_session, req.id)
    assert approved.status == "approved"
    assert approved.processed_by == "hr@acme.test"

    # stale expectation loses
    assert crud.set_request_status(db_session, req.id, expected="pending", new="rejected") is False
    assert crud.get_request(db_session, req.id).status == "approved"


def test_set_request_status_commit_false_rollback_discards_change(db_session):
    asset = _asset(db_session)
    req = crud.create_request(
        db_session,
        asset=asset,
        requester_email="emma@acme.test",
        requester_name=None,
        note="x",
    )

    crud.set_request_status(db_session, req.id, expected="pending", new="rejected", commit=False)
    db_session.rollback()
    db_session.expire_all()

    assert crud.get_request(db_session, req.id).status == "pending"


def test_resize_asset_commit_false_requires_manual_commit(db_session):
    asset = _asset(db_session, quantity=2)

    assert crud.resize_asset(db_session, asset.id, 4, commit=False) is True
    db_session.commit()
    db_session.expire_all()

    loaded = crud.get_asset(db_session, asset.id)
    assert loaded.total_quantity == 4
    assert loaded.available_quantity == 4
