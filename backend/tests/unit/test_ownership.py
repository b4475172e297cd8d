import pytest
from unittest.mock import MagicMock
from uuid import uuid4
from sqlalchemy.exc import IntegrityError

from tagclaim.models.nfc_tag import NfcTag, TagStatus
from tagclaim.services.errors import AlreadyClaimedBySelf, NotAvailable, TagNotFound
from tagclaim.services.ownership import OwnershipCoordinator

T1 = "TAG-ONE-0000000000000001"
T2 = "TAG-TWO-0000000000000002"


def claimed_tags_for(db_session, user_id):
    db_session.expire_all()
    return db_session.query(NfcTag).filter(
        NfcTag.owner_id == user_id, NfcTag.status == TagStatus.CLAIMED
    ).all()


def assert_ownership_consistent(db_session):
    db_session.expire_all()
    for tag in db_session.query(NfcTag).all():
        claimed = tag.status == TagStatus.CLAIMED
        assert claimed == (tag.owner_id is not None) == (tag.claimed_at is not None)


def test_ensure_returns_existing_tag(coordinator, registry):
    existing = registry.create(T1)

    tag = coordinator.ensure(T1)

    assert tag.id == existing.id


def test_ensure_provisions_unknown_tag(coordinator, db_session):
    tag = coordinator.ensure(T1)
    db_session.commit()

    assert tag.status == TagStatus.AVAILABLE
    assert tag.is_injected is True
    assert tag.tag_url == f"https://pivy.me/tag/{T1}"
    assert db_session.query(NfcTag).count() == 1


def test_ensure_without_auto_provision_raises(db_session, registry):
    coordinator = OwnershipCoordinator(db_session, registry, auto_provision=False)

    with pytest.raises(TagNotFound):
        coordinator.ensure(T1)
    assert db_session.query(NfcTag).count() == 0


def test_ensure_reads_winner_after_losing_insert_race(coordinator, registry, db_session):
    existing = registry.create(T1)
    real_find = registry.find
    calls = []

    def racing_find(tag_id):
        # First read happens before the concurrent insert commits
        calls.append(tag_id)
        if len(calls) == 1:
            return None
        return real_find(tag_id)

    registry.find = racing_find

    tag = coordinator.ensure(T1)

    assert tag.id == existing.id
    assert len(calls) == 2
    assert db_session.query(NfcTag).count() == 1


def test_claim_available_tag(coordinator, registry, make_user):
    user = make_user("alice")
    registry.create(T1)

    tag = coordinator.claim(T1, user.id)

    assert tag.status == TagStatus.CLAIMED
    assert tag.owner_id == user.id
    assert tag.claimed_at is not None


def test_claim_second_tag_releases_first(coordinator, registry, make_user, db_session):
    user = make_user("alice")
    registry.create(T1)
    registry.create(T2)

    coordinator.claim(T1, user.id)
    second = coordinator.claim(T2, user.id)

    assert second.status == TagStatus.CLAIMED
    assert second.owner_id == user.id
    first = registry.get(T1)
    assert first.status == TagStatus.AVAILABLE
    assert first.owner_id is None
    assert first.claimed_at is None
    assert [t.tag_id for t in claimed_tags_for(db_session, user.id)] == [T2]
    assert_ownership_consistent(db_session)


def test_claim_own_tag_again_is_rejected_without_change(coordinator, make_user):
    user = make_user("alice")
    first = coordinator.claim(T1, user.id)
    claimed_at = first.claimed_at

    with pytest.raises(AlreadyClaimedBySelf):
        coordinator.claim(T1, user.id)

    tag = coordinator.lookup_own(user.id)
    assert tag.tag_id == T1
    assert tag.claimed_at == claimed_at


def test_claim_tag_owned_by_someone_else(coordinator, make_user, db_session):
    alice = make_user("alice")
    bob = make_user("bob")
    coordinator.claim(T1, alice.id)
    coordinator.claim(T2, bob.id)

    with pytest.raises(NotAvailable):
        coordinator.claim(T1, bob.id)

    # Bob keeps his own tag when the claim fails
    assert [t.tag_id for t in claimed_tags_for(db_session, bob.id)] == [T2]
    assert [t.tag_id for t in claimed_tags_for(db_session, alice.id)] == [T1]


def test_claim_disabled_tag(coordinator, registry, make_user):
    user = make_user("alice")
    registry.create(T1)
    registry.set_status(T1, TagStatus.DISABLED)

    with pytest.raises(NotAvailable):
        coordinator.claim(T1, user.id)
    assert registry.get(T1).status == TagStatus.DISABLED


def test_claim_provisions_unknown_tag(coordinator, make_user, registry):
    user = make_user("alice")

    tag = coordinator.claim(T1, user.id)

    assert tag.status == TagStatus.CLAIMED
    assert registry.get(T1).is_injected is True


def test_claim_lost_compare_and_set_rolls_back_release(coordinator, registry, make_user, db_session, monkeypatch):
    user = make_user("alice")
    coordinator.claim(T1, user.id)
    registry.create(T2)
    monkeypatch.setattr(registry, "compare_and_claim", lambda *args: False)

    with pytest.raises(NotAvailable):
        coordinator.claim(T2, user.id)

    assert [t.tag_id for t in claimed_tags_for(db_session, user.id)] == [T1]
    assert registry.get(T2).status == TagStatus.AVAILABLE


def test_claim_interrupted_midway_leaves_prior_state(coordinator, registry, make_user, db_session, monkeypatch):
    user = make_user("alice")
    coordinator.claim(T1, user.id)
    registry.create(T2)

    def interrupted(*args):
        raise RuntimeError("client went away")

    monkeypatch.setattr(registry, "compare_and_claim", interrupted)

    with pytest.raises(RuntimeError):
        coordinator.claim(T2, user.id)

    assert [t.tag_id for t in claimed_tags_for(db_session, user.id)] == [T1]
    assert_ownership_consistent(db_session)


def test_claim_commit_integrity_error_reports_not_available():
    mock_db = MagicMock()
    mock_db.commit.side_effect = IntegrityError("UPDATE nfc_tags", {}, Exception("unique"))
    mock_registry = MagicMock()
    tag = MagicMock()
    tag.status = TagStatus.AVAILABLE
    tag.owner_id = None
    mock_registry.lock.return_value = tag
    mock_registry.find_claimed_by_owner.return_value = None
    mock_registry.compare_and_claim.return_value = True

    coordinator = OwnershipCoordinator(mock_db, mock_registry)

    with pytest.raises(NotAvailable):
        coordinator.claim(T1, uuid4())

    assert mock_db.rollback.called


def test_claim_does_not_retry_internally():
    mock_db = MagicMock()
    mock_registry = MagicMock()
    tag = MagicMock()
    tag.status = TagStatus.AVAILABLE
    tag.owner_id = None
    mock_registry.lock.return_value = tag
    mock_registry.find_claimed_by_owner.return_value = None
    mock_registry.compare_and_claim.return_value = False

    coordinator = OwnershipCoordinator(mock_db, mock_registry)

    with pytest.raises(NotAvailable):
        coordinator.claim(T1, uuid4())

    mock_registry.compare_and_claim.assert_called_once()
    assert not mock_db.commit.called


def test_lookup_own_without_claim(coordinator, make_user):
    user = make_user("alice")

    assert coordinator.lookup_own(user.id) is None


def test_repeated_claims_keep_single_claim_per_user(coordinator, make_user, db_session):
    user = make_user("alice")
    tag_ids = [f"SEQUENCE-TAG-00000000000{i}" for i in range(5)]

    for tag_id in tag_ids + tag_ids[:2]:
        coordinator.claim(tag_id, user.id)
        assert len(claimed_tags_for(db_session, user.id)) == 1

    assert coordinator.lookup_own(user.id).tag_id == tag_ids[1]
    assert_ownership_consistent(db_session)
