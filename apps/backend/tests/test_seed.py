from fleetledger import models
from fleetledger.seed import DEFAULT_CATEGORIES, seed


def test_seed_is_idempotent(db_session):
    seed(db_session)
    seed(db_session)

    names = {c.name for c in db_session.query(models.TransactionCategory).all()}
    assert names == {name for name, _ in DEFAULT_CATEGORIES}
    admins = db_session.query(models.Personnel).filter_by(username="admin").all()
    assert len(admins) == 1
    assert admins[0].role == models.PersonnelRole.ADMIN


def test_seeded_categories_are_listed(client, db_session):
    seed(db_session)
    r = client.get("/api/categories")
    assert r.status_code == 200
    assert len(r.json()) == len(DEFAULT_CATEGORIES)
