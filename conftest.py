import os

# Must be set before app.py is imported
os.environ['DATABASE_URL'] = 'sqlite://'

import pytest

from models import db, Restaurant, Table


@pytest.fixture
def flask_app(tmp_path):
    from app import app

    app.config.update(TESTING=True, UPLOAD_FOLDER=str(tmp_path), PUBLIC_BASE_URL=None)

    with app.app_context():
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture
def seeded(flask_app):
    """One restaurant with two tables"""
    restaurant = Restaurant(name='Harbour Grill', slug='harbour-grill')
    db.session.add(restaurant)
    db.session.flush()

    t1 = Table(restaurant_id=restaurant.id, label='T1', x_position=40, y_position=60)
    t2 = Table(restaurant_id=restaurant.id, label='T2')
    db.session.add_all([t1, t2])
    db.session.commit()

    return {'restaurant': restaurant, 't1': t1, 't2': t2}
