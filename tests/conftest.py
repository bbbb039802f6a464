import sys
from datetime import datetime
from pathlib import Path

import pytest

# Modules live at the repository root
sys.path.insert(0, str(Path(__file__).parent.parent))

from app import create_app
from config import TestConfig
from errors import PredictionServiceError
from extensions import db
from models import User, Report
from security import hash_password


class StubPredictionClient:
    """Stands in for the prediction service; records every call"""

    def __init__(self):
        self.calls = []
        self.result = {'prediction': 'High Risk', 'confidence': 0.9, 'message': 'ok'}
        self.error = None

    def predict(self, mode, payload):
        self.calls.append((mode, payload))
        if self.error is not None:
            raise PredictionServiceError(mode, self.error)
        return dict(self.result)

    def close(self):
        pass


@pytest.fixture(scope='session')
def app():
    app = create_app(TestConfig, prediction_client=StubPredictionClient())
    yield app


@pytest.fixture(autouse=True)
def clean_tables(app):
    yield
    with app.app_context():
        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()


@pytest.fixture
def prediction_service(app):
    stub = StubPredictionClient()
    app.extensions['prediction_client'] = stub
    return stub


@pytest.fixture
def client(app, prediction_service):
    with app.test_client() as client:
        yield client


@pytest.fixture
def make_user(app):
    def _make_user(name='Farmer', email='farmer@example.com', password='secret'):
        with app.app_context():
            user = User(name=name, email=email, password_hash=hash_password(password))
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make_user


@pytest.fixture
def make_report(app):
    def _make_report(user_id, created_at=None, mode='expert', city='Pune', prediction='Low Risk'):
        with app.app_context():
            report = Report(
                user_id=user_id,
                city=city,
                mode=mode,
                input={'city': city},
                output={'prediction': prediction, 'confidence': 0.5, 'message': 'ok'},
                created_at=created_at or datetime.utcnow(),
            )
            db.session.add(report)
            db.session.commit()
            return report.id
    return _make_report


@pytest.fixture
def logged_in(client, make_user):
    """A client with a session for a freshly created user; returns the user id"""
    user_id = make_user()
    response = client.post('/login', data={'email': 'farmer@example.com', 'password': 'secret'})
    assert response.status_code == 302
    return user_id


def break_next_commit(monkeypatch, error):
    original = db.session.commit
    state = {'failed': False}

    def commit():
        if not state['failed']:
            state['failed'] = True
            raise error
        return original()

    monkeypatch.setattr(db.session, 'commit', commit)
    return state


@pytest.fixture
def failing_commit(monkeypatch):
    """Make the next db commit fail like an unavailable database would"""
    from sqlalchemy.exc import OperationalError
    return break_next_commit(
        monkeypatch, OperationalError('COMMIT', {}, Exception('database is unavailable'))
    )


@pytest.fixture
def conflicting_commit(monkeypatch):
    """Make the next db commit hit the unique email constraint"""
    from sqlalchemy.exc import IntegrityError
    return break_next_commit(
        monkeypatch, IntegrityError('INSERT INTO users', {}, Exception('UNIQUE constraint failed: users.email'))
    )


@pytest.fixture
def broken_queries(monkeypatch):
    """Make model queries in the views fail like an unavailable database would"""
    import views
    from sqlalchemy.exc import OperationalError

    def fail(*args, **kwargs):
        raise OperationalError('SELECT', {}, Exception('database is unavailable'))

    class UnavailableQuery:
        filter_by = staticmethod(fail)

    class UnavailableUser:
        query = UnavailableQuery()

    class UnavailableReport:
        for_user = staticmethod(fail)

    monkeypatch.setattr(views, 'User', UnavailableUser)
    monkeypatch.setattr(views, 'Report', UnavailableReport)
