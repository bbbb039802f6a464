from extensions import db
from datetime import datetime


class User(db.Model):
    """User model for authentication"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    # Relationships
    reports = db.relationship('Report', backref='user', lazy=True, cascade='all, delete-orphan')

    def __repr__(self):
        return f"<User {self.id} {self.email}>"


class Report(db.Model):
    """One prediction request and the answer the prediction service gave"""
    __tablename__ = 'reports'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    city = db.Column(db.String(120))
    mode = db.Column(db.String(20), nullable=False)  # 'expert' or 'basic'
    input = db.Column(db.JSON, nullable=False)  # submitted form fields
    output = db.Column(db.JSON, nullable=False)  # prediction, confidence, message
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    @property
    def prediction(self):
        return (self.output or {}).get('prediction')

    @property
    def confidence(self):
        return (self.output or {}).get('confidence')

    @property
    def message(self):
        return (self.output or {}).get('message')

    @classmethod
    def for_user(cls, user_id):
        """Every report owned by the user, most recent first"""
        return (
            cls.query.filter_by(user_id=user_id)
            .order_by(cls.created_at.desc(), cls.id.desc())
            .all()
        )
