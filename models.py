from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

db = SQLAlchemy()

class Restaurant(db.Model):
    __tablename__ = 'restaurants'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(100), unique=True, nullable=False, index=True)

    tables = db.relationship('Table', backref='restaurant', lazy=True, cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug
        }

class Table(db.Model):
    __tablename__ = 'tables'
    __table_args__ = (db.UniqueConstraint('restaurant_id', 'label'),)

    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, db.ForeignKey('restaurants.id'), nullable=False, index=True)
    label = db.Column(db.String(50), nullable=False)
    x_position = db.Column(db.Integer)
    y_position = db.Column(db.Integer)

    requests = db.relationship('ServiceRequest', backref='table', lazy=True, cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'restaurant_id': self.restaurant_id,
            'label': self.label,
            'x_position': self.x_position,
            'y_position': self.y_position
        }

class ServiceRequest(db.Model):
    __tablename__ = 'requests'

    id = db.Column(db.Integer, primary_key=True)
    table_id = db.Column(db.Integer, db.ForeignKey('tables.id'), nullable=False, index=True)
    type = db.Column(db.String(50), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='pending')
    photo_url = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'table_id': self.table_id,
            'type': self.type,
            'status': self.status,
            'photo_url': self.photo_url,
            'created_at': self.created_at.isoformat()
        }
