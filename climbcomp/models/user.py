from datetime import datetime
from climbcomp.extensions import db
from climbcomp.models.enums import Role

class User(db.Model):
    __tablename__ = "user_account"

    id = db.Column(db.Integer, primary_key=True)

    full_name = db.Column(db.String(160), nullable=False)

    # Sign-in is a plain lookup by email (no password hardening)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)

    bib_number = db.Column(db.Integer, nullable=False, unique=True, index=True)

    role = db.Column(db.String(20), nullable=False, default=Role.PARTICIPANT.value)

    # Ranking dimensions, fixed at registration
    gender = db.Column(db.String(20), nullable=False)
    category = db.Column(db.String(20), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    @property
    def is_participant(self) -> bool:
        return self.role == Role.PARTICIPANT.value

    @property
    def is_arbiter(self) -> bool:
        return self.role == Role.ARBITER.value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "bib_number": self.bib_number,
            "role": self.role,
            "gender": self.gender,
            "category": self.category,
        }
