from datetime import datetime
from climbcomp.extensions import db
from climbcomp.models.enums import Difficulty

class Block(db.Model):
    __tablename__ = "block"

    id = db.Column(db.Integer, primary_key=True)

    # Number painted on the wall, e.g. 17
    number = db.Column(db.Integer, nullable=False, unique=True, index=True)

    colour = db.Column(db.String(40), nullable=False)
    difficulty = db.Column(db.String(40), nullable=False, index=True)

    # Flat points for non-finals blocks; ignored for the Scoreable tier
    base_score = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    @property
    def is_scoreable(self) -> bool:
        return self.difficulty == Difficulty.SCOREABLE.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "number": self.number,
            "colour": self.colour,
            "difficulty": self.difficulty,
            "base_score": self.base_score,
            "is_scoreable": self.is_scoreable,
        }
