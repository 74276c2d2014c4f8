from datetime import datetime
from sqlalchemy import UniqueConstraint
from climbcomp.extensions import db

class Completion(db.Model):
    __tablename__ = "completion"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("user_account.id"),
        nullable=False,
        index=True,
    )

    block_id = db.Column(
        db.Integer,
        db.ForeignKey("block.id"),
        nullable=False,
        index=True,
    )

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        # existence of the row is the "completed" signal
        UniqueConstraint("user_id", "block_id", name="uq_completion_user_block"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "block_id": self.block_id,
        }
