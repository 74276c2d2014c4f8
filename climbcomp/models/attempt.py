from sqlalchemy import UniqueConstraint
from climbcomp.extensions import db
from climbcomp.helpers.time import to_utc_iso

class Attempt(db.Model):
    __tablename__ = "attempt"

    id = db.Column(db.Integer, primary_key=True)

    # The participant climbing
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

    # Who recorded it
    arbiter_id = db.Column(
        db.Integer,
        db.ForeignKey("user_account.id"),
        nullable=False,
    )

    # 1-based ordinal within (user_id, block_id)
    attempt_number = db.Column(db.Integer, nullable=False)

    is_completion = db.Column(db.Boolean, nullable=False, default=False)

    # naive UTC, stamped by the ledger at write time
    attempted_at = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "block_id",
            "attempt_number",
            name="uq_attempt_user_block_number",
        ),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "block_id": self.block_id,
            "arbiter_id": self.arbiter_id,
            "attempt_number": self.attempt_number,
            "is_completion": self.is_completion,
            "attempted_at": to_utc_iso(self.attempted_at),
        }
