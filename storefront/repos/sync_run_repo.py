# storefront/repos/sync_run_repo.py
from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.orm import Session

from storefront.data.models.sync_run import SyncRunModel


class SyncRunRepo:
    def __init__(self, db: Session):
        self.db = db

    def record(self, run: SyncRunModel) -> SyncRunModel:
        self.db.add(run)
        self.db.commit()
        return run

    def delete_older_than(self, cutoff: datetime) -> int:
        result = self.db.execute(
            delete(SyncRunModel).where(SyncRunModel.created_at < cutoff)
        )
        self.db.commit()
        return result.rowcount
